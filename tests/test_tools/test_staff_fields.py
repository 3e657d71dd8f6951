"""Tests for staffdesk.ai.tools.staff_fields: allow-list, aliases and value parsers."""

from __future__ import annotations

import pytest

from staffdesk.ai.tools.staff_fields import (
    STAFF_FIELD_ALLOWLIST,
    canonical_field,
    normalize_staff_updates,
    parse_pay_rate,
)


class TestCanonicalField:
    @pytest.mark.parametrize("key,expected", [
        ("payRate", "payRate"),
        ("payrate", "payRate"),
        ("Pay Rate", "payRate"),
        ("wage", "payRate"),
        ("shoe_size", "shoeSize"),
        ("Phone Number", "phone"),
        ("EMAIL", "email"),
        ("newName", "name"),
    ])
    def test_aliases(self, key, expected):
        assert canonical_field(key) == expected

    @pytest.mark.parametrize("key", ["favouriteColour", "", "   ", None, 7, "id"])
    def test_unknown_keys(self, key):
        assert canonical_field(key) is None


class TestParsePayRate:
    @pytest.mark.parametrize("value,expected", [
        (22, 22),
        (22.5, 22.5),
        ("$22", 22),
        ("$ 22.50", 22.5),
        ("pay rate: 30", 30),
        ("Pay Rate = $18", 18),
        (" 19 ", 19),
    ])
    def test_parses(self, value, expected):
        assert parse_pay_rate(value) == expected

    @pytest.mark.parametrize("value", ["lots", "", None, True, float("nan"), float("inf"), [22], "22 dollars an hour"])
    def test_rejects(self, value):
        assert parse_pay_rate(value) is None


class TestNormalizeStaffUpdates:
    def test_result_keys_are_always_allow_listed(self):
        raw = {
            "wage": "$20",
            "favouriteColour": "blue",
            "id": "hacked",
            "Shoe Size": "9",
            "notes": "",
            "role": None,
            "skills": "sales, setup",
            "clientId": "c1",
        }
        updates = normalize_staff_updates(raw, {"name": "Jon", "payRate": 15, "skills": []})
        assert set(updates) <= STAFF_FIELD_ALLOWLIST
        assert updates["payRate"] == 20
        assert updates["skills"] == ["sales", "setup"]
        assert "notes" not in updates and "role" not in updates

    def test_unparseable_pay_rate_is_dropped(self):
        assert normalize_staff_updates({"payRate": "a lot"}, {}) == {}

    def test_sizes_redirected_into_application_form(self):
        current = {"applicationFormData": {"height": "5'9\"", "shoeSize": "7"}}
        updates = normalize_staff_updates({"shoeSize": "8", "dress": "S"}, current)
        assert updates == {
            "applicationFormData": {"height": "5'9\"", "shoeSize": "8", "dressSize": "S"},
        }

    def test_sizes_stay_top_level_when_document_has_them(self):
        updates = normalize_staff_updates({"shoeSize": "9"}, {"shoeSize": "8"})
        assert updates == {"shoeSize": "9"}

    def test_partial_form_object_merges_over_stored(self):
        current = {"interviewFormData": {"score": 3, "notes": "ok"}}
        updates = normalize_staff_updates({"interviewFormData": {"score": 4}}, current)
        assert updates["interviewFormData"] == {"score": 4, "notes": "ok"}

    def test_fields_absent_from_document_are_dropped(self):
        current = {"name": "Jon", "role": "Lead"}
        assert normalize_staff_updates({"instagram": "@jon", "role": "Captain"}, current) == {"role": "Captain"}

    def test_name_allowed_on_first_last_records(self):
        updates = normalize_staff_updates({"newName": "Maria L."}, {"firstName": "Maria", "lastName": "Lopez"})
        assert updates == {"name": "Maria L."}
