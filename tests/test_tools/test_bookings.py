"""Tests for staffdesk.ai.tools.bookings executors."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from staffdesk.actions import apply_action
from staffdesk.ai.tools import NoOpResult, PendingWrite, ToolRegistry
from staffdesk.ai.tools.bookings import patch_date_row
from staffdesk.exceptions import NotFoundError, ValidationFailedError
from staffdesk.shapes import dates_needed


def make_mock_store() -> MagicMock:
    store = MagicMock()
    for method in ("get_all", "get_by_id", "find_by_name", "query", "create", "update"):
        setattr(store, method, AsyncMock())
    return store


class TestCreateBooking:
    @pytest.mark.asyncio
    async def test_missing_dates_fails_before_store_access(self):
        store = make_mock_store()
        registry = ToolRegistry(store=store, suggestion_limit=3)
        with pytest.raises(ValidationFailedError):
            await registry.dispatch("create_booking", {"clientName": "Acme", "showName": "Spring Gala"})
        for method in ("get_all", "get_by_id", "find_by_name", "query", "create", "update"):
            getattr(store, method).assert_not_awaited()

    @pytest.mark.asyncio
    async def test_assigned_date_becomes_single_row(self, registry):
        result = await registry.dispatch("create_booking", {
            "clientName": "acme", "showName": "Atlanta Apparel", "assignedDate": "2025-04-07",
        })
        assert isinstance(result, PendingWrite)
        data = result.action.data
        assert data["clientId"] == "c1"
        assert data["clientName"] == "Acme"
        assert data["showId"] == "sh2"
        assert data["status"] == "pending"
        assert data["datesNeeded"] == [{"date": "2025-04-07", "staffCount": 1, "staffIds": []}]
        assert result.action.label == "Create Booking for Acme"
        # Ids are never shown in the preview
        assert "clientId" not in result.preview

    @pytest.mark.asyncio
    async def test_staff_names_resolve_to_ids(self, registry):
        result = await registry.dispatch("create_booking", {
            "clientId": "c2",
            "showName": "Atlanta Apparel",
            "datesNeeded": [{"date": "2025-04-07", "staffCount": 2, "staffNames": ["Jon Smith", "maria lopez"]}],
        })
        data = result.action.data
        assert data["clientName"] == "Northwind Denim"
        assert data["datesNeeded"][0]["staffIds"] == ["s1", "s2"]
        assert "staffNames" not in data["datesNeeded"][0]

    @pytest.mark.asyncio
    async def test_bad_status_rejected(self, registry):
        with pytest.raises(ValidationFailedError):
            await registry.dispatch("create_booking", {"clientName": "Acme", "assignedDate": "2025-04-07", "status": "maybe"})

    @pytest.mark.asyncio
    async def test_unknown_client_suggests(self, registry):
        with pytest.raises(NotFoundError):
            await registry.dispatch("create_booking", {"clientName": "Initech", "assignedDate": "2025-04-07"})


class TestUpdateBookingByNames:
    @pytest.mark.asyncio
    async def test_date_row_staff_ids_patched(self, registry):
        result = await registry.dispatch("update_booking_by_names", {
            "clientName": "Acme",
            "showName": "Spring Gala",
            "date": "2025-03-01",
            "updates": {"staffIds": ["s1", "s2"]},
        })
        assert isinstance(result, PendingWrite)
        rows = result.action.data["updates"]["datesNeeded"]
        assert rows[0]["staffIds"] == ["s1", "s2"]
        assert rows[0]["staffCount"] == 2
        # Other date rows are untouched
        assert rows[1] == {"date": "2025-03-02", "staffCount": 1, "staffIds": ["s1"]}
        assert result.action.data["id"] == "b1"

    @pytest.mark.asyncio
    async def test_new_date_appends_row(self, registry):
        result = await registry.dispatch("update_booking_by_names", {
            "clientName": "Acme", "showName": "Spring Gala", "date": "2025-03-03",
            "updates": {"staffNames": ["Priya Shah"]},
        })
        rows = result.action.data["updates"]["datesNeeded"]
        assert len(rows) == 3
        assert rows[2] == {"date": "2025-03-03", "staffIds": ["s3"], "staffCount": 1}

    @pytest.mark.asyncio
    async def test_staff_names_need_a_date(self):
        store = make_mock_store()
        registry = ToolRegistry(store=store, suggestion_limit=3)
        with pytest.raises(ValidationFailedError, match="date"):
            await registry.dispatch("update_booking_by_names", {
                "clientName": "Acme", "showName": "Spring Gala",
                "updates": {"staffNames": ["Priya Shah"], "status": "confirmed"},
            })
        store.get_all.assert_not_awaited()
        store.find_by_name.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_substring_match_on_both_names(self, registry):
        result = await registry.dispatch("update_booking_by_names", {
            "clientName": "northwind", "showName": "atlanta", "updates": {"status": "confirmed"},
        })
        assert result.action.data == {"id": "b2", "updates": {"status": "confirmed"}}

    @pytest.mark.asyncio
    async def test_no_match_suggests_bookings(self, registry):
        with pytest.raises(NotFoundError) as exc_info:
            await registry.dispatch("update_booking_by_names", {
                "clientName": "Acme", "showName": "Winter Expo", "updates": {"status": "confirmed"},
            })
        assert "Acme - Spring Gala" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unchanged_is_noop(self, registry):
        result = await registry.dispatch("update_booking_by_names", {
            "clientName": "Acme", "showName": "Spring Gala", "date": "2025-03-02",
            "updates": {"staffIds": ["s1"], "status": "confirmed"},
        })
        assert isinstance(result, NoOpResult)

    @pytest.mark.asyncio
    async def test_confirm_round_trip(self, registry):
        result = await registry.dispatch("update_booking_by_names", {
            "clientName": "Acme", "showName": "Spring Gala", "date": "2025-03-01",
            "updates": {"staffIds": ["s1", "s2"]},
        })
        outcome = await apply_action(registry.store, result.action.to_payload())
        assert outcome.success
        stored = await registry.store.get_by_id("bookings", "b1")
        assert dates_needed(stored)[0]["staffIds"] == ["s1", "s2"]
        assert stored["status"] == "confirmed"


class TestUpdateBooking:
    @pytest.mark.asyncio
    async def test_by_id_proposes_diff(self, registry):
        result = await registry.dispatch("update_booking", {"id": "b2", "status": "confirmed", "notes": None})
        assert result.action.data == {"id": "b2", "status": "confirmed"}

    @pytest.mark.asyncio
    async def test_missing_id(self, registry):
        with pytest.raises(NotFoundError):
            await registry.dispatch("update_booking", {"id": "nope", "status": "confirmed"})


def test_patch_date_row_keeps_slot_positions():
    rows = [{"date": "2025-03-01", "staffCount": 3, "staffIds": ["s1", "", "s3"]}]
    patch_date_row(rows, "2025-03-01", {"staffIds": ["s1", "s2", "s3"]})
    assert rows[0]["staffIds"] == ["s1", "s2", "s3"]
    assert rows[0]["staffCount"] == 3
