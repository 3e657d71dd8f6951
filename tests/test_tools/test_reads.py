"""Tests for staffdesk.ai.tools.reads executors."""

from __future__ import annotations

import pytest

from staffdesk.ai.tools import ReadResult
from staffdesk.constants import UI_BOOKING_LIST, UI_STAFF_RECOMMENDATIONS
from staffdesk.exceptions import NotFoundError, ValidationFailedError


def _has_key(value, key) -> bool:
    if isinstance(value, dict):
        return key in value or any(_has_key(v, key) for v in value.values())
    if isinstance(value, list):
        return any(_has_key(v, key) for v in value)
    return False


@pytest.mark.asyncio
async def test_get_bookings_hides_ids_and_adds_names(registry):
    result = await registry.dispatch("get_bookings", {})
    assert isinstance(result, ReadResult)
    for key in ("id", "clientId", "showId", "staffIds"):
        assert not _has_key(result.data, key)
    assert {b["clientName"] for b in result.data} == {"Acme", "Northwind Denim"}


@pytest.mark.asyncio
async def test_get_bookings_by_status(registry):
    result = await registry.dispatch("get_bookings", {"status": "pending"})
    assert [b["showName"] for b in result.data] == ["Atlanta Apparel"]


@pytest.mark.asyncio
async def test_get_staff_by_role_and_skill(registry):
    assert [s["email"] for s in (await registry.dispatch("get_staff", {"role": "Model"})).data] == ["maria@example.com"]
    assert [s["email"] for s in (await registry.dispatch("get_staff", {"skill": "setup"})).data] == ["jon@example.com"]


@pytest.mark.asyncio
async def test_get_shows_by_venue(registry):
    result = await registry.dispatch("get_shows", {"venue": "AmericasMart"})
    assert [s["name"] for s in result.data] == ["Atlanta Apparel"]


@pytest.mark.asyncio
async def test_find_client_by_name(registry):
    result = await registry.dispatch("find_client_by_name", {"name": "ACME"})
    assert result.data["company"] == "Acme Apparel Inc."
    assert "id" not in result.data


@pytest.mark.asyncio
async def test_find_staff_by_partial_name(registry):
    result = await registry.dispatch("find_staff_by_name", {"name": "Priya Sha"})
    assert result.data["email"] == "priya@example.com"


@pytest.mark.asyncio
async def test_find_staff_by_name_not_found(registry):
    with pytest.raises(NotFoundError):
        await registry.dispatch("find_staff_by_name", {"name": "Zed Quill"})


@pytest.mark.asyncio
async def test_get_document_by_id(registry):
    result = await registry.dispatch("get_document_by_id", {"collection": "bookings", "id": "b1"})
    assert result.data["createdAt"] == "2025-01-01T00:00:00.000Z"
    assert "id" not in result.data


@pytest.mark.asyncio
async def test_query_collection_bookings_carry_ui_hint(registry):
    result = await registry.dispatch("query_collection", {
        "collection": "bookings",
        "orderBy": {"field": "status"},
        "limit": 1,
        "expand": {"expandStaffNames": True},
    })
    payload = result.to_payload()
    assert payload["__ui"]["type"] == UI_BOOKING_LIST
    assert len(payload["data"]) == 1
    assert payload["data"][0]["status"] == "confirmed"
    assert payload["data"][0]["datesNeeded"][0]["staffNames"] == ["Jon Smith"]


@pytest.mark.asyncio
async def test_query_collection_limit_after_projection(registry):
    result = await registry.dispatch("query_collection", {
        "collection": "shows",
        "filters": [{"field": "venue", "op": "==", "value": "Dallas Market Hall"}],
        "select": ["name", "notes"],
        "orderBy": {"field": "notes", "direction": "desc"},
        "limit": "1",
    })
    assert result.data == [{"name": "Spring Gala", "notes": "duplicate entry"}]


@pytest.mark.asyncio
async def test_query_collection_bad_limit(registry):
    with pytest.raises(ValidationFailedError):
        await registry.dispatch("query_collection", {"collection": "shows", "limit": "lots"})


@pytest.mark.asyncio
async def test_search_records(registry):
    result = await registry.dispatch("search_records", {"collection": "staff", "field": "role", "searchTerm": "ambassador"})
    assert [s["email"] for s in result.data] == ["priya@example.com"]


@pytest.mark.asyncio
async def test_list_names_strips_ids(registry):
    result = await registry.dispatch("list_names", {"collection": "clients"})
    assert result.data == [{"name": "Acme"}, {"name": "Northwind Denim"}]


@pytest.mark.asyncio
async def test_list_names_rejects_bookings(registry):
    with pytest.raises(ValidationFailedError):
        await registry.dispatch("list_names", {"collection": "bookings"})


@pytest.mark.asyncio
async def test_get_analytics(registry):
    result = await registry.dispatch("get_analytics", {"type": "total_bookings"})
    assert result.data == {"totalBookings": 2}


@pytest.mark.asyncio
async def test_recommend_staff_fallback_is_not_empty(registry):
    result = await registry.dispatch("recommend_staff", {"showId": "sh3", "startDate": "2025-03-01", "endDate": "2025-03-02"})
    payload = result.to_payload()
    assert payload["__ui"]["type"] == UI_STAFF_RECOMMENDATIONS
    assert payload["data"]["fallback"] is True
    assert [r["name"] for r in payload["data"]["recommendations"]] == ["Jon Smith"]


@pytest.mark.asyncio
async def test_count_shows_and_clients_for_staff(registry):
    count = await registry.dispatch("count_shows_worked_by_staff", {"name": "Jon Smith"})
    assert count.data["showsWorked"] == 1
    clients = await registry.dispatch("clients_for_staff_shows", {"name": "Jon Smith"})
    assert clients.data["clients"] == ["Acme"]
