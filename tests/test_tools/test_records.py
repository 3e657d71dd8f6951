"""Tests for staffdesk.ai.tools.records: collection-generic executors."""

from __future__ import annotations

import pytest

from staffdesk.actions import apply_action
from staffdesk.ai.tools import NoOpResult, PendingWrite, ReadResult
from staffdesk.exceptions import NotFoundError, ValidationFailedError


@pytest.mark.asyncio
async def test_update_record_nests_updates(registry):
    result = await registry.dispatch("update_record", {
        "collection": "availability", "id": "a1", "updates": {"availableDates": ["2025-03-01"]},
    })
    assert isinstance(result, PendingWrite)
    assert result.action.data == {
        "collection": "availability", "id": "a1", "updates": {"availableDates": ["2025-03-01"]},
    }
    outcome = await apply_action(registry.store, result.action)
    assert outcome.success
    assert (await registry.store.get_by_id("availability", "a1"))["availableDates"] == ["2025-03-01"]


@pytest.mark.asyncio
async def test_update_record_noop(registry):
    result = await registry.dispatch("update_record", {"collection": "shows", "id": "sh2", "updates": {"venue": "AmericasMart"}})
    assert isinstance(result, NoOpResult)


@pytest.mark.asyncio
async def test_update_record_unknown_collection(registry):
    with pytest.raises(ValidationFailedError):
        await registry.dispatch("update_record", {"collection": "invoices", "id": "x", "updates": {"a": 1}})


@pytest.mark.asyncio
async def test_update_record_by_name_routes_staff_through_allow_list(registry):
    result = await registry.dispatch("update_record_by_name", {
        "collection": "staff", "name": "Jon Smith", "updates": {"wage": "$40", "secret": "x"},
    })
    assert result.action.type == "update_staff"
    assert result.action.data == {"id": "s1", "payRate": 40}


@pytest.mark.asyncio
async def test_update_record_by_name_rejects_other_collections(registry):
    with pytest.raises(ValidationFailedError):
        await registry.dispatch("update_record_by_name", {"collection": "shows", "name": "Spring Gala", "updates": {}})


@pytest.mark.asyncio
async def test_delete_record(registry):
    result = await registry.dispatch("delete_record", {"collection": "availability", "id": "a2"})
    assert isinstance(result, ReadResult)
    assert result.data == {"deleted": True, "collection": "availability"}
    with pytest.raises(NotFoundError):
        await registry.dispatch("delete_record", {"collection": "availability", "id": "a2"})


@pytest.mark.asyncio
async def test_batch_create(registry):
    result = await registry.dispatch("batch_create", {
        "collection": "shows", "records": [{"name": "A", "date": "2025-06-01"}, {"name": "B", "venue": None}],
    })
    assert isinstance(result, ReadResult)
    assert [r["name"] for r in result.data] == ["A", "B"]
    assert all("id" not in r for r in result.data)
    assert len(await registry.store.get_all("shows")) == 5


@pytest.mark.asyncio
async def test_batch_create_requires_records(registry):
    with pytest.raises(ValidationFailedError):
        await registry.dispatch("batch_create", {"collection": "shows", "records": []})
