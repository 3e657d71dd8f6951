"""Tests for staffdesk/store/service.py: DocumentStore CRUD, lookup and cache."""

import pytest

from staffdesk.exceptions import StorageError
from staffdesk.sanitize import is_timestamp_map
from staffdesk.store import DocumentStore


@pytest.mark.asyncio
async def test_create_stamps_timestamps_and_returns_id(store):
    created = await store.create("clients", {"name": "Acme", "id": "ignored"})
    assert created["id"] != "ignored"
    assert is_timestamp_map(created["createdAt"])
    fetched = await store.get_by_id("clients", created["id"])
    assert fetched["name"] == "Acme"


@pytest.mark.asyncio
async def test_get_by_id_blank_returns_none(store):
    assert await store.get_by_id("clients", "") is None
    assert await store.get_by_id("clients", "missing") is None


@pytest.mark.asyncio
async def test_update_missing_document_raises(store):
    with pytest.raises(StorageError):
        await store.update("staff", "missing", {"role": "Lead"})


@pytest.mark.asyncio
async def test_get_all_is_cached_until_a_write(db, clock):
    store = DocumentStore(db, cache_ttl=60, clock=clock)
    await db.insert("staff", {"name": "Jon"}, doc_id="s1")
    assert len(await store.get_all("staff")) == 1

    # Written behind the store's back: the cached list is served
    await db.insert("staff", {"name": "Maria"}, doc_id="s2")
    assert len(await store.get_all("staff")) == 1
    assert len(await store.get_all("staff", use_cache=False)) == 2

    # Any write through the store drops that collection's entry
    await store.update("staff", "s1", {"role": "Lead"})
    assert len(await store.get_all("staff")) == 2


@pytest.mark.asyncio
async def test_cache_expires_with_injected_clock(db, clock):
    store = DocumentStore(db, cache_ttl=60, clock=clock)
    await store.get_all("shows")
    await db.insert("shows", {"name": "Gala"}, doc_id="sh1")
    assert await store.get_all("shows") == []
    clock.advance(61)
    assert [s["id"] for s in await store.get_all("shows")] == ["sh1"]


@pytest.mark.asyncio
async def test_stores_do_not_share_a_cache(db, clock):
    a = DocumentStore(db, cache_ttl=60, clock=clock)
    b = DocumentStore(db, cache_ttl=60, clock=clock)
    await a.get_all("staff")
    await b.create("staff", {"name": "Jon"})
    assert await a.get_all("staff") == []
    assert len(await b.get_all("staff")) == 1
    assert a.cache_stats()["keys"] == ["all_staff"]


class TestFindByName:
    @pytest.mark.asyncio
    async def test_exact_is_case_insensitive(self, seeded_store):
        doc = await seeded_store.find_by_name("staff", "jon smith", exact=True)
        assert doc["id"] == "s1"
        doc = await seeded_store.find_by_name("staff", "JON SMITH", exact=True)
        assert doc["id"] == "s1"

    @pytest.mark.asyncio
    async def test_exact_falls_back_to_id_then_email(self, seeded_store):
        assert (await seeded_store.find_by_name("clients", "c2", exact=True))["id"] == "c2"
        assert (await seeded_store.find_by_name("staff", "priya@example.com", exact=True))["id"] == "s3"
        assert await seeded_store.find_by_name("staff", "Nobody", exact=True) is None

    @pytest.mark.asyncio
    async def test_fuzzy_only_returns_substring_matches(self, seeded_store):
        query = "acme"
        results = await seeded_store.find_by_name("clients", query, exact=False)
        assert [r["id"] for r in results] == ["c1"]
        for doc in results:
            assert any(
                query in str(doc.get(k) or "").lower() for k in ("id", "name", "company", "email")
            )

    @pytest.mark.asyncio
    async def test_fuzzy_matches_email_and_id(self, seeded_store):
        results = await seeded_store.find_by_name("staff", "example.com", exact=False)
        assert {r["id"] for r in results} == {"s1", "s2", "s3"}
        results = await seeded_store.find_by_name("staff", "s2", exact=False)
        assert [r["id"] for r in results] == ["s2"]


@pytest.mark.asyncio
async def test_search_is_substring_on_one_field(seeded_store):
    rows = await seeded_store.search("shows", "venue", "market")
    assert {r["id"] for r in rows} == {"sh1", "sh3"}


@pytest.mark.asyncio
async def test_batch_create_update_delete(store):
    created = await store.batch_create("shows", [{"name": "A"}, {"name": "B"}])
    ids = [c["id"] for c in created]
    await store.batch_update("shows", [{"id": ids[0], "data": {"venue": "Hall"}}])
    assert (await store.get_by_id("shows", ids[0]))["venue"] == "Hall"
    await store.batch_delete("shows", ids)
    assert await store.get_all("shows") == []


@pytest.mark.asyncio
async def test_batch_update_requires_ids(store):
    with pytest.raises(StorageError):
        await store.batch_update("shows", [{"data": {"venue": "Hall"}}])


@pytest.mark.asyncio
async def test_convenience_queries(seeded_store):
    assert [b["id"] for b in await seeded_store.get_bookings_by_status("pending")] == ["b2"]
    assert [s["id"] for s in await seeded_store.get_staff_by_skill("modeling")] == ["s2"]
    assert [s["id"] for s in await seeded_store.get_staff_by_role("Lead")] == ["s1"]
    upcoming = await seeded_store.get_upcoming_shows(today="2025-03-15")
    assert [s["id"] for s in upcoming] == ["sh2"]
