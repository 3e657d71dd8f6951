"""Tests for staffdesk/store/database.py: schema init, JSON queries, atomic batches."""

import pytest

from staffdesk.exceptions import StorageError, ValidationFailedError
from staffdesk.store.database import encode_document, new_document_id, to_timestamp_map


@pytest.mark.asyncio
async def test_init_creates_documents_table(db):
    async with db.get_connection() as conn:
        rows = await conn.execute_fetchall(
            "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
        )
        names = {r["name"] for r in rows}
    assert "documents" in names


@pytest.mark.asyncio
async def test_wal_mode_enabled(db):
    """Journal mode should be WAL after init."""
    async with db.get_connection() as conn:
        row = (await conn.execute_fetchall("PRAGMA journal_mode"))[0]
    assert row[0] == "wal"


@pytest.mark.asyncio
async def test_insert_and_fetch(db):
    doc_id = await db.insert("staff", {"name": "Jon"})
    assert len(doc_id) == 20
    assert await db.fetch_one("staff", doc_id) == {"name": "Jon"}
    assert await db.fetch_one("clients", doc_id) is None


@pytest.mark.asyncio
async def test_merge_update_keeps_other_fields(db):
    await db.insert("staff", {"name": "Jon", "role": "Lead"}, doc_id="s1")
    await db.merge_update("staff", "s1", {"role": "Model"})
    assert await db.fetch_one("staff", "s1") == {"name": "Jon", "role": "Model"}


@pytest.mark.asyncio
async def test_merge_update_missing_document_raises(db):
    with pytest.raises(StorageError):
        await db.merge_update("staff", "nope", {"role": "Model"})


@pytest.mark.asyncio
async def test_batch_is_all_or_nothing(db):
    await db.insert("staff", {"name": "Jon"}, doc_id="s1")
    with pytest.raises(StorageError):
        await db.write_batch([
            ("set", "staff", "s2", {"name": "Maria"}),
            ("update", "staff", "missing", {"name": "x"}),
        ])
    assert await db.fetch_one("staff", "s2") is None


@pytest.mark.asyncio
async def test_query_operators(db):
    await db.insert("staff", {"name": "Jon", "role": "Lead", "payRate": 25, "skills": ["sales"]}, doc_id="s1")
    await db.insert("staff", {"name": "Maria", "role": "Model", "payRate": 30, "skills": ["modeling"]}, doc_id="s2")

    rows = await db.query("staff", [{"field": "role", "operator": "==", "value": "Lead"}])
    assert [doc_id for doc_id, _ in rows] == ["s1"]

    rows = await db.query("staff", [{"field": "payRate", "operator": ">", "value": 26}])
    assert [doc_id for doc_id, _ in rows] == ["s2"]

    rows = await db.query("staff", [{"field": "skills", "operator": "array-contains", "value": "modeling"}])
    assert [doc_id for doc_id, _ in rows] == ["s2"]

    rows = await db.query("staff", [{"field": "name", "op": "in", "value": ["Jon", "Maria"]}],
                          order_field="payRate", order_direction="desc", limit=1)
    assert [doc_id for doc_id, _ in rows] == ["s2"]


@pytest.mark.asyncio
async def test_query_rejects_unknown_operator(db):
    with pytest.raises(ValidationFailedError):
        await db.query("staff", [{"field": "name", "operator": "~", "value": "x"}])


@pytest.mark.asyncio
async def test_delete_reports_whether_removed(db):
    await db.insert("shows", {"name": "Gala"}, doc_id="sh1")
    assert await db.delete("shows", "sh1") is True
    assert await db.delete("shows", "sh1") is False


def test_new_ids_are_unique():
    assert len({new_document_id() for _ in range(100)}) == 100


def test_encode_rejects_unserialisable():
    with pytest.raises(ValidationFailedError):
        encode_document({"bad": object()})


def test_timestamp_map_form():
    from datetime import datetime, timezone
    assert to_timestamp_map(datetime(2025, 1, 1, tzinfo=timezone.utc)) == {
        "seconds": 1735689600,
        "nanoseconds": 0,
    }
