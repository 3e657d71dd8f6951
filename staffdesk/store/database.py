"""
SQLite document database for staffdesk.

Stores schemaless JSON documents keyed by (collection, id) in one table and
answers simple equality/range/array-membership queries with SQLite's JSON1
functions. Timestamps are persisted in the ``{seconds, nanoseconds}`` wire
form used by hosted document stores, so readers must normalise them.
Uses WAL mode; writes are serialised with an asyncio lock so multi-statement
batches commit or roll back as one unit on the shared connection.
"""

import asyncio
import json
import logging
import os
import uuid
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Any, AsyncIterator, Iterable

import aiosqlite

from ..exceptions import StorageError, ValidationFailedError

logger = logging.getLogger(__name__)


_DDL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS documents (
    collection  TEXT NOT NULL,
    id          TEXT NOT NULL,
    data        TEXT NOT NULL DEFAULT '{}',
    created_at  TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (collection, id)
);
CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents(collection);
"""

# Operator → SQL template over json_extract(data, path). "{col}" is the extracted value.
_COMPARISONS = {
    "==": "{col} = ?",
    "!=": "{col} != ?",
    "<": "{col} < ?",
    "<=": "{col} <= ?",
    ">": "{col} > ?",
    ">=": "{col} >= ?",
}

SUPPORTED_OPERATORS = frozenset(_COMPARISONS) | {"array-contains", "in"}


def server_timestamp() -> dict:
    """Current UTC time in the stored ``{seconds, nanoseconds}`` form."""
    return to_timestamp_map(datetime.now(timezone.utc))


def to_timestamp_map(moment: datetime) -> dict:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    epoch = moment.timestamp()
    seconds = int(epoch // 1)
    return {"seconds": seconds, "nanoseconds": moment.microsecond * 1000}


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_timestamp_map(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serialisable")


def encode_document(data: dict) -> str:
    try:
        return json.dumps(data, default=_json_default, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ValidationFailedError(f"Document is not serialisable: {e}") from e


def new_document_id() -> str:
    """20-character random id, matching the length of hosted store ids."""
    return uuid.uuid4().hex[:20]


def _json_path(field: str) -> str:
    return '$."' + field.replace('"', "") + '"'


def _bind(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    if isinstance(value, bool):
        return int(value)
    return value


class DocumentDatabase:
    """Manages the SQLite connection and the documents table."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from ..config import settings
            db_path = settings.db_path
        self.db_path = db_path
        self._conn: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()

    async def init(self) -> None:
        """Open connection and run DDL."""
        if self.db_path != ":memory:":
            os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)

        self._conn = await aiosqlite.connect(self.db_path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.executescript(_DDL)
        await self._conn.commit()
        logger.info("Document database initialised: %s", self.db_path)

    async def close(self) -> None:
        if self._conn:
            await self._conn.close()
            self._conn = None

    @asynccontextmanager
    async def get_connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield the shared connection. Callers must not close it."""
        if self._conn is None:
            raise RuntimeError("DocumentDatabase not initialised: call init() first")
        yield self._conn

    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #

    async def fetch_all(self, collection: str) -> list[tuple[str, dict]]:
        """All (id, data) pairs of a collection in insertion order."""
        try:
            async with self.get_connection() as conn:
                rows = await conn.execute_fetchall(
                    "SELECT id, data FROM documents WHERE collection = ? ORDER BY rowid",
                    (collection,),
                )
        except aiosqlite.Error as e:
            raise StorageError(f"Could not read {collection}: {e}") from e
        return [(row["id"], json.loads(row["data"])) for row in rows]

    async def fetch_one(self, collection: str, doc_id: str) -> dict | None:
        try:
            async with self.get_connection() as conn:
                rows = await conn.execute_fetchall(
                    "SELECT data FROM documents WHERE collection = ? AND id = ?",
                    (collection, str(doc_id)),
                )
        except aiosqlite.Error as e:
            raise StorageError(f"Could not read {collection}/{doc_id}: {e}") from e
        if not rows:
            return None
        return json.loads(rows[0]["data"])

    async def query(
        self,
        collection: str,
        filters: Iterable[dict] = (),
        order_field: str | None = None,
        order_direction: str = "asc",
        limit: int | None = None,
    ) -> list[tuple[str, dict]]:
        """
        AND-combined filters of ``{field, operator, value}``.

        Operators: ==, !=, <, <=, >, >=, array-contains, in.
        """
        clauses = ["collection = ?"]
        params: list[Any] = [collection]

        for flt in filters:
            field = flt.get("field")
            operator = flt.get("operator", flt.get("op"))
            value = flt.get("value")
            if not field or operator not in SUPPORTED_OPERATORS:
                raise ValidationFailedError(f"Unsupported filter: {flt!r}")
            path = _json_path(field)
            if operator == "array-contains":
                clauses.append(
                    "EXISTS (SELECT 1 FROM json_each(data, ?) WHERE json_each.value = ?)"
                )
                params.extend([path, _bind(value)])
            elif operator == "in":
                values = list(value or [])
                if not values:
                    return []
                marks = ", ".join("?" for _ in values)
                clauses.append(f"json_extract(data, ?) IN ({marks})")
                params.append(path)
                params.extend(_bind(v) for v in values)
            else:
                col = "json_extract(data, ?)"
                clauses.append(_COMPARISONS[operator].format(col=col))
                params.extend([path, _bind(value)])

        sql = f"SELECT id, data FROM documents WHERE {' AND '.join(clauses)}"
        if order_field:
            direction = "DESC" if str(order_direction).lower() == "desc" else "ASC"
            sql += f" ORDER BY json_extract(data, ?) {direction}, rowid"
            params.append(_json_path(order_field))
        else:
            sql += " ORDER BY rowid"
        if limit:
            sql += " LIMIT ?"
            params.append(int(limit))

        try:
            async with self.get_connection() as conn:
                rows = await conn.execute_fetchall(sql, params)
        except aiosqlite.Error as e:
            raise StorageError(f"Could not query {collection}: {e}") from e
        return [(row["id"], json.loads(row["data"])) for row in rows]

    # ------------------------------------------------------------------ #
    # Writes                                                               #
    # ------------------------------------------------------------------ #

    async def insert(self, collection: str, data: dict, doc_id: str | None = None) -> str:
        ids = await self.write_batch([("set", collection, doc_id or new_document_id(), data)])
        return ids[0]

    async def merge_update(self, collection: str, doc_id: str, data: dict) -> None:
        """Merge top-level fields into an existing document."""
        await self.write_batch([("update", collection, doc_id, data)])

    async def delete(self, collection: str, doc_id: str) -> bool:
        async with self._write_lock:
            try:
                async with self.get_connection() as conn:
                    cursor = await conn.execute(
                        "DELETE FROM documents WHERE collection = ? AND id = ?",
                        (collection, str(doc_id)),
                    )
                    await conn.commit()
            except aiosqlite.Error as e:
                raise StorageError(f"Could not delete {collection}/{doc_id}: {e}") from e
        return cursor.rowcount > 0

    async def write_batch(self, operations: list[tuple[str, str, str, dict | None]]) -> list[str]:
        """
        Apply ``(kind, collection, id, data)`` operations in one transaction.

        kind is "set" (insert/replace), "update" (merge, document must exist)
        or "delete". Either every operation is committed or none is.
        Returns the ids touched, in order.
        """
        touched: list[str] = []
        async with self._write_lock:
            async with self.get_connection() as conn:
                try:
                    for kind, collection, doc_id, data in operations:
                        doc_id = str(doc_id)
                        if kind == "set":
                            await conn.execute(
                                """
                                INSERT OR REPLACE INTO documents (collection, id, data)
                                VALUES (?, ?, ?)
                                """,
                                (collection, doc_id, encode_document(data or {})),
                            )
                        elif kind == "update":
                            rows = await conn.execute_fetchall(
                                "SELECT data FROM documents WHERE collection = ? AND id = ?",
                                (collection, doc_id),
                            )
                            if not rows:
                                raise StorageError(f"No document to update: {collection}/{doc_id}")
                            merged = json.loads(rows[0]["data"])
                            merged.update(data or {})
                            await conn.execute(
                                """
                                UPDATE documents SET data = ?, updated_at = datetime('now')
                                WHERE collection = ? AND id = ?
                                """,
                                (encode_document(merged), collection, doc_id),
                            )
                        elif kind == "delete":
                            await conn.execute(
                                "DELETE FROM documents WHERE collection = ? AND id = ?",
                                (collection, doc_id),
                            )
                        else:
                            raise ValidationFailedError(f"Unknown batch operation: {kind}")
                        touched.append(doc_id)
                    await conn.commit()
                except aiosqlite.Error as e:
                    await conn.rollback()
                    raise StorageError(f"Batch write failed: {e}") from e
                except Exception:
                    await conn.rollback()
                    raise
        return touched
