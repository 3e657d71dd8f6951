"""
DocumentStore: generic CRUD, query and cache facade over the document database.

Every read path returns plain dicts tagged with their ``id``. ``get_all`` is
cached per collection for a fixed TTL; any write to a collection drops that
collection's cache entries. Storage failures propagate to the caller
unchanged; nothing here retries.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from ..constants import (
    COLLECTION_BOOKINGS,
    COLLECTION_CLIENTS,
    COLLECTION_SHOWS,
    COLLECTION_STAFF,
)
from ..exceptions import StorageError
from ..shapes import show_start
from .cache import TTLCache
from .database import DocumentDatabase, new_document_id, server_timestamp

logger = logging.getLogger(__name__)


def _lower(value: Any) -> str:
    return "" if value is None else str(value).lower()


class DocumentStore:
    """Collection-level CRUD and lookup over a :class:`DocumentDatabase`."""

    def __init__(
        self,
        db: DocumentDatabase,
        *,
        cache_ttl: float | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if cache_ttl is None:
            from ..config import settings
            cache_ttl = settings.cache_ttl_seconds
        self._db = db
        self._cache = TTLCache(ttl=cache_ttl, clock=clock) if clock else TTLCache(ttl=cache_ttl)

    # ------------------------------------------------------------------ #
    # Basic CRUD                                                           #
    # ------------------------------------------------------------------ #

    async def get_all(self, collection: str, use_cache: bool = True) -> list[dict]:
        cache_key = f"all_{collection}"
        if use_cache:
            cached = self._cache.get(cache_key)
            if cached is not None:
                logger.debug("Cache hit for %s (%d docs)", collection, len(cached))
                return cached

        rows = await self._db.fetch_all(collection)
        docs = [{"id": doc_id, **data} for doc_id, data in rows]
        if use_cache:
            self._cache.set(cache_key, docs)
        return docs

    async def get_by_id(self, collection: str, doc_id: str) -> dict | None:
        if doc_id is None or str(doc_id) == "":
            return None
        data = await self._db.fetch_one(collection, str(doc_id))
        if data is None:
            return None
        return {"id": str(doc_id), **data}

    async def create(self, collection: str, data: dict) -> dict:
        now = server_timestamp()
        new_data = {**data, "createdAt": now, "updatedAt": now}
        new_data.pop("id", None)
        doc_id = await self._db.insert(collection, new_data)
        self.clear_collection_cache(collection)
        logger.info("Created %s/%s", collection, doc_id,
                    extra={"collection": collection, "doc_id": doc_id})
        return {"id": doc_id, **new_data}

    async def update(self, collection: str, doc_id: str, data: dict) -> dict:
        update_data = {k: v for k, v in data.items() if k != "id"}
        update_data["updatedAt"] = server_timestamp()
        await self._db.merge_update(collection, str(doc_id), update_data)
        self.clear_collection_cache(collection)
        logger.info(
            "Updated %s/%s (%s)", collection, doc_id, ", ".join(sorted(data)),
            extra={"collection": collection, "doc_id": str(doc_id)},
        )
        return {"id": str(doc_id), **update_data}

    async def delete(self, collection: str, doc_id: str) -> bool:
        removed = await self._db.delete(collection, str(doc_id))
        self.clear_collection_cache(collection)
        if removed:
            logger.info("Deleted %s/%s", collection, doc_id, extra={"collection": collection, "doc_id": doc_id})
        else:
            logger.warning("Delete of %s/%s matched no document", collection, doc_id)
        return removed

    # ------------------------------------------------------------------ #
    # Queries                                                              #
    # ------------------------------------------------------------------ #

    async def query(
        self,
        collection: str,
        filters: list[dict] | None = None,
        order_field: str | None = None,
        order_direction: str = "asc",
        limit: int | None = None,
    ) -> list[dict]:
        rows = await self._db.query(
            collection,
            filters or [],
            order_field=order_field,
            order_direction=order_direction,
            limit=limit,
        )
        return [{"id": doc_id, **data} for doc_id, data in rows]

    async def search(self, collection: str, field: str, term: str) -> list[dict]:
        """Case-insensitive substring match on one string field."""
        needle = _lower(term)
        docs = await self.get_all(collection)
        return [
            doc for doc in docs
            if isinstance(doc.get(field), str) and needle in doc[field].lower()
        ]

    async def find_by_name(self, collection: str, name: str, exact: bool = False):
        """
        Resolve a human-typed reference to a document.

        exact=True returns one document or None, trying in order:
        case-insensitive name equality, id equality, then a name/company
        substring or email equality. exact=False returns every document whose
        id, name, company or email contains the query.
        """
        docs = await self.get_all(collection)
        q = _lower(name).strip()

        if exact:
            for doc in docs:
                if isinstance(doc.get("name"), str) and doc["name"].lower() == q:
                    return doc
            for doc in docs:
                if _lower(doc.get("id")) == q:
                    return doc
            if not q:
                return None
            for doc in docs:
                if (
                    (isinstance(doc.get("name"), str) and q in doc["name"].lower())
                    or (isinstance(doc.get("company"), str) and q in doc["company"].lower())
                    or _lower(doc.get("email")) == q
                ):
                    return doc
            return None

        return [
            doc for doc in docs
            if any(q in _lower(doc.get(key)) for key in ("id", "name", "company", "email"))
        ]

    # ------------------------------------------------------------------ #
    # Batch operations                                                     #
    # ------------------------------------------------------------------ #

    async def batch_create(self, collection: str, documents: list[dict]) -> list[dict]:
        now = server_timestamp()
        results = []
        operations = []
        for data in documents:
            doc_id = new_document_id()
            new_data = {k: v for k, v in data.items() if k != "id"}
            new_data.update({"createdAt": now, "updatedAt": now})
            operations.append(("set", collection, doc_id, new_data))
            results.append({"id": doc_id, **new_data})
        await self._db.write_batch(operations)
        self.clear_collection_cache(collection)
        logger.info("Batch created %d document(s) in %s", len(results), collection)
        return results

    async def batch_update(self, collection: str, updates: list[dict]) -> bool:
        """``updates`` is a list of ``{"id": ..., "data": {...}}``."""
        now = server_timestamp()
        operations = []
        for item in updates:
            if not item.get("id"):
                raise StorageError("Every batch update needs an id")
            operations.append(("update", collection, item["id"], {**(item.get("data") or {}), "updatedAt": now}))
        await self._db.write_batch(operations)
        self.clear_collection_cache(collection)
        logger.info("Batch updated %d document(s) in %s", len(operations), collection)
        return True

    async def batch_delete(self, collection: str, ids: list[str]) -> bool:
        await self._db.write_batch([("delete", collection, doc_id, None) for doc_id in ids])
        self.clear_collection_cache(collection)
        logger.info("Batch deleted %d document(s) from %s", len(ids), collection)
        return True

    # ------------------------------------------------------------------ #
    # Cache                                                                #
    # ------------------------------------------------------------------ #

    def clear_collection_cache(self, collection: str) -> None:
        self._cache.invalidate(collection)

    def clear_all_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> dict:
        return {"size": len(self._cache), "keys": self._cache.keys()}

    # ------------------------------------------------------------------ #
    # Collection-specific helpers                                          #
    # ------------------------------------------------------------------ #

    async def get_bookings_by_client(self, client_name: str) -> list[dict]:
        return await self.query(COLLECTION_BOOKINGS, [
            {"field": "clientName", "operator": "==", "value": client_name},
        ])

    async def get_bookings_by_show(self, show_name: str) -> list[dict]:
        return await self.query(COLLECTION_BOOKINGS, [
            {"field": "showName", "operator": "==", "value": show_name},
        ])

    async def get_bookings_by_status(self, status: str) -> list[dict]:
        return await self.query(COLLECTION_BOOKINGS, [
            {"field": "status", "operator": "==", "value": status},
        ])

    async def get_bookings_by_date_range(self, start_date: str, end_date: str) -> list[dict]:
        return await self.query(COLLECTION_BOOKINGS, [
            {"field": "assignedDate", "operator": ">=", "value": start_date},
            {"field": "assignedDate", "operator": "<=", "value": end_date},
        ])

    async def get_staff_by_role(self, role: str) -> list[dict]:
        return await self.query(COLLECTION_STAFF, [
            {"field": "role", "operator": "==", "value": role},
        ])

    async def get_staff_by_skill(self, skill: str) -> list[dict]:
        return await self.query(COLLECTION_STAFF, [
            {"field": "skills", "operator": "array-contains", "value": skill},
        ])

    async def get_shows_by_venue(self, venue: str) -> list[dict]:
        return await self.query(COLLECTION_SHOWS, [
            {"field": "venue", "operator": "==", "value": venue},
        ])

    async def get_shows_by_status(self, status: str) -> list[dict]:
        return await self.query(COLLECTION_SHOWS, [
            {"field": "status", "operator": "==", "value": status},
        ])

    async def get_upcoming_shows(self, today: str | None = None) -> list[dict]:
        """Shows starting today or later, earliest first (``date`` or ``startDate``)."""
        today = today or datetime.now(timezone.utc).date().isoformat()
        shows = await self.get_all(COLLECTION_SHOWS)
        upcoming = [s for s in shows if (show_start(s) or "") >= today and show_start(s)]
        return sorted(upcoming, key=lambda s: show_start(s) or "")

    async def get_clients_by_company(self, company: str) -> list[dict]:
        return await self.query(COLLECTION_CLIENTS, [
            {"field": "company", "operator": "==", "value": company},
        ])
