"""Name → document resolution with "did you mean" suggestions."""

from __future__ import annotations

import difflib
import logging

from ..constants import COLLECTION_CLIENTS, COLLECTION_SHOWS, COLLECTION_STAFF
from ..exceptions import NotFoundError
from ..shapes import client_display_name, staff_display_name
from ..store import DocumentStore

logger = logging.getLogger(__name__)

ENTITY_LABELS = {
    COLLECTION_STAFF: "Staff member",
    COLLECTION_CLIENTS: "Client",
    COLLECTION_SHOWS: "Show",
}


def display_name(collection: str, doc: dict) -> str:
    if collection == COLLECTION_STAFF:
        return staff_display_name(doc)
    if collection == COLLECTION_CLIENTS:
        return client_display_name(doc)
    return str(doc.get("name") or "")


def entity_label(collection: str) -> str:
    return ENTITY_LABELS.get(collection, collection.rstrip("s").capitalize() or "Record")


async def suggest_names(store: DocumentStore, collection: str, name: str, limit: int) -> list[str]:
    """
    Up to *limit* candidate display names for a failed lookup.

    Substring matches come first, then close spellings, then names sharing a
    word of three or more letters with the query.
    """
    suggestions: list[str] = []

    def _add(candidate: str) -> None:
        if candidate and candidate not in suggestions and len(suggestions) < limit:
            suggestions.append(candidate)

    for doc in await store.find_by_name(collection, name, exact=False):
        _add(display_name(collection, doc))

    if len(suggestions) < limit:
        docs = await store.get_all(collection)
        by_lower: dict[str, str] = {}
        for doc in docs:
            label = display_name(collection, doc)
            if label:
                by_lower.setdefault(label.lower(), label)
        query = (name or "").strip().lower()
        for match in difflib.get_close_matches(query, list(by_lower), n=limit, cutoff=0.6):
            _add(by_lower[match])
        words = [w for w in query.split() if len(w) >= 3]
        for lower, label in by_lower.items():
            if any(w in lower for w in words):
                _add(label)

    return suggestions


async def resolve_by_name(
    store: DocumentStore,
    collection: str,
    name: str,
    *,
    suggestion_limit: int | None = None,
) -> dict:
    """
    Exact-mode lookup, then a match on the derived display name (staff
    first/last names, clients known only by their contact).

    Raises NotFoundError carrying suggestions when nothing matches.
    """
    if suggestion_limit is None:
        from ..config import settings
        suggestion_limit = settings.suggestion_limit

    doc = await store.find_by_name(collection, name, exact=True)
    if doc:
        return doc

    query = (name or "").strip().lower()
    if query:
        for candidate in await store.get_all(collection):
            if display_name(collection, candidate).lower() == query:
                return candidate

    suggestions = await suggest_names(store, collection, name, suggestion_limit)
    logger.info("No %s matching %r (suggestions: %s)", collection, name, suggestions)
    raise NotFoundError(entity_label(collection), name, suggestions)
