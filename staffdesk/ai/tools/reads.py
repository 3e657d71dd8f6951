"""Read tool executors. All results are sanitised; none require confirmation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...constants import (
    COLLECTION_BOOKINGS,
    COLLECTION_CLIENTS,
    COLLECTION_SHOWS,
    COLLECTION_STAFF,
    UI_BOOKING_LIST,
    UI_STAFF_RECOMMENDATIONS,
)
from ...domain import get_analytics, recommend_staff, resolve_by_name
from ...domain.resolve import entity_label
from ...exceptions import NotFoundError
from ...sanitize import normalize_timestamps_deep, sanitize_for_display
from .args import (
    optional_dict,
    optional_int,
    optional_list,
    optional_text,
    require_collection,
    require_text,
)
from .results import ReadResult

if TYPE_CHECKING:
    from .registry import ToolRegistry

logger = logging.getLogger(__name__)


async def exec_get_bookings(registry: ToolRegistry, inp: dict) -> ReadResult:
    rows = await registry.queries.get_bookings(
        client_name=optional_text(inp, "clientName"),
        show_name=optional_text(inp, "showName"),
        status=optional_text(inp, "status"),
        start_date=optional_text(inp, "startDate"),
        end_date=optional_text(inp, "endDate"),
    )
    return ReadResult(sanitize_for_display(rows))


async def exec_get_staff(registry: ToolRegistry, inp: dict) -> ReadResult:
    rows = await registry.queries.get_staff(
        role=optional_text(inp, "role"),
        skill=optional_text(inp, "skill"),
    )
    return ReadResult(sanitize_for_display(rows))


async def exec_get_clients(registry: ToolRegistry, inp: dict) -> ReadResult:
    rows = await registry.queries.get_clients(company=optional_text(inp, "company"))
    return ReadResult(sanitize_for_display(rows))


async def exec_get_shows(registry: ToolRegistry, inp: dict) -> ReadResult:
    rows = await registry.queries.get_shows(
        venue=optional_text(inp, "venue"),
        status=optional_text(inp, "status"),
        upcoming=bool(inp.get("upcoming")),
    )
    return ReadResult(sanitize_for_display(rows))


async def exec_get_document_by_id(registry: ToolRegistry, inp: dict) -> ReadResult:
    collection = require_collection(inp)
    doc_id = require_text(inp, "id")
    doc = await registry.store.get_by_id(collection, doc_id)
    if doc is None:
        raise NotFoundError(entity_label(collection), doc_id)
    return ReadResult(sanitize_for_display(doc))


async def exec_find_staff_by_name(registry: ToolRegistry, inp: dict) -> ReadResult:
    doc = await resolve_by_name(
        registry.store, COLLECTION_STAFF, require_text(inp, "name"),
        suggestion_limit=registry.suggestion_limit,
    )
    return ReadResult(sanitize_for_display(doc))


async def exec_find_client_by_name(registry: ToolRegistry, inp: dict) -> ReadResult:
    doc = await resolve_by_name(
        registry.store, COLLECTION_CLIENTS, require_text(inp, "name"),
        suggestion_limit=registry.suggestion_limit,
    )
    return ReadResult(sanitize_for_display(doc))


async def exec_query_collection(registry: ToolRegistry, inp: dict) -> ReadResult:
    """Generic query. Bookings come back with a booking_list rendering hint."""
    collection = require_collection(inp)
    filters = [f for f in optional_list(inp, "filters") if isinstance(f, dict)]
    rows = await registry.queries.query_collection(
        collection,
        filters=filters,
        date_range=optional_dict(inp, "dateRange") or None,
        select=[str(s) for s in optional_list(inp, "select")],
        order_by=optional_dict(inp, "orderBy") or None,
        expand=optional_dict(inp, "expand") or None,
        limit=optional_int(inp, "limit"),
    )
    if collection == COLLECTION_BOOKINGS:
        return ReadResult(
            data=sanitize_for_display(rows),
            ui={"type": UI_BOOKING_LIST, "items": normalize_timestamps_deep(rows)},
        )
    return ReadResult(sanitize_for_display(rows))


async def exec_search_records(registry: ToolRegistry, inp: dict) -> ReadResult:
    collection = require_collection(inp)
    rows = await registry.store.search(
        collection, require_text(inp, "field"), require_text(inp, "searchTerm")
    )
    return ReadResult(sanitize_for_display(rows))


async def exec_list_names(registry: ToolRegistry, inp: dict) -> ReadResult:
    collection = require_collection(
        inp, allowed=(COLLECTION_STAFF, COLLECTION_CLIENTS, COLLECTION_SHOWS)
    )
    names = await registry.queries.list_names(collection)
    return ReadResult(sanitize_for_display(names))


async def exec_get_analytics(registry: ToolRegistry, inp: dict) -> ReadResult:
    result = await get_analytics(
        registry.store,
        require_text(inp, "type"),
        start_date=optional_text(inp, "startDate"),
        end_date=optional_text(inp, "endDate"),
        limit=optional_int(inp, "limit"),
    )
    return ReadResult(sanitize_for_display(result))


async def exec_recommend_staff(registry: ToolRegistry, inp: dict) -> ReadResult:
    result = await recommend_staff(
        registry.store,
        show_id=optional_text(inp, "showId"),
        show_name=optional_text(inp, "showName"),
        date=optional_text(inp, "date"),
        dates=[str(d) for d in optional_list(inp, "dates")],
        start_date=optional_text(inp, "startDate"),
        end_date=optional_text(inp, "endDate"),
        role=optional_text(inp, "role"),
        required_skills=[str(s) for s in optional_list(inp, "requiredSkills")],
        limit=optional_int(inp, "limit"),
    )
    logger.info(
        "recommend_staff: %d candidate(s) for %d date(s)%s",
        len(result["recommendations"]), len(result["dates"]),
        " (date-overlap fallback)" if result["fallback"] else "",
    )
    return ReadResult(
        data=sanitize_for_display(result),
        ui={"type": UI_STAFF_RECOMMENDATIONS, "items": result["recommendations"]},
    )


async def exec_count_shows_worked_by_staff(registry: ToolRegistry, inp: dict) -> ReadResult:
    result = await registry.queries.count_shows_worked_by_staff(require_text(inp, "name"))
    return ReadResult(sanitize_for_display(result))


async def exec_clients_for_staff_shows(registry: ToolRegistry, inp: dict) -> ReadResult:
    result = await registry.queries.clients_for_staff_shows(require_text(inp, "name"))
    return ReadResult(sanitize_for_display(result))
