"""Booking tool executors. Every write here is proposed, never applied."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from ...constants import (
    BOOKING_STATUSES,
    COLLECTION_BOOKINGS,
    COLLECTION_CLIENTS,
    COLLECTION_SHOWS,
    COLLECTION_STAFF,
    DEFAULT_BOOKING_STATUS,
)
from ...domain import resolve_by_name
from ...exceptions import NotFoundError, ValidationFailedError
from ...models import DateNeeded
from ...sanitize import sanitize_for_display
from ...shapes import (
    booking_client_name,
    booking_show_name,
    client_display_name,
    dates_needed,
)
from .args import optional_dict, optional_text, require_text
from .proposals import clean_updates, diff_against, merge_update_args, propose, propose_update
from .results import NoOpResult, PendingWrite

if TYPE_CHECKING:
    from .registry import ToolRegistry

logger = logging.getLogger(__name__)

# datesNeeded row fields a dated update_booking_by_names call may patch
DATE_ROW_FIELDS = ("staffIds", "staffCount", "role", "shift")


def _check_status(status: str) -> None:
    if status not in BOOKING_STATUSES:
        raise ValidationFailedError(
            f"Invalid booking status '{status}'. Use one of: {', '.join(BOOKING_STATUSES)}"
        )


async def _resolve_reference(
    registry: ToolRegistry, collection: str, doc_id: str | None, name: str | None
) -> dict | None:
    if doc_id:
        doc = await registry.store.get_by_id(collection, doc_id)
        if doc is None:
            label = "Client" if collection == COLLECTION_CLIENTS else "Show"
            raise NotFoundError(label, doc_id)
        return doc
    if name:
        return await resolve_by_name(
            registry.store, collection, name, suggestion_limit=registry.suggestion_limit
        )
    return None


async def _staff_ids_for(registry: ToolRegistry, names: list) -> list[str]:
    ids = []
    for name in names:
        if not isinstance(name, str) or not name.strip():
            continue
        staff = await resolve_by_name(
            registry.store, COLLECTION_STAFF, name, suggestion_limit=registry.suggestion_limit
        )
        ids.append(str(staff["id"]))
    return ids


async def _build_date_rows(registry: ToolRegistry, raw_rows: list) -> list[dict]:
    rows = []
    for raw in raw_rows:
        if not isinstance(raw, dict):
            raise ValidationFailedError("Each datesNeeded entry must be an object.")
        row = clean_updates(raw)
        staff_names = row.pop("staffNames", None) or []
        staff_ids = [str(sid) for sid in (row.get("staffIds") or [])]
        staff_ids += await _staff_ids_for(registry, staff_names)
        row["staffIds"] = staff_ids
        if "staffCount" not in row:
            row["staffCount"] = len([sid for sid in staff_ids if sid]) or 1
        try:
            model = DateNeeded.model_validate(row)
        except ValidationError as e:
            raise ValidationFailedError(f"Invalid datesNeeded entry {raw!r}: {e.errors()[0]['msg']}") from e
        rows.append(model.model_dump(by_alias=True, exclude_none=True))
    return rows


async def exec_create_booking(registry: ToolRegistry, inp: dict) -> PendingWrite:
    """
    Propose a new booking.

    Client/show names resolve to ids (and ids back-fill names); staff names
    in datesNeeded resolve to staff ids. A lone assignedDate becomes a
    single one-person date row.
    """
    data = clean_updates(inp)
    if not data.get("assignedDate") and not data.get("datesNeeded"):
        raise ValidationFailedError(
            "A booking needs either an assignedDate or datesNeeded. Which dates should it cover?"
        )
    status = str(data.get("status") or DEFAULT_BOOKING_STATUS)
    _check_status(status)
    if "datesNeeded" in data and not isinstance(data["datesNeeded"], list):
        raise ValidationFailedError("datesNeeded must be an array of date rows.")

    client, show = await asyncio.gather(
        _resolve_reference(registry, COLLECTION_CLIENTS, data.get("clientId"), data.get("clientName")),
        _resolve_reference(registry, COLLECTION_SHOWS, data.get("showId"), data.get("showName")),
    )
    if client is not None:
        data["clientId"] = str(client["id"])
        data["clientName"] = client_display_name(client) or data.get("clientName")
    if show is not None:
        data["showId"] = str(show["id"])
        data["showName"] = show.get("name") or data.get("showName")

    raw_rows = data.get("datesNeeded") or [
        {"date": data["assignedDate"], "staffCount": 1, "staffIds": []}
    ]
    data["datesNeeded"] = await _build_date_rows(registry, raw_rows)
    data["status"] = status

    client_label = data.get("clientName") or "new client"
    first_date = data.get("assignedDate") or data["datesNeeded"][0]["date"]
    where = f" at {data['showName']}" if data.get("showName") else ""
    return propose(
        "create_booking",
        label=f"Create Booking for {client_label}",
        success_message=f"Successfully created booking for {client_label}",
        data=data,
        message=(
            f"Ready to create booking for {client_label}{where} on {first_date}. "
            "Click the button below to confirm."
        ),
        preview=sanitize_for_display(data),
    )


async def exec_update_booking(registry: ToolRegistry, inp: dict) -> NoOpResult | PendingWrite:
    booking_id = require_text(inp, "id")
    booking = await registry.store.get_by_id(COLLECTION_BOOKINGS, booking_id)
    if booking is None:
        raise NotFoundError("Booking", booking_id)
    updates = clean_updates(merge_update_args(inp, lookup_keys=("id",), rename={}))
    if "status" in updates:
        _check_status(str(updates["status"]))
    changes = diff_against(booking, updates)
    return propose_update("update_booking", f"booking {booking_id}", booking, changes)


def _contains_either(a: str, b: str) -> bool:
    return bool(a) and bool(b) and (a in b or b in a)


async def find_booking_by_names(registry: ToolRegistry, client_name: str, show_name: str) -> dict:
    """
    Match a booking on its display client and show names.

    Exact (case-insensitive) on both wins, then substring containment in
    either direction on both. Fails with suggestions drawn from bookings that
    overlap on either name.
    """
    bookings, (client_map, show_map, _) = await asyncio.gather(
        registry.store.get_all(COLLECTION_BOOKINGS),
        registry.queries.name_maps(clients=True, shows=True),
    )
    want_client = client_name.strip().lower()
    want_show = show_name.strip().lower()

    named = [
        (b, booking_client_name(b, client_map), booking_show_name(b, show_map))
        for b in bookings
    ]
    for booking, client, show in named:
        if client.lower() == want_client and show.lower() == want_show:
            return booking
    for booking, client, show in named:
        if _contains_either(client.lower(), want_client) and _contains_either(show.lower(), want_show):
            return booking

    suggestions: list[str] = []
    for _, client, show in named:
        if _contains_either(client.lower(), want_client) or _contains_either(show.lower(), want_show):
            label = f"{client or 'Unknown client'} - {show or 'Unknown show'}"
            if label not in suggestions:
                suggestions.append(label)
        if len(suggestions) >= registry.suggestion_limit:
            break
    raise NotFoundError("Booking", f"{client_name} / {show_name}", suggestions)


def patch_date_row(rows: list[dict], day: str, patch: dict) -> list[dict]:
    """Overwrite *patch* fields on the row dated *day*, or append a new row."""
    for row in rows:
        if row.get("date") == day:
            row.update(patch)
            return rows
    new_row = {"date": day, "staffIds": [], **patch}
    if "staffCount" not in new_row:
        new_row["staffCount"] = len([sid for sid in new_row["staffIds"] if sid]) or 1
    rows.append(new_row)
    return rows


async def exec_update_booking_by_names(registry: ToolRegistry, inp: dict) -> NoOpResult | PendingWrite:
    client_name = require_text(inp, "clientName")
    show_name = require_text(inp, "showName")
    day = optional_text(inp, "date")
    updates = clean_updates(optional_dict(inp, "updates"))
    if updates.get("staffNames") and not day:
        raise ValidationFailedError(
            "Assigning staff by name needs the booking date (date: YYYY-MM-DD)."
        )

    booking = await find_booking_by_names(registry, client_name, show_name)

    if "status" in updates:
        _check_status(str(updates["status"]))

    staff_names = updates.pop("staffNames", None)
    if day:
        patch = {k: updates.pop(k) for k in DATE_ROW_FIELDS if k in updates}
        if staff_names:
            patch["staffIds"] = await _staff_ids_for(registry, list(staff_names))
        if "staffIds" in patch:
            patch["staffIds"] = ["" if sid is None else str(sid) for sid in patch["staffIds"]]
        if patch:
            updates["datesNeeded"] = patch_date_row(dates_needed(booking), day, patch)

    changes = diff_against(booking, updates)
    if not changes:
        return NoOpResult()

    client_map, show_map, _ = await registry.queries.name_maps(clients=True, shows=True)
    title = f"{booking_client_name(booking, client_map)} at {booking_show_name(booking, show_map)}"
    logger.debug("Proposing booking %s update: %s", booking["id"], sorted(changes))
    return propose_update(
        "update_booking",
        f"booking for {title}",
        booking,
        changes,
        data={"id": booking["id"], "updates": changes},
    )
