"""Aggregate counts and rankings over full in-memory collections."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from datetime import datetime, timezone

from ..constants import (
    ANALYTICS_TYPE_NAMES,
    COLLECTION_BOOKINGS,
    COLLECTION_CLIENTS,
    COLLECTION_SHOWS,
    COLLECTION_STAFF,
)
from ..exceptions import ValidationFailedError
from ..shapes import (
    booking_client_name,
    booking_dates,
    booking_fill,
    booking_show_name,
    client_display_name,
    dates_needed,
    is_fully_staffed,
    show_start,
    staff_display_name,
)
from ..store import DocumentStore

logger = logging.getLogger(__name__)

ANALYTICS_TYPES = ANALYTICS_TYPE_NAMES


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _in_window(day: str, start: str | None, end: str | None) -> bool:
    if start and day < start:
        return False
    if end and day > end:
        return False
    return True


def _booking_in_window(booking: dict, start: str | None, end: str | None) -> bool:
    if not start and not end:
        return True
    return any(_in_window(d, start, end) for d in booking_dates(booking))


def _ranked(counter: Counter, limit: int | None) -> list[tuple[str, int]]:
    items = sorted(counter.items(), key=lambda kv: (-kv[1], kv[0].lower()))
    if isinstance(limit, int) and not isinstance(limit, bool) and limit > 0:
        items = items[:limit]
    return items


async def get_analytics(
    store: DocumentStore,
    analytics_type: str,
    start_date: str | None = None,
    end_date: str | None = None,
    limit: int | None = None,
    today: str | None = None,
) -> dict:
    if analytics_type not in ANALYTICS_TYPES:
        raise ValidationFailedError(
            f"Unknown analytics type: {analytics_type}. "
            f"Choose one of: {', '.join(ANALYTICS_TYPES)}"
        )
    today = today or _today()

    bookings, staff, clients, shows = await asyncio.gather(
        store.get_all(COLLECTION_BOOKINGS),
        store.get_all(COLLECTION_STAFF),
        store.get_all(COLLECTION_CLIENTS),
        store.get_all(COLLECTION_SHOWS),
    )
    logger.debug("Computing %s analytics", analytics_type)
    bookings = [b for b in bookings if _booking_in_window(b, start_date, end_date)]
    upcoming = [s for s in shows if (show_start(s) or "") >= today and show_start(s)]

    if analytics_type == "summary":
        return {
            "totalBookings": len(bookings),
            "totalStaff": len(staff),
            "totalClients": len(clients),
            "totalShows": len(shows),
            "pendingBookings": sum(1 for b in bookings if b.get("status") == "pending"),
            "confirmedBookings": sum(1 for b in bookings if b.get("status") == "confirmed"),
            "upcomingShows": len(upcoming),
        }

    if analytics_type == "total_bookings":
        return {"totalBookings": len(bookings)}

    if analytics_type == "bookings_by_status":
        return dict(Counter(str(b.get("status") or "unknown") for b in bookings))

    if analytics_type == "staff_by_role":
        return dict(Counter(str(s.get("role") or "unassigned") for s in staff))

    if analytics_type == "upcoming_shows":
        ordered = sorted(upcoming, key=lambda s: show_start(s) or "")
        return {
            "count": len(ordered),
            "shows": [
                {"name": s.get("name"), "startDate": show_start(s), "venue": s.get("venue")}
                for s in ordered
            ],
        }

    client_names = {str(c["id"]): client_display_name(c) for c in clients}
    show_names = {str(s["id"]): str(s.get("name") or "") for s in shows}

    if analytics_type == "top_staff_by_days":
        staff_names = {str(s["id"]): staff_display_name(s) for s in staff}
        days: dict[str, set[str]] = {}
        for booking in bookings:
            for row in dates_needed(booking):
                day = str(row.get("date") or "")[:10]
                if not day or not _in_window(day, start_date, end_date):
                    continue
                for sid in row["staffIds"]:
                    if sid:
                        days.setdefault(sid, set()).add(day)
        counter = Counter({sid: len(d) for sid, d in days.items()})
        return {
            "topStaff": [
                {"name": staff_names.get(sid, "Unknown staff"), "daysWorked": n}
                for sid, n in _ranked(counter, limit)
            ]
        }

    if analytics_type == "top_clients_by_bookings":
        counter = Counter(booking_client_name(b, client_names) or "Unknown client" for b in bookings)
        return {
            "topClients": [
                {"name": name, "bookings": n} for name, n in _ranked(counter, limit)
            ]
        }

    # booking_fill_status
    rows = []
    for booking in bookings:
        needed, assigned = booking_fill(booking)
        rows.append({
            "clientName": booking_client_name(booking, client_names),
            "showName": booking_show_name(booking, show_names),
            "needed": needed,
            "assigned": assigned,
            "filled": is_fully_staffed(booking),
        })
    filled = sum(1 for r in rows if r["filled"])
    return {"filled": filled, "unfilled": len(rows) - filled, "bookings": rows}
