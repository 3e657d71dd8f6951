"""
QueryEngine: collection-aware reads enriched with denormalised names.

All rows returned here are copies with timestamps normalised to ISO strings;
callers decide whether to sanitise ids away before display.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..constants import (
    COLLECTION_AVAILABILITY,
    COLLECTION_BOOKINGS,
    COLLECTION_CLIENTS,
    COLLECTION_SHOWS,
    COLLECTION_STAFF,
)
from ..sanitize import iso_day, normalize_timestamps_deep
from ..shapes import (
    booking_client_name,
    booking_dates,
    booking_show_name,
    client_display_name,
    dates_needed,
    staff_display_name,
)
from ..store import DocumentStore
from .resolve import resolve_by_name

logger = logging.getLogger(__name__)


def _safe_compare(fn):
    def compare(a: Any, b: Any) -> bool:
        try:
            return bool(fn(a, b))
        except TypeError:
            return False
    return compare


FILTER_OPERATORS = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    ">": _safe_compare(lambda a, b: a > b),
    "<": _safe_compare(lambda a, b: a < b),
    ">=": _safe_compare(lambda a, b: a >= b),
    "<=": _safe_compare(lambda a, b: a <= b),
    "contains": lambda a, b: isinstance(a, str) and isinstance(b, str) and b.lower() in a.lower(),
    "in": lambda a, b: isinstance(b, (list, tuple)) and a in b,
    "array_contains": lambda a, b: isinstance(a, (list, tuple)) and b in a,
}


def apply_filters(rows: list[dict], filters: list[dict] | None) -> list[dict]:
    """AND-combine ``{field, op, value}`` predicates. Unknown operators match everything."""
    if not filters:
        return rows
    out = []
    for row in rows:
        keep = True
        for flt in filters:
            if not isinstance(flt, dict):
                continue
            fn = FILTER_OPERATORS.get(flt.get("op", flt.get("operator")))
            if fn is None:
                continue
            if not fn(row.get(flt.get("field")), flt.get("value")):
                keep = False
                break
        if keep:
            out.append(row)
    return out


def apply_date_range(rows: list[dict], date_range: dict | None) -> list[dict]:
    """Inclusive ``YYYY-MM-DD`` window on one direct field; rows without it are dropped."""
    if not date_range or not date_range.get("field"):
        return rows
    field = date_range["field"]
    start = date_range.get("startDate")
    end = date_range.get("endDate")
    out = []
    for row in rows:
        day = iso_day(row.get(field))
        if not day:
            continue
        if start and day < start:
            continue
        if end and day > end:
            continue
        out.append(row)
    return out


def _order_key(value: Any) -> tuple:
    """Numbers, then strings, then anything else by repr; each group ordered within itself."""
    if isinstance(value, (int, float)):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, repr(value))


def apply_order(rows: list[dict], order_by: dict | None) -> list[dict]:
    """Stable single-key sort; missing values go last in either direction."""
    if not order_by or not order_by.get("field"):
        return rows
    field = order_by["field"]
    descending = str(order_by.get("direction", "asc")).lower() == "desc"

    present = [row for row in rows if row.get(field) is not None]
    missing = [row for row in rows if row.get(field) is None]
    present.sort(key=lambda row: _order_key(row[field]), reverse=descending)
    return present + missing


def apply_projection(rows: list[dict], select: list[str] | None) -> list[dict]:
    fields = [f for f in (select or []) if f]
    if not fields:
        return rows
    return [{f: row.get(f) for f in fields} for row in rows]


def apply_limit(rows: list[dict], limit: Any) -> list[dict]:
    if isinstance(limit, bool) or not isinstance(limit, (int, float)):
        return rows
    return rows[: max(int(limit), 0)]


def _name_map(docs: list[dict], namer) -> dict[str, str]:
    return {str(d.get("id")): namer(d) for d in docs if d.get("id") and namer(d)}


class QueryEngine:
    """Domain reads over a :class:`DocumentStore`."""

    def __init__(self, store: DocumentStore, suggestion_limit: int | None = None) -> None:
        self._store = store
        self._suggestion_limit = suggestion_limit

    @property
    def store(self) -> DocumentStore:
        return self._store

    async def load(self, collection: str) -> list[dict]:
        """Full collection as timestamp-normalised copies."""
        docs = await self._store.get_all(collection)
        return [normalize_timestamps_deep(d) for d in docs]

    async def name_maps(
        self, *, clients: bool = False, shows: bool = False, staff: bool = False
    ) -> tuple[dict[str, str], dict[str, str], dict[str, str]]:
        """id → display-name maps, fetched concurrently."""
        async def _empty() -> list[dict]:
            return []

        client_docs, show_docs, staff_docs = await asyncio.gather(
            self._store.get_all(COLLECTION_CLIENTS) if clients else _empty(),
            self._store.get_all(COLLECTION_SHOWS) if shows else _empty(),
            self._store.get_all(COLLECTION_STAFF) if staff else _empty(),
        )
        return (
            _name_map(client_docs, client_display_name),
            _name_map(show_docs, lambda d: str(d.get("name") or "")),
            _name_map(staff_docs, staff_display_name),
        )

    async def enrich_bookings(self, rows: list[dict], *, staff_names: bool = False) -> list[dict]:
        """Attach resolved clientName/showName (and per-date staffNames) without dropping ids."""
        client_map, show_map, staff_map = await self.name_maps(
            clients=True, shows=True, staff=staff_names
        )
        out = []
        for row in rows:
            enriched = dict(row)
            client_name = booking_client_name(row, client_map)
            show_name = booking_show_name(row, show_map)
            if client_name:
                enriched["clientName"] = client_name
            if show_name:
                enriched["showName"] = show_name
            if "datesNeeded" in row:
                enriched["datesNeeded"] = dates_needed(row)
                if staff_names:
                    for dn in enriched["datesNeeded"]:
                        dn["staffNames"] = [staff_map[sid] for sid in dn["staffIds"] if sid in staff_map]
            out.append(enriched)
        return out

    async def enrich_availability(
        self, rows: list[dict], *, staff_name: bool = True, show_name: bool = True
    ) -> list[dict]:
        """Backfill missing staffName/showName from ids."""
        _, show_map, staff_map = await self.name_maps(shows=show_name, staff=staff_name)
        out = []
        for row in rows:
            enriched = dict(row)
            if staff_name and row.get("staffId") and not row.get("staffName"):
                enriched["staffName"] = staff_map.get(str(row["staffId"])) or row.get("staffName")
            if show_name and row.get("showId") and not row.get("showName"):
                enriched["showName"] = show_map.get(str(row["showId"])) or row.get("showName")
            out.append(enriched)
        return out

    async def query_collection(
        self,
        collection: str,
        filters: list[dict] | None = None,
        date_range: dict | None = None,
        select: list[str] | None = None,
        order_by: dict | None = None,
        expand: dict | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        """
        Generic in-memory query.

        Order of application: filters, date range, sort, expansion,
        projection, limit. Bookings always get clientName/showName.
        """
        rows = await self.load(collection)
        rows = apply_filters(rows, filters)
        rows = apply_date_range(rows, date_range)
        rows = apply_order(rows, order_by)

        expand = expand or {}
        if collection == COLLECTION_BOOKINGS:
            rows = await self.enrich_bookings(rows, staff_names=bool(expand.get("expandStaffNames")))
        elif collection == COLLECTION_AVAILABILITY and expand:
            rows = await self.enrich_availability(
                rows,
                staff_name=bool(expand.get("expandStaffName")),
                show_name=bool(expand.get("expandAvailabilityShowName")),
            )

        rows = apply_projection(rows, select)
        rows = apply_limit(rows, limit)
        logger.debug("query_collection %s → %d row(s)", collection, len(rows))
        return rows

    # ------------------------------------------------------------------ #
    # Collection getters                                                   #
    # ------------------------------------------------------------------ #

    async def get_bookings(
        self,
        client_name: str | None = None,
        show_name: str | None = None,
        status: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[dict]:
        """Bookings filtered by the first criterion given, enriched with names."""
        if client_name:
            rows = await self._store.get_bookings_by_client(client_name)
            if not rows:
                rows = await self._bookings_where(
                    lambda b, clients, shows: booking_client_name(b, clients).lower() == client_name.lower()
                )
        elif show_name:
            rows = await self._store.get_bookings_by_show(show_name)
            if not rows:
                rows = await self._bookings_where(
                    lambda b, clients, shows: booking_show_name(b, shows).lower() == show_name.lower()
                )
        elif status:
            rows = await self._store.get_bookings_by_status(status)
        elif start_date or end_date:
            low, high = start_date or "", end_date or "9999-12-31"
            rows = await self._bookings_where(
                lambda b, clients, shows: any(low <= d <= high for d in booking_dates(b))
            )
        else:
            rows = await self._store.get_all(COLLECTION_BOOKINGS)
        rows = [normalize_timestamps_deep(r) for r in rows]
        return await self.enrich_bookings(rows)

    async def _bookings_where(self, predicate) -> list[dict]:
        client_map, show_map, _ = await self.name_maps(clients=True, shows=True)
        bookings = await self._store.get_all(COLLECTION_BOOKINGS)
        return [b for b in bookings if predicate(b, client_map, show_map)]

    async def get_staff(self, role: str | None = None, skill: str | None = None) -> list[dict]:
        if role:
            rows = await self._store.get_staff_by_role(role)
        elif skill:
            rows = await self._store.get_staff_by_skill(skill)
        else:
            rows = await self._store.get_all(COLLECTION_STAFF)
        return [normalize_timestamps_deep(r) for r in rows]

    async def get_clients(self, company: str | None = None) -> list[dict]:
        if company:
            rows = await self._store.get_clients_by_company(company)
        else:
            rows = await self._store.get_all(COLLECTION_CLIENTS)
        return [normalize_timestamps_deep(r) for r in rows]

    async def get_shows(
        self, venue: str | None = None, status: str | None = None, upcoming: bool = False
    ) -> list[dict]:
        if venue:
            rows = await self._store.get_shows_by_venue(venue)
        elif status:
            rows = await self._store.get_shows_by_status(status)
        elif upcoming:
            rows = await self._store.get_upcoming_shows()
        else:
            rows = await self._store.get_all(COLLECTION_SHOWS)
        return [normalize_timestamps_deep(r) for r in rows]

    async def list_names(self, collection: str) -> list[dict]:
        docs = await self._store.get_all(collection)
        out = []
        for doc in docs:
            if collection == COLLECTION_STAFF:
                name = staff_display_name(doc)
            elif collection == COLLECTION_CLIENTS:
                name = client_display_name(doc)
            else:
                name = doc.get("name")
            if name:
                out.append({"id": doc["id"], "name": name})
        return out

    # ------------------------------------------------------------------ #
    # Staff work history                                                   #
    # ------------------------------------------------------------------ #

    async def bookings_worked_by(self, name: str) -> tuple[dict, list[dict]]:
        """Resolve a staff member and return the bookings they are placed on."""
        staff = await resolve_by_name(
            self._store, COLLECTION_STAFF, name, suggestion_limit=self._suggestion_limit
        )
        staff_id = str(staff["id"])
        bookings = await self._store.get_all(COLLECTION_BOOKINGS)
        worked = [
            b for b in bookings
            if any(staff_id in row["staffIds"] for row in dates_needed(b))
        ]
        return staff, worked

    async def count_shows_worked_by_staff(self, name: str) -> dict:
        staff, worked = await self.bookings_worked_by(name)
        _, show_map, _ = await self.name_maps(shows=True)
        shows: dict[str, str] = {}
        for booking in worked:
            key = str(booking.get("showId") or booking_show_name(booking, show_map) or booking["id"])
            shows.setdefault(key, booking_show_name(booking, show_map) or "Unknown show")
        return {
            "name": staff_display_name(staff),
            "showsWorked": len(shows),
            "shows": sorted(shows.values(), key=str.lower),
        }

    async def clients_for_staff_shows(self, name: str) -> dict:
        staff, worked = await self.bookings_worked_by(name)
        client_map, _, _ = await self.name_maps(clients=True)
        clients = {booking_client_name(b, client_map) for b in worked}
        clients.discard("")
        return {
            "name": staff_display_name(staff),
            "clients": sorted(clients, key=str.lower),
        }
