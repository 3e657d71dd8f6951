"""
Shape detection for legacy and drifted documents.

Historical records encode the same fact in several ways: a client can be a
string, an object, or a nested ``contacts`` object/list; staff may carry
``firstName``/``lastName`` instead of ``name``; availability may list
``dates`` instead of ``availableDates``; ``datesNeeded`` may be stored as an
index-keyed mapping. Each field below is resolved by an ordered table of
strategies, tried in priority order; the first one returning a non-empty
value wins. Keep the tables as the single place where precedence is decided.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from .sanitize import iso_day

Strategy = Callable[[dict], Any]


def _first(strategies: Iterable[Strategy], doc: Any) -> Any:
    if not isinstance(doc, dict):
        return None
    for strategy in strategies:
        value = strategy(doc)
        if value not in (None, "", [], {}):
            return value
    return None


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _contacts_primary(doc: dict) -> dict | None:
    contacts = doc.get("contacts")
    if isinstance(contacts, dict):
        return contacts
    if isinstance(contacts, list):
        for contact in contacts:
            if isinstance(contact, dict):
                return contact
    return None


# --------------------------------------------------------------------------- #
# Staff                                                                        #
# --------------------------------------------------------------------------- #

def _staff_first_last(doc: dict) -> str | None:
    parts = [_text(doc.get("firstName")), _text(doc.get("lastName"))]
    joined = " ".join(p for p in parts if p)
    return joined or None


STAFF_NAME_STRATEGIES: tuple[Strategy, ...] = (
    lambda d: _text(d.get("name")),
    _staff_first_last,
    lambda d: _text(d.get("staffName")),
)


def staff_display_name(doc: Any) -> str:
    return _first(STAFF_NAME_STRATEGIES, doc) or ""


def staff_skills(doc: Any) -> list[str]:
    skills = doc.get("skills") if isinstance(doc, dict) else None
    if isinstance(skills, str):
        return [s.strip() for s in skills.split(",") if s.strip()]
    if isinstance(skills, (list, tuple)):
        return [str(s) for s in skills if s]
    return []


# --------------------------------------------------------------------------- #
# Clients                                                                      #
# --------------------------------------------------------------------------- #

CLIENT_NAME_STRATEGIES: tuple[Strategy, ...] = (
    lambda d: _text(d.get("name")),
    lambda d: _text((_contacts_primary(d) or {}).get("name")),
    lambda d: _text(d.get("company")),
)


def client_display_name(doc: Any) -> str:
    return _first(CLIENT_NAME_STRATEGIES, doc) or ""


def client_contact(doc: Any) -> dict:
    """Flattened contact details: name, email, phone, location."""
    if not isinstance(doc, dict):
        return {}
    primary = _contacts_primary(doc) or {}
    out = {
        "name": client_display_name(doc),
        "email": _text(primary.get("email")) or _text(doc.get("email")) or "",
        "phone": _text(primary.get("phone")) or _text(doc.get("phone")) or "",
        "location": _text(primary.get("location")) or _text(doc.get("location")) or "",
    }
    return out


# --------------------------------------------------------------------------- #
# Bookings                                                                     #
# --------------------------------------------------------------------------- #

def _booking_client_object(doc: dict) -> str | None:
    client = doc.get("client")
    if isinstance(client, dict):
        return client_display_name(client) or None
    return _text(client)


BOOKING_CLIENT_NAME_STRATEGIES: tuple[Strategy, ...] = (
    lambda d: _text(d.get("clientName")),
    _booking_client_object,
)

BOOKING_SHOW_NAME_STRATEGIES: tuple[Strategy, ...] = (
    lambda d: _text(d.get("showName")),
    lambda d: _text((d.get("show") or {}).get("name")) if isinstance(d.get("show"), dict) else _text(d.get("show")),
)


def booking_client_name(doc: Any, client_names: dict[str, str] | None = None) -> str:
    """Display client name of a booking; the id lookup wins when resolvable."""
    if isinstance(doc, dict) and client_names:
        resolved = client_names.get(str(doc.get("clientId") or ""))
        if resolved:
            return resolved
    return _first(BOOKING_CLIENT_NAME_STRATEGIES, doc) or ""


def booking_show_name(doc: Any, show_names: dict[str, str] | None = None) -> str:
    if isinstance(doc, dict) and show_names:
        resolved = show_names.get(str(doc.get("showId") or ""))
        if resolved:
            return resolved
    return _first(BOOKING_SHOW_NAME_STRATEGIES, doc) or ""


def _as_list(value: Any) -> list:
    """Lists pass through; index-keyed mappings become lists in key order."""
    if isinstance(value, list):
        return list(value)
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, dict):
        def _key(k: Any):
            text = str(k)
            return (0, int(text)) if text.isdigit() else (1, text)
        return [value[k] for k in sorted(value, key=_key)]
    return []


def dates_needed(doc: Any) -> list[dict]:
    """A booking's ``datesNeeded`` rows as a list of dicts with list ``staffIds``."""
    if not isinstance(doc, dict):
        return []
    rows = []
    for row in _as_list(doc.get("datesNeeded")):
        if not isinstance(row, dict):
            continue
        row = dict(row)
        row["staffIds"] = ["" if sid is None else str(sid) for sid in _as_list(row.get("staffIds"))]
        rows.append(row)
    return rows


def booking_fill(doc: Any) -> tuple[int, int]:
    """(total staff needed, total slots filled) across all dates."""
    needed = 0
    filled = 0
    for row in dates_needed(doc):
        try:
            needed += int(row.get("staffCount") or 0)
        except (TypeError, ValueError):
            pass
        filled += sum(1 for sid in row["staffIds"] if sid)
    return needed, filled


def is_fully_staffed(doc: Any) -> bool:
    needed, filled = booking_fill(doc)
    return needed > 0 and filled >= needed


def booking_dates(doc: Any) -> list[str]:
    days = []
    for row in dates_needed(doc):
        day = iso_day(row.get("date"))
        if day:
            days.append(day)
    if not days and isinstance(doc, dict):
        day = iso_day(doc.get("assignedDate"))
        if day:
            days.append(day)
    return days


# --------------------------------------------------------------------------- #
# Availability                                                                 #
# --------------------------------------------------------------------------- #

AVAILABILITY_DATE_STRATEGIES: tuple[Strategy, ...] = (
    lambda d: d.get("availableDates"),
    lambda d: d.get("dates"),
)


def availability_dates(doc: Any) -> list[str]:
    raw = _first(AVAILABILITY_DATE_STRATEGIES, doc)
    days = []
    for value in _as_list(raw):
        day = iso_day(value)
        if day:
            days.append(day)
    return days


# --------------------------------------------------------------------------- #
# Shows                                                                        #
# --------------------------------------------------------------------------- #

SHOW_START_STRATEGIES: tuple[Strategy, ...] = (
    lambda d: iso_day(d.get("startDate")),
    lambda d: iso_day(d.get("date")),
)

SHOW_END_STRATEGIES: tuple[Strategy, ...] = (
    lambda d: iso_day(d.get("endDate")),
    lambda d: iso_day(d.get("date")),
    lambda d: iso_day(d.get("startDate")),
)


def show_start(doc: Any) -> str | None:
    return _first(SHOW_START_STRATEGIES, doc)


def show_span(doc: Any) -> tuple[str | None, str | None]:
    return _first(SHOW_START_STRATEGIES, doc), _first(SHOW_END_STRATEGIES, doc)
