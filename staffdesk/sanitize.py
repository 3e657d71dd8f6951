"""
Normalisation of stored documents before they reach the model or a UI.

The document store persists provider-style timestamp wrappers
(``{"seconds": ..., "nanoseconds": ...}`` maps, or objects exposing
``seconds`` plus a ``to_datetime()``/``ToDatetime()`` accessor) next to plain
ISO date strings. Neither wrapper is JSON-friendly nor comparable with the
``YYYY-MM-DD`` strings used by filters, so every read path that may be
displayed or compared as text goes through here first.

Both public functions are pure and total: unknown shapes pass through
unchanged.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from .constants import HIDDEN_ID_KEYS


def is_timestamp_map(value: Any) -> bool:
    """True for the ``{seconds, nanoseconds}`` map form of a stored timestamp."""
    return (
        isinstance(value, dict)
        and isinstance(value.get("seconds"), (int, float))
        and not isinstance(value.get("seconds"), bool)
        and isinstance(value.get("nanoseconds"), (int, float))
        and not isinstance(value.get("nanoseconds"), bool)
    )


def _iso_from_epoch(seconds: float, nanoseconds: float) -> str | None:
    try:
        ms = int(seconds * 1000) + int(nanoseconds // 1_000_000)
        moment = datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _iso_from_datetime(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value.isoformat(timespec="milliseconds") + "Z"
    return value.isoformat()


def _timestamp_object_to_iso(value: Any) -> str | None:
    """Convert a provider timestamp instance (not a plain map) to ISO, if possible."""
    if isinstance(value, (dict, list, tuple, str, bytes)):
        return None
    if not isinstance(getattr(value, "seconds", None), (int, float)):
        return None
    for accessor in ("to_datetime", "ToDatetime", "to_date", "toDate"):
        fn = getattr(value, accessor, None)
        if callable(fn):
            try:
                converted = fn()
            except (TypeError, ValueError, OverflowError):
                continue
            if isinstance(converted, datetime):
                return _iso_from_datetime(converted)
    return None


def _convert_timestamps(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_convert_timestamps(v) for v in value]
    if isinstance(value, datetime):
        return _iso_from_datetime(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        if is_timestamp_map(value):
            iso = _iso_from_epoch(value["seconds"], value["nanoseconds"])
            if iso is not None:
                return iso
        return {k: _convert_timestamps(v) for k, v in value.items()}
    iso = _timestamp_object_to_iso(value)
    if iso is not None:
        return iso
    return value


def normalize_timestamps_deep(value: Any) -> Any:
    """Replace every timestamp wrapper in *value* with an ISO-8601 string."""
    return _convert_timestamps(value)


def _remove_id_keys(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_remove_id_keys(v) for v in value]
    if isinstance(value, dict):
        return {
            k: _remove_id_keys(v)
            for k, v in value.items()
            if k not in HIDDEN_ID_KEYS
        }
    return value


def sanitize_for_display(value: Any) -> Any:
    """Strip document ids/foreign keys, then normalise timestamps to ISO strings."""
    return _convert_timestamps(_remove_id_keys(value))


def iso_day(value: Any) -> str | None:
    """First ten characters (``YYYY-MM-DD``) of a date-ish value, or None."""
    value = normalize_timestamps_deep(value)
    if isinstance(value, str) and len(value) >= 10:
        return value[:10]
    return None
