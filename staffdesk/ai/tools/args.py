"""Argument coercion shared by tool executors. All failures raise ValidationFailedError."""

from __future__ import annotations

import math
from typing import Any, Iterable

from ...constants import COLLECTIONS
from ...exceptions import ValidationFailedError


def require_text(inp: dict, key: str) -> str:
    value = inp.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationFailedError(f"'{key}' is required.")
    return value.strip()


def optional_text(inp: dict, key: str) -> str | None:
    value = inp.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def require_collection(inp: dict, allowed: Iterable[str] = COLLECTIONS) -> str:
    allowed = tuple(sorted(allowed))
    collection = require_text(inp, "collection")
    if collection not in allowed:
        raise ValidationFailedError(
            f"Unknown collection '{collection}'. Use one of: {', '.join(allowed)}"
        )
    return collection


def optional_int(inp: dict, key: str) -> int | None:
    """Whole number from a JSON number or numeric string; None when absent."""
    value = inp.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationFailedError(f"'{key}' must be a number.")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationFailedError(f"'{key}' must be a number.") from e
    if not math.isfinite(number):
        raise ValidationFailedError(f"'{key}' must be a number.")
    return int(number)


def optional_dict(inp: dict, key: str) -> dict:
    value = inp.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationFailedError(f"'{key}' must be an object.")
    return value


def optional_list(inp: dict, key: str) -> list:
    value = inp.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if not isinstance(value, list):
        raise ValidationFailedError(f"'{key}' must be an array.")
    return value


def is_blank(value: Any) -> bool:
    return value is None or value == ""
