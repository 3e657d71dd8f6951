"""
Staff field normalisation for by-name updates.

The allow-list and alias tables are the whole rule: a key is mapped through
the aliases, kept only if the result is allow-listed, and its value coerced
by the matching parser. Keys that survive never introduce a new field on
the document except where the allow-list names it.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Callable

from .args import is_blank

logger = logging.getLogger(__name__)

STAFF_FIELD_ALLOWLIST: frozenset[str] = frozenset({
    "name",
    "firstName",
    "lastName",
    "email",
    "phone",
    "role",
    "skills",
    "payRate",
    "dayRate",
    "location",
    "college",
    "instagram",
    "experience",
    "notes",
    "badges",
    "image",
    "sizes",
    "shoeSize",
    "dressSize",
    "applicationFormData",
    "applicationFormApproved",
    "applicationFormApprovedDate",
    "applicationFormCompleted",
    "applicationFormCompletedDate",
    "interviewFormData",
    "interviewFormApproved",
    "interviewFormApprovedDate",
    "interviewFormCompleted",
    "interviewFormCompletedDate",
})

# Colloquial key (lower-case, separators removed) → canonical field
STAFF_FIELD_ALIASES: dict[str, str] = {
    "newname": "name",
    "fullname": "name",
    "payrate": "payRate",
    "pay": "payRate",
    "wage": "payRate",
    "rate": "payRate",
    "hourlyrate": "payRate",
    "dayrate": "dayRate",
    "shoe": "shoeSize",
    "shoesize": "shoeSize",
    "dress": "dressSize",
    "dresssize": "dressSize",
    "phonenumber": "phone",
    "mobile": "phone",
    "cell": "phone",
    "emailaddress": "email",
    "mail": "email",
    "position": "role",
    "title": "role",
    "job": "role",
    "skill": "skills",
    "badge": "badges",
    "photo": "image",
    "picture": "image",
    "photourl": "image",
    "profileimage": "image",
    "ig": "instagram",
    "school": "college",
}

# Fields legacy records keep under applicationFormData
NESTED_FORM_FIELDS: dict[str, str] = {
    "shoeSize": "applicationFormData",
    "dressSize": "applicationFormData",
}

FORM_OBJECT_FIELDS = ("applicationFormData", "interviewFormData")

_CANONICAL_BY_KEY = {field.lower(): field for field in STAFF_FIELD_ALLOWLIST}

_PAY_RATE_LABEL_RE = re.compile(r"pay\s*rate\s*[:=]?\s*\$?\s*(-?\d+(?:\.\d+)?)", re.IGNORECASE)
_CURRENCY_RE = re.compile(r"^\s*\$\s*(-?\d+(?:\.\d+)?)")
_NUMBER_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*$")


def _squash(key: str) -> str:
    return re.sub(r"[\s_\-]+", "", key.strip().lower())


def canonical_field(key: Any) -> str | None:
    """Map a user-supplied key to an allow-listed field name, or None."""
    if not isinstance(key, str) or not key.strip():
        return None
    if key in STAFF_FIELD_ALLOWLIST:
        return key
    squashed = _squash(key)
    if squashed in STAFF_FIELD_ALIASES:
        return STAFF_FIELD_ALIASES[squashed]
    return _CANONICAL_BY_KEY.get(squashed)


def _as_number(number: float) -> int | float:
    return int(number) if number.is_integer() else number


def parse_pay_rate(value: Any) -> int | float | None:
    """
    Hourly rate from a number or free text.

    Accepts "pay rate: 25", "$25.50" or "25"; anything that does not give a
    finite number returns None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = (
            _PAY_RATE_LABEL_RE.search(value)
            or _CURRENCY_RE.match(value)
            or _NUMBER_RE.match(value)
        )
        if not match:
            return None
        try:
            number = float(match.group(1))
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return _as_number(number)


def _parse_string_list(value: Any) -> list[str] | None:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if not is_blank(v) and str(v).strip()]
    return None


VALUE_PARSERS: dict[str, Callable[[Any], Any]] = {
    "payRate": parse_pay_rate,
    "dayRate": parse_pay_rate,
    "skills": _parse_string_list,
    "badges": _parse_string_list,
}


# Fields a document can carry in another form: name as firstName/lastName
_DERIVED_FROM = {"name": ("firstName", "lastName")}


def _on_document(field: str, current: dict) -> bool:
    return field in current or any(k in current for k in _DERIVED_FROM.get(field, ()))


def normalize_staff_updates(raw: dict, current: dict | None = None) -> dict:
    """
    Allow-list, alias and coerce a staff update payload.

    Blank values, values whose parser rejects them and fields the document
    does not already carry are dropped. Nested form fields are redirected
    into their parent object (merged with the current one, which may be
    created) unless the document already has them top-level.
    """
    current = current or {}
    updates: dict[str, Any] = {}
    nested: dict[str, dict] = {}

    for key, value in (raw or {}).items():
        field = canonical_field(key)
        if field is None:
            logger.debug("Dropping non-staff field %r", key)
            continue
        if is_blank(value):
            continue
        parser = VALUE_PARSERS.get(field)
        if parser is not None:
            value = parser(value)
            if value is None:
                logger.debug("Dropping unparseable %s value %r", field, raw[key])
                continue

        parent = NESTED_FORM_FIELDS.get(field)
        if parent and field not in current:
            nested.setdefault(parent, {})[field] = value
        elif _on_document(field, current):
            updates[field] = value
        else:
            logger.debug("Dropping %s: not present on the document", field)

    # Form objects are written whole, so partial ones merge over the stored copy
    for parent in FORM_OBJECT_FIELDS:
        explicit = updates.get(parent)
        if parent not in nested and not isinstance(explicit, dict):
            continue
        base = current.get(parent) if isinstance(current.get(parent), dict) else {}
        updates[parent] = {
            **base,
            **(explicit if isinstance(explicit, dict) else {}),
            **nested.get(parent, {}),
        }

    return updates
