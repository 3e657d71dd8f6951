"""Staff tool executors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...constants import COLLECTION_STAFF
from ...domain import resolve_by_name
from ...exceptions import ValidationFailedError
from ...sanitize import sanitize_for_display
from ...shapes import staff_display_name
from .args import require_text
from .proposals import clean_updates, diff_against, merge_update_args, propose_create, propose_update
from .results import NoOpResult, PendingWrite, ReadResult
from .staff_fields import normalize_staff_updates, parse_pay_rate

if TYPE_CHECKING:
    from .registry import ToolRegistry

logger = logging.getLogger(__name__)


async def exec_create_staff(registry: ToolRegistry, inp: dict) -> PendingWrite:
    data = clean_updates(inp)
    name = require_text(data, "name")
    require_text(data, "email")
    if "payRate" in data:
        rate = parse_pay_rate(data["payRate"])
        if rate is None:
            raise ValidationFailedError(f"Could not read a pay rate from {data['payRate']!r}.")
        data["payRate"] = rate
    return propose_create("create_staff", "Staff", name, data)


async def exec_update_staff(registry: ToolRegistry, inp: dict) -> NoOpResult | ReadResult:
    """Direct update by exact id; applied immediately."""
    staff_id = require_text(inp, "id")
    updates = clean_updates({k: v for k, v in inp.items() if k != "id"})
    if not updates:
        return NoOpResult()
    result = await registry.store.update(COLLECTION_STAFF, staff_id, updates)
    return ReadResult(sanitize_for_display(result))


async def propose_staff_update(
    registry: ToolRegistry, name: str, raw_updates: dict, id_prefix: str = "update_staff"
) -> NoOpResult | PendingWrite:
    """Resolve a staff member by name and propose the allow-listed diff."""
    staff = await resolve_by_name(
        registry.store, COLLECTION_STAFF, name, suggestion_limit=registry.suggestion_limit
    )
    updates = normalize_staff_updates(raw_updates, staff)
    changes = diff_against(staff, updates)
    if not changes:
        logger.info("No staff changes for %s", staff_display_name(staff))
    return propose_update(
        "update_staff", staff_display_name(staff) or name, staff, changes, id_prefix=id_prefix
    )


async def exec_update_staff_by_name(registry: ToolRegistry, inp: dict) -> NoOpResult | PendingWrite:
    name = require_text(inp, "name")
    return await propose_staff_update(registry, name, merge_update_args(inp, lookup_keys=("name",)))


async def exec_update_mentioned_staff(registry: ToolRegistry, inp: dict) -> NoOpResult | PendingWrite:
    name = require_text(inp, "mentionedName").lstrip("@").strip()
    return await propose_staff_update(
        registry,
        name,
        merge_update_args(inp, lookup_keys=("mentionedName",)),
        id_prefix="update_mentioned_staff",
    )
