"""Show tool executors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...constants import COLLECTION_SHOWS, SHOW_STATUSES
from ...domain import resolve_by_name
from ...exceptions import ValidationFailedError
from ...sanitize import sanitize_for_display
from .args import require_text
from .proposals import clean_updates, diff_against, merge_update_args, propose_create, propose_update
from .results import NoOpResult, PendingWrite, ReadResult

if TYPE_CHECKING:
    from .registry import ToolRegistry


def _check_status(updates: dict) -> None:
    status = updates.get("status")
    if status is not None and status not in SHOW_STATUSES:
        raise ValidationFailedError(
            f"Invalid show status '{status}'. Use one of: {', '.join(SHOW_STATUSES)}"
        )


async def exec_create_show(registry: ToolRegistry, inp: dict) -> PendingWrite:
    data = clean_updates(inp)
    name = require_text(data, "name")
    day = require_text(data, "date")
    _check_status(data)
    return propose_create("create_show", "Show", name, data, detail=f" on {day}")


async def exec_update_show(registry: ToolRegistry, inp: dict) -> NoOpResult | ReadResult:
    """Direct update by exact id; applied immediately."""
    show_id = require_text(inp, "id")
    updates = clean_updates({k: v for k, v in inp.items() if k != "id"})
    _check_status(updates)
    if not updates:
        return NoOpResult()
    result = await registry.store.update(COLLECTION_SHOWS, show_id, updates)
    return ReadResult(sanitize_for_display(result))


async def exec_update_mentioned_show(registry: ToolRegistry, inp: dict) -> NoOpResult | PendingWrite:
    name = require_text(inp, "mentionedName").lstrip("#").strip()
    show = await resolve_by_name(
        registry.store, COLLECTION_SHOWS, name, suggestion_limit=registry.suggestion_limit
    )
    updates = clean_updates(merge_update_args(inp, lookup_keys=("mentionedName",)))
    _check_status(updates)
    changes = diff_against(show, updates)
    return propose_update("update_show", str(show.get("name") or name), show, changes)
