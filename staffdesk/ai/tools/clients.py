"""Client tool executors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...constants import COLLECTION_CLIENTS
from ...domain import resolve_by_name
from ...sanitize import sanitize_for_display
from ...shapes import client_display_name
from .args import require_text
from .proposals import clean_updates, diff_against, merge_update_args, propose_create, propose_update
from .results import NoOpResult, PendingWrite, ReadResult

if TYPE_CHECKING:
    from .registry import ToolRegistry


async def exec_create_client(registry: ToolRegistry, inp: dict) -> PendingWrite:
    data = clean_updates(inp)
    return propose_create("create_client", "Client", require_text(data, "name"), data)


async def exec_update_client(registry: ToolRegistry, inp: dict) -> NoOpResult | ReadResult:
    """Direct update by exact id; applied immediately."""
    client_id = require_text(inp, "id")
    updates = clean_updates({k: v for k, v in inp.items() if k != "id"})
    if not updates:
        return NoOpResult()
    result = await registry.store.update(COLLECTION_CLIENTS, client_id, updates)
    return ReadResult(sanitize_for_display(result))


async def propose_client_update(
    registry: ToolRegistry, name: str, raw_updates: dict
) -> NoOpResult | PendingWrite:
    client = await resolve_by_name(
        registry.store, COLLECTION_CLIENTS, name, suggestion_limit=registry.suggestion_limit
    )
    changes = diff_against(client, clean_updates(raw_updates))
    return propose_update(
        "update_client", client_display_name(client) or name, client, changes
    )


async def exec_update_client_by_name(registry: ToolRegistry, inp: dict) -> NoOpResult | PendingWrite:
    name = require_text(inp, "name")
    return await propose_client_update(registry, name, merge_update_args(inp, lookup_keys=("name",)))
