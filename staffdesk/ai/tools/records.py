"""Collection-generic tool executors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...constants import COLLECTION_CLIENTS, COLLECTION_STAFF
from ...domain.resolve import entity_label
from ...exceptions import NotFoundError, ValidationFailedError
from ...sanitize import sanitize_for_display
from .args import optional_dict, require_collection, require_text
from .clients import propose_client_update
from .proposals import clean_updates, diff_against, propose_update
from .results import NoOpResult, PendingWrite, ReadResult
from .staff import propose_staff_update

if TYPE_CHECKING:
    from .registry import ToolRegistry

logger = logging.getLogger(__name__)


async def exec_update_record(registry: ToolRegistry, inp: dict) -> NoOpResult | PendingWrite:
    collection = require_collection(inp)
    doc_id = require_text(inp, "id")
    updates = clean_updates(optional_dict(inp, "updates"))
    current = await registry.store.get_by_id(collection, doc_id)
    if current is None:
        raise NotFoundError(entity_label(collection), doc_id)
    changes = diff_against(current, updates)
    return propose_update(
        "update_record",
        f"{collection} {doc_id}",
        current,
        changes,
        data={"collection": collection, "id": doc_id, "updates": changes},
    )


async def exec_update_record_by_name(registry: ToolRegistry, inp: dict) -> NoOpResult | PendingWrite:
    collection = require_collection(inp, allowed=(COLLECTION_STAFF, COLLECTION_CLIENTS))
    name = require_text(inp, "name")
    updates = optional_dict(inp, "updates")
    if collection == COLLECTION_STAFF:
        return await propose_staff_update(registry, name, updates, id_prefix="update_staff")
    return await propose_client_update(registry, name, updates)


async def exec_delete_record(registry: ToolRegistry, inp: dict) -> ReadResult:
    collection = require_collection(inp)
    doc_id = require_text(inp, "id")
    deleted = await registry.store.delete(collection, doc_id)
    if not deleted:
        raise NotFoundError(entity_label(collection), doc_id)
    return ReadResult({"deleted": True, "collection": collection})


async def exec_batch_create(registry: ToolRegistry, inp: dict) -> ReadResult:
    """Create complete records immediately, in one batch."""
    collection = require_collection(inp)
    records = inp.get("records")
    if not isinstance(records, list) or not records:
        raise ValidationFailedError("'records' must be a non-empty array of objects.")
    if not all(isinstance(r, dict) for r in records):
        raise ValidationFailedError("Every entry in 'records' must be an object.")
    created = await registry.store.batch_create(collection, [clean_updates(r) for r in records])
    logger.info("batch_create added %d %s record(s)", len(created), collection)
    return ReadResult(sanitize_for_display(created))
