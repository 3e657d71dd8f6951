"""
Action confirmation: apply a pending action the user has confirmed.

A PendingWrite hands its action to the UI; when the user clicks the button
the action comes back here and is written through the DocumentStore. The
action type implies the collection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from .ai.tools.proposals import clean_updates
from .constants import (
    COLLECTION_BOOKINGS,
    COLLECTION_CLIENTS,
    COLLECTION_SHOWS,
    COLLECTION_STAFF,
    COLLECTIONS,
    ERROR_MESSAGES,
)
from .domain.resolve import entity_label
from .exceptions import NotFoundError, StaffdeskError, ValidationFailedError
from .models import PendingAction
from .store import DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_MESSAGE = "Action executed successfully"

CREATE_ACTIONS = {
    "create_booking": COLLECTION_BOOKINGS,
    "create_staff": COLLECTION_STAFF,
    "create_client": COLLECTION_CLIENTS,
    "create_show": COLLECTION_SHOWS,
}

UPDATE_ACTIONS = {
    "update_booking": COLLECTION_BOOKINGS,
    "update_staff": COLLECTION_STAFF,
    "update_client": COLLECTION_CLIENTS,
    "update_show": COLLECTION_SHOWS,
}

# Older single-purpose buttons still held by open chat windows
LEGACY_ACTIONS = frozenset({
    "update_staff_name",
    "update_client_name",
    "update_booking_status",
    "delete_record",
    "batch_create",
})

ACTION_TYPES = frozenset(CREATE_ACTIONS) | frozenset(UPDATE_ACTIONS) | {"update_record"} | LEGACY_ACTIONS


@dataclass
class ActionOutcome:
    success: bool
    message: str
    data: Any = None

    def to_payload(self) -> dict:
        if self.success:
            return {"success": True, "message": self.message, "data": self.data}
        return {"success": False, "error": self.message}


def _require_id(data: dict) -> str:
    doc_id = data.get("id")
    if doc_id is None or str(doc_id).strip() == "":
        raise ValidationFailedError("The action payload has no record id.")
    return str(doc_id)


def _require_collection(data: dict) -> str:
    collection = data.get("collection")
    if collection not in COLLECTIONS:
        raise ValidationFailedError(f"Unknown collection: {collection!r}")
    return collection


def _update_fields(data: dict) -> dict:
    """``{id, updates: {...}}`` or the flat ``{id, **fields}`` form."""
    nested = data.get("updates")
    if isinstance(nested, dict):
        return clean_updates(nested)
    return clean_updates({k: v for k, v in data.items() if k != "id"})


async def _perform(store: DocumentStore, kind: str, data: dict) -> Any:
    if kind in CREATE_ACTIONS:
        return await store.create(CREATE_ACTIONS[kind], clean_updates(data))

    if kind in UPDATE_ACTIONS:
        fields = _update_fields(data)
        if not fields:
            raise ValidationFailedError(ERROR_MESSAGES["no_changes"])
        return await store.update(UPDATE_ACTIONS[kind], _require_id(data), fields)

    if kind == "update_record":
        fields = clean_updates(data.get("updates") if isinstance(data.get("updates"), dict) else {})
        if not fields:
            raise ValidationFailedError(ERROR_MESSAGES["no_changes"])
        return await store.update(_require_collection(data), _require_id(data), fields)

    if kind == "update_staff_name":
        return await store.update(COLLECTION_STAFF, _require_id(data), {"name": data.get("newName")})
    if kind == "update_client_name":
        return await store.update(COLLECTION_CLIENTS, _require_id(data), {"name": data.get("newName")})
    if kind == "update_booking_status":
        return await store.update(COLLECTION_BOOKINGS, _require_id(data), {"status": data.get("status")})
    if kind == "delete_record":
        collection, doc_id = _require_collection(data), _require_id(data)
        if not await store.delete(collection, doc_id):
            raise NotFoundError(entity_label(collection), doc_id)
        return {"deleted": True, "collection": collection}
    if kind == "batch_create":
        records = data.get("records")
        if not isinstance(records, list) or not records:
            raise ValidationFailedError("'records' must be a non-empty array of objects.")
        return await store.batch_create(
            _require_collection(data), [clean_updates(r) for r in records if isinstance(r, dict)]
        )

    raise ValidationFailedError(ERROR_MESSAGES["unknown_action"])


async def apply_action(store: DocumentStore, action: PendingAction | dict) -> ActionOutcome:
    """
    Write a confirmed action through *store*.

    Accepts the ``PendingAction`` model or its ``__action`` payload dict.
    Never raises: domain errors come back as a failed outcome carrying their
    message, anything else as the generic failure message.
    """
    if isinstance(action, dict):
        try:
            action = PendingAction.model_validate(
                {"id": "", "label": "", "successMessage": "", **action}
            )
        except ValidationError as e:
            logger.warning("Rejected malformed action payload: %s", e)
            return ActionOutcome(False, "The action payload is malformed.")

    kind = action.type
    if kind not in ACTION_TYPES:
        logger.warning("Unknown action type %r (action %s)", kind, action.id)
        return ActionOutcome(False, ERROR_MESSAGES["unknown_action"])

    try:
        result = await _perform(store, kind, dict(action.data))
    except StaffdeskError as e:
        logger.info("Action %s (%s) failed: %s", action.id, kind, e)
        return ActionOutcome(False, str(e))
    except Exception as e:
        logger.error("Action %s (%s) raised unexpectedly: %s", action.id, kind, e, exc_info=True)
        return ActionOutcome(False, ERROR_MESSAGES["generic_failure"])

    logger.info("Applied action %s (%s)", action.id, kind, extra={"action_type": kind})
    return ActionOutcome(True, action.success_message or DEFAULT_SUCCESS_MESSAGE, result)
