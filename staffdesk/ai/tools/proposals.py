"""
Building blocks for proposed writes: payload cleaning, diffing against the
current document, and pending-action envelopes.
"""

from __future__ import annotations

import time
from typing import Any, Iterable

from ...models import PendingAction
from ...sanitize import normalize_timestamps_deep, sanitize_for_display
from ...shapes import dates_needed
from .args import is_blank
from .results import NoOpResult, PendingWrite

_MISSING = object()


def clean_updates(data: dict | None) -> dict:
    """Drop None and empty-string values so they never overwrite stored data."""
    return {k: v for k, v in (data or {}).items() if not is_blank(v)}


def merge_update_args(
    inp: dict,
    lookup_keys: Iterable[str] = (),
    rename: dict[str, str] | None = None,
) -> dict:
    """
    Explicit top-level fields plus the free-form ``updates`` object.

    Lookup keys are removed; ``updates`` wins over explicit fields.
    """
    rename = {"newName": "name"} if rename is None else rename
    skip = set(lookup_keys) | {"updates"}
    explicit = {}
    for key, value in inp.items():
        if key in skip:
            continue
        explicit[rename.get(key, key)] = value
    extra = inp.get("updates") if isinstance(inp.get("updates"), dict) else {}
    return {**explicit, **extra}


def _comparable(current: dict, key: str) -> Any:
    if key == "datesNeeded" and key in current:
        return dates_needed(current)
    return current.get(key, _MISSING)


def diff_against(current: dict, updates: dict) -> dict:
    """
    Keep only values that differ structurally from the current document.

    Both sides are compared timestamp-normalised; the kept values are the
    proposed ones as given, so stored timestamp maps are written back intact.
    """
    baseline = normalize_timestamps_deep(current or {})
    return {
        key: value
        for key, value in updates.items()
        if key != "id" and _comparable(baseline, key) != normalize_timestamps_deep(value)
    }


def action_id(kind: str) -> str:
    return f"{kind}_{int(time.time() * 1000)}"


def propose(
    kind: str,
    label: str,
    success_message: str,
    data: dict,
    message: str,
    preview: dict,
    id_prefix: str | None = None,
) -> PendingWrite:
    action = PendingAction(
        id=action_id(id_prefix or kind),
        type=kind,
        label=label,
        success_message=success_message,
        data=data,
    )
    return PendingWrite(action=action, message=message, preview=preview)


def propose_create(kind: str, noun: str, title: str, data: dict, detail: str = "") -> PendingWrite:
    return propose(
        kind,
        label=f"Create {noun}: {title}",
        success_message=f"Successfully created {noun.lower()} {title}",
        data=data,
        message=f"Ready to create {noun.lower()} {title}{detail}. Click the button below to confirm.",
        preview=sanitize_for_display(data),
    )


def propose_update(
    kind: str,
    title: str,
    current: dict,
    changes: dict,
    *,
    data: dict | None = None,
    id_prefix: str | None = None,
) -> NoOpResult | PendingWrite:
    """
    Envelope for an update, or a no-op when *changes* is empty.

    *data* defaults to ``{id, **changes}``.
    """
    if not changes:
        return NoOpResult()
    return propose(
        kind,
        label=f"Update {title}",
        success_message=f"Successfully updated {title}",
        data=data if data is not None else {"id": current["id"], **changes},
        message=f"Ready to update {title}. Click the button below to confirm.",
        preview={
            "current": sanitize_for_display(current),
            "updates": sanitize_for_display(changes),
        },
        id_prefix=id_prefix,
    )
