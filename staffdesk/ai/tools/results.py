"""
Tool results.

Every dispatch returns exactly one of these; callers branch on the type
rather than probing for ``__action``/``__ui`` keys. ``to_payload()`` gives
the wire shape handed to the model and the UI.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Union

from ...constants import ERROR_MESSAGES
from ...models import PendingAction


@dataclass
class ReadResult:
    """Sanitised read data, optionally with a rich-rendering hint."""
    data: Any
    ui: dict | None = None

    def to_payload(self) -> Any:
        if self.ui is not None:
            return {"__ui": self.ui, "data": self.data}
        return self.data


@dataclass
class NoOpResult:
    """An update whose diff against the current document is empty."""
    message: str = ERROR_MESSAGES["no_changes"]

    def to_payload(self) -> dict:
        return {"message": self.message, "updates": {}}


@dataclass
class PendingWrite:
    """A proposed write; nothing is persisted until the action is applied."""
    action: PendingAction
    message: str
    preview: dict = field(default_factory=dict)

    def to_payload(self) -> dict:
        return {
            "__action": self.action.to_payload(),
            "message": self.message,
            "preview": self.preview,
        }


ToolResult = Union[ReadResult, NoOpResult, PendingWrite]


def payload_text(result: ToolResult) -> str:
    """JSON text suitable for a tool_result block."""
    return json.dumps(result.to_payload(), default=str, ensure_ascii=False)
