"""
Tool registry package for the back-office assistant's tool use.

The model picks an operation from TOOL_SCHEMAS; ToolRegistry.dispatch runs
the matching executor against the document store. Reads come back
immediately, writes on named records come back as pending actions for the
user to confirm.

The package is organised into domain-specific modules:
- schemas.py: Tool schema definitions (catalog shown to the model)
- registry.py: ToolRegistry class and dispatch logic
- results.py: ReadResult / NoOpResult / PendingWrite result types
- args.py: Argument coercion helpers shared by executors
- proposals.py: Diff-before-propose and pending action construction
- staff_fields.py: Staff field allow-list, aliases and value parsers
- reads.py: Read-only executors (getters, queries, analytics, recommendations)
- bookings.py: Booking executors
- staff.py: Staff executors
- clients.py: Client executors
- shows.py: Show executors
- records.py: Collection-generic executors (update_record, delete, batch)

Re-exports:
    ToolRegistry: Main class for dispatching tool calls
    TOOL_SCHEMAS: List of tool schemas
"""

from .registry import ToolRegistry
from .results import NoOpResult, PendingWrite, ReadResult, ToolResult, payload_text
from .schemas import TOOL_SCHEMAS, anthropic_tools

__all__ = [
    "ToolRegistry",
    "TOOL_SCHEMAS",
    "anthropic_tools",
    "NoOpResult",
    "PendingWrite",
    "ReadResult",
    "ToolResult",
    "payload_text",
]
