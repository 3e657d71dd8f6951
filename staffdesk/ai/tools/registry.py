"""
Tool registry class and dispatch logic.

ToolRegistry holds the store and query engine the executors need and maps
every catalog name to its ``exec_*`` function. The map is built once at
construction; tests assert it covers exactly the names in TOOL_SCHEMAS.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from ...domain import QueryEngine
from ...exceptions import StaffdeskError, StorageError, UnknownOperationError
from ...store import DocumentStore
from . import bookings, clients, reads, records, shows, staff
from .results import ToolResult
from .schemas import TOOL_SCHEMAS, anthropic_tools

logger = logging.getLogger(__name__)

Handler = Callable[["ToolRegistry", dict], Awaitable[ToolResult]]


class ToolRegistry:
    """
    Dispatches tool calls chosen by the model.

    Dependencies are injected at construction time so executors share one
    store (and therefore one cache) per registry.
    """

    def __init__(
        self,
        *,
        store: DocumentStore,
        query_engine: QueryEngine | None = None,
        suggestion_limit: int | None = None,
    ) -> None:
        if suggestion_limit is None:
            from ...config import settings
            suggestion_limit = settings.suggestion_limit
        self._store = store
        self._queries = query_engine or QueryEngine(store, suggestion_limit)
        self._suggestion_limit = suggestion_limit
        self._handlers: dict[str, Handler] = self._build_handlers()

    @staticmethod
    def _build_handlers() -> dict[str, Handler]:
        return {
            # Reads
            "get_bookings": reads.exec_get_bookings,
            "get_staff": reads.exec_get_staff,
            "get_clients": reads.exec_get_clients,
            "get_shows": reads.exec_get_shows,
            "get_document_by_id": reads.exec_get_document_by_id,
            "find_staff_by_name": reads.exec_find_staff_by_name,
            "find_client_by_name": reads.exec_find_client_by_name,
            "query_collection": reads.exec_query_collection,
            "search_records": reads.exec_search_records,
            "list_names": reads.exec_list_names,
            "get_analytics": reads.exec_get_analytics,
            "recommend_staff": reads.exec_recommend_staff,
            "count_shows_worked_by_staff": reads.exec_count_shows_worked_by_staff,
            "clients_for_staff_shows": reads.exec_clients_for_staff_shows,

            # Bookings
            "create_booking": bookings.exec_create_booking,
            "update_booking": bookings.exec_update_booking,
            "update_booking_by_names": bookings.exec_update_booking_by_names,

            # Staff
            "create_staff": staff.exec_create_staff,
            "update_staff": staff.exec_update_staff,
            "update_staff_by_name": staff.exec_update_staff_by_name,
            "update_mentioned_staff": staff.exec_update_mentioned_staff,

            # Clients
            "create_client": clients.exec_create_client,
            "update_client": clients.exec_update_client,
            "update_client_by_name": clients.exec_update_client_by_name,

            # Shows
            "create_show": shows.exec_create_show,
            "update_show": shows.exec_update_show,
            "update_mentioned_show": shows.exec_update_mentioned_show,

            # Any collection
            "update_record": records.exec_update_record,
            "update_record_by_name": records.exec_update_record_by_name,
            "delete_record": records.exec_delete_record,
            "batch_create": records.exec_batch_create,
        }

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def queries(self) -> QueryEngine:
        return self._queries

    @property
    def suggestion_limit(self) -> int:
        return self._suggestion_limit

    @property
    def schemas(self) -> list[dict]:
        """Catalog entries in provider-neutral form."""
        return TOOL_SCHEMAS

    @property
    def anthropic_schemas(self) -> list[dict]:
        return anthropic_tools(TOOL_SCHEMAS)

    @property
    def handler_names(self) -> frozenset[str]:
        return frozenset(self._handlers)

    async def dispatch(self, tool_name: str, tool_input: dict | None) -> ToolResult:
        """
        Execute the named tool with the given input.

        Domain errors (not-found, validation, unknown tool) and storage
        errors propagate to the caller; nothing is retried.
        """
        handler = self._handlers.get(tool_name)
        if handler is None:
            logger.error("No handler for tool %r", tool_name)
            raise UnknownOperationError(tool_name)

        logger.info("Dispatching tool %s", tool_name, extra={"tool": tool_name})
        try:
            return await handler(self, dict(tool_input or {}))
        except StorageError as exc:
            logger.error("Tool %s storage failure: %s", tool_name, exc, exc_info=True)
            raise
        except StaffdeskError as exc:
            logger.info("Tool %s rejected: %s", tool_name, exc)
            raise
        except Exception as exc:
            logger.error("Tool %s failed: %s", tool_name, exc, exc_info=True)
            raise
