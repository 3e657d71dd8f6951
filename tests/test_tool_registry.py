"""
Tests for staffdesk/ai/tools/registry.py: catalog/handler consistency and dispatch.
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from staffdesk.ai.tools import (
    TOOL_SCHEMAS,
    NoOpResult,
    PendingWrite,
    ReadResult,
    ToolRegistry,
    anthropic_tools,
    payload_text,
)
from staffdesk.exceptions import NotFoundError, StorageError, UnknownOperationError


def make_registry(**kwargs) -> ToolRegistry:
    """Construct a ToolRegistry over a mock store."""
    store = kwargs.pop("store", None) or MagicMock()
    return ToolRegistry(store=store, suggestion_limit=3, **kwargs)


# --------------------------------------------------------------------------- #
# 1. Tool schema validation                                                    #
# --------------------------------------------------------------------------- #

def test_catalog_and_handlers_match():
    names = [s["name"] for s in TOOL_SCHEMAS]
    assert len(names) == len(set(names)), "duplicate tool names in catalog"
    assert set(names) == make_registry().handler_names


def test_schemas_are_well_formed():
    for schema in TOOL_SCHEMAS:
        assert schema["description"]
        params = schema["parameters"]
        assert params["type"] == "object"
        assert isinstance(params["properties"], dict)
        for required in params.get("required", []):
            assert required in params["properties"], f"{schema['name']}: {required}"


def test_anthropic_tools_rekeys_parameters():
    converted = anthropic_tools(TOOL_SCHEMAS)
    assert len(converted) == len(TOOL_SCHEMAS)
    for tool in converted:
        assert "input_schema" in tool
        assert "parameters" not in tool
    # The catalog itself is untouched
    assert all("parameters" in s for s in TOOL_SCHEMAS)


def test_analytics_enum_lists_every_type():
    from staffdesk.domain import ANALYTICS_TYPES
    schema = next(s for s in TOOL_SCHEMAS if s["name"] == "get_analytics")
    assert set(schema["parameters"]["properties"]["type"]["enum"]) == set(ANALYTICS_TYPES)


# --------------------------------------------------------------------------- #
# 2. Dispatch                                                                  #
# --------------------------------------------------------------------------- #

@pytest.mark.asyncio
async def test_unknown_tool_raises():
    registry = make_registry()
    with pytest.raises(UnknownOperationError) as exc_info:
        await registry.dispatch("launch_rocket", {})
    assert "Unknown function: launch_rocket" in str(exc_info.value)


@pytest.mark.asyncio
async def test_storage_errors_propagate_unchanged():
    store = MagicMock()
    store.get_by_id = AsyncMock(side_effect=StorageError("disk gone"))
    registry = make_registry(store=store)
    with pytest.raises(StorageError, match="disk gone"):
        await registry.dispatch("get_document_by_id", {"collection": "staff", "id": "s1"})
    store.get_by_id.assert_awaited_once()


@pytest.mark.asyncio
async def test_dispatch_tolerates_none_input(registry):
    result = await registry.dispatch("get_clients", None)
    assert isinstance(result, ReadResult)
    assert len(result.data) == 2


@pytest.mark.asyncio
async def test_not_found_propagates(registry):
    with pytest.raises(NotFoundError):
        await registry.dispatch("get_document_by_id", {"collection": "shows", "id": "nope"})


# --------------------------------------------------------------------------- #
# 3. Result payloads                                                           #
# --------------------------------------------------------------------------- #

def test_read_payload_with_and_without_ui():
    assert ReadResult([1]).to_payload() == [1]
    assert ReadResult([1], ui={"type": "x"}).to_payload() == {"__ui": {"type": "x"}, "data": [1]}


def test_noop_payload_has_empty_updates():
    payload = NoOpResult().to_payload()
    assert payload["updates"] == {}
    assert "no changes detected" in payload["message"].lower()
    assert "__action" not in payload


@pytest.mark.asyncio
async def test_pending_write_payload_shape(registry):
    result = await registry.dispatch("create_client", {"name": "Globex", "email": None})
    assert isinstance(result, PendingWrite)
    payload = json.loads(payload_text(result))
    action = payload["__action"]
    assert action["type"] == "create_client"
    assert action["id"].startswith("create_client_")
    assert action["successMessage"]
    assert action["data"] == {"name": "Globex"}
    assert "Click the button below to confirm" in payload["message"]
