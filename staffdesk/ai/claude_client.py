"""
Anthropic Claude client for one back-office chat turn.

The model sees the tool catalog, picks operations, and gets each tool's JSON
payload back as a tool_result. Pending actions produced along the way are
collected and returned next to the final text so the UI can render confirm
buttons. Includes exponential backoff on rate-limit and overload errors.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import anthropic

from ..config import settings
from ..constants import ERROR_MESSAGES
from ..exceptions import StaffdeskError
from .tools import PendingWrite, ReadResult, ToolRegistry, payload_text

logger = logging.getLogger(__name__)

# Maximum retry attempts on transient errors
_MAX_RETRIES = 3
_RETRY_BASE_DELAY = 2.0  # seconds

SYSTEM_PROMPT = """You are the assistant for a staffing agency's back office. You help manage bookings, staff, clients, shows and staff availability through conversation.

Tone: helpful, professional, concise. Summarise results; never dump raw JSON.

Never expose internal ids (id, clientId, showId, staffIds, primaryContactId, primaryLocationId). Refer to records by name.

Create and update requests: call the matching tool straight away. Tools return an action button for the user to confirm; present it with a one-line summary of what will happen. Nothing is written until the user confirms.

Mentions: "@Name" is an exact staff reference, "#Name" an exact show reference. For updates use update_mentioned_staff / update_mentioned_show; for read-only questions resolve the entity and use read tools.

Bookings link a client to a show. datesNeeded rows carry date, staffCount and staffIds (an empty string marks an open slot). A booking is filled when the total staffCount is above zero and assigned staff meet or exceed it; otherwise it is unfilled.

Staff updates: only edit existing fields. Use payRate for pay changes and pass the number (e.g. "$22" is 22).

Plan internally and call as many tools as needed; reply only with the final answer."""


@dataclass
class ChatReply:
    """Final text plus any pending actions and rendering hints from the turn."""
    message: str
    actions: list[dict] = field(default_factory=list)
    ui: list[dict] = field(default_factory=list)

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {"message": self.message, "actions": self.actions}
        if self.ui:
            payload["ui"] = self.ui
        return payload


def _text_of(content: list) -> str:
    return "".join(block.text for block in content if block.type == "text").strip()


def _assistant_blocks(content: list) -> list[dict]:
    blocks: list[dict] = []
    for block in content:
        if block.type == "text":
            blocks.append({"type": "text", "text": block.text})
        elif block.type == "tool_use":
            blocks.append({
                "type": "tool_use",
                "id": block.id,
                "name": block.name,
                "input": block.input,
            })
    return blocks


class ChatAssistant:
    def __init__(self, registry: ToolRegistry, client: Any = None) -> None:
        self._registry = registry
        if client is None and settings.anthropic_api_key:
            client = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def _create(self, messages: list[dict], model: str):
        for attempt in range(_MAX_RETRIES):
            try:
                return await self._client.messages.create(
                    model=model,
                    max_tokens=settings.anthropic_max_tokens,
                    system=SYSTEM_PROMPT,
                    messages=messages,
                    tools=self._registry.anthropic_schemas,
                )
            except (anthropic.RateLimitError, anthropic.APIStatusError) as e:
                if isinstance(e, anthropic.APIStatusError) and not isinstance(
                    e, anthropic.RateLimitError
                ) and e.status_code < 500:
                    raise
                delay = _RETRY_BASE_DELAY * (2**attempt)
                logger.warning(
                    "Anthropic %s (attempt %d/%d). Retrying in %.1fs",
                    type(e).__name__, attempt + 1, _MAX_RETRIES, delay,
                )
                if attempt < _MAX_RETRIES - 1:
                    await asyncio.sleep(delay)
                else:
                    raise
        raise RuntimeError("unreachable")

    async def run_tool(self, name: str, tool_input: dict, reply: ChatReply) -> str:
        """Dispatch one tool call; the returned text is the tool_result content."""
        try:
            result = await self._registry.dispatch(name, tool_input)
        except StaffdeskError as e:
            return f"I couldn't complete {name}: {e}"
        except Exception as e:
            logger.error("Tool %s failed unexpectedly: %s", name, e, exc_info=True)
            return ERROR_MESSAGES["generic_failure"]

        if isinstance(result, PendingWrite):
            reply.actions.append(result.action.to_payload())
        elif isinstance(result, ReadResult) and result.ui is not None:
            # Rendering hints keep ids for the UI; the model only sees the sanitised data
            reply.ui.append(result.ui)
            return payload_text(ReadResult(result.data))
        return payload_text(result)

    async def respond(
        self,
        message: str,
        history: list[dict] | None = None,
        model: str | None = None,
    ) -> ChatReply:
        """
        Run one chat turn: call Claude, execute requested tools, feed the
        results back, and stop at end_turn or after max_tool_iterations.

        Never raises; failures become a chat message.
        """
        if not message or not message.strip():
            return ChatReply(ERROR_MESSAGES["empty_message"])
        if not self.configured:
            return ChatReply(ERROR_MESSAGES["not_configured"])

        model = model or settings.model_complex
        working_messages = list(history or []) + [{"role": "user", "content": message.strip()}]
        reply = ChatReply("")
        last_text = ""

        try:
            for iteration in range(settings.max_tool_iterations):
                logger.debug(
                    "respond iteration %d/%d, messages=%d",
                    iteration + 1, settings.max_tool_iterations, len(working_messages),
                )
                response = await self._create(working_messages, model)
                last_text = _text_of(response.content) or last_text
                tool_uses = [b for b in response.content if b.type == "tool_use"]

                if response.stop_reason != "tool_use" or not tool_uses:
                    reply.message = last_text
                    return reply

                tool_result_blocks = []
                for block in tool_uses:
                    logger.info("Executing tool %s (id=%s)", block.name, block.id)
                    content = await self.run_tool(block.name, dict(block.input or {}), reply)
                    tool_result_blocks.append({
                        "type": "tool_result",
                        "tool_use_id": block.id,
                        "content": content,
                    })

                working_messages.append({"role": "assistant", "content": _assistant_blocks(response.content)})
                working_messages.append({"role": "user", "content": tool_result_blocks})

        except anthropic.APIError as e:
            logger.error("Anthropic request failed: %s", e, exc_info=True)
            reply.message = ERROR_MESSAGES["service_unavailable"]
            return reply
        except Exception as e:
            logger.error("Chat turn failed: %s", e, exc_info=True)
            reply.message = ERROR_MESSAGES["generic_failure"]
            return reply

        logger.warning("respond hit max iterations (%d)", settings.max_tool_iterations)
        reply.message = last_text or ERROR_MESSAGES["generic_failure"]
        return reply

    async def ping(self) -> bool:
        """Lightweight availability check using the models list endpoint."""
        if not self.configured:
            return False
        try:
            await self._client.models.list()
            return True
        except Exception:
            return False
