"""Tool dispatcher: run accumulated tool calls and extend the conversation.

Tool calls run one after another in the order the model listed them. The
result is a new conversation snapshot holding the assistant message that
carried the calls, followed by one tool message per call. Any failure
aborts the whole dispatch and leaves the input snapshot untouched.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from actionchat.conversation import ChatMessage, Conversation, ToolCallRef

if TYPE_CHECKING:
    from actionchat.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of dispatching one batch of tool calls.

    Attributes:
        conversation: Input snapshot plus the assistant and tool messages.
        tool_messages: The tool-result messages, in tool call order.
    """

    conversation: Conversation
    tool_messages: tuple[ChatMessage, ...]


async def dispatch_tool_calls(
    conversation: Conversation,
    tool_calls: Sequence[ToolCallRef],
    *,
    registry: ToolRegistry,
) -> DispatchResult:
    """Execute tool calls sequentially and build the follow-up snapshot.

    Args:
        conversation: Snapshot the calls were requested in.
        tool_calls: Fully accumulated tool calls.
        registry: Registry resolving function names to handlers.

    Returns:
        DispatchResult with the extended snapshot.

    Raises:
        ArgumentParseError: If a call's arguments are malformed.
        UnknownToolError: If a call names an unregistered tool.
    """
    assistant = ChatMessage(role="assistant", content="", tool_calls=tuple(tool_calls))
    tool_messages: list[ChatMessage] = []

    for tc in tool_calls:
        start = time.perf_counter()
        result = await registry.invoke(tc)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Tool %s (%s) finished in %.0fms with status=%s",
            tc.name,
            tc.id,
            elapsed_ms,
            result.get("status"),
        )
        tool_messages.append(
            ChatMessage(
                role="tool",
                tool_call_id=tc.id,
                name=tc.name,
                content=json.dumps(result),
            )
        )

    return DispatchResult(
        conversation=conversation.extend(assistant, *tool_messages),
        tool_messages=tuple(tool_messages),
    )
