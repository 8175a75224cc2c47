"""Streaming module: normalizer, tool call accumulator, and dispatcher.

Provides independently testable stages of a streamed completion with
tool calls.
"""

from actionchat.streaming.accumulator import (
    ToolCallAccumulator,
    ToolCallBuilder,
    ToolDelta,
    accumulate_tool_calls,
)
from actionchat.streaming.dispatcher import DispatchResult, dispatch_tool_calls
from actionchat.streaming.events import StreamToken
from actionchat.streaming.normalizer import extract_text, finish_reason_of, normalize_stream

__all__ = [
    "DispatchResult",
    "StreamToken",
    "ToolCallAccumulator",
    "ToolCallBuilder",
    "ToolDelta",
    "accumulate_tool_calls",
    "dispatch_tool_calls",
    "extract_text",
    "finish_reason_of",
    "normalize_stream",
]
