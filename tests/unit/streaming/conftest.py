"""Shared fixtures for streaming module tests."""

import json

from langchain_core.messages import AIMessageChunk


def make_tool_call_chunk(name: str, args_str: str, call_id: str, index: int = 0) -> AIMessageChunk:
    """Create a mock AIMessageChunk with a tool call chunk."""
    chunk = AIMessageChunk(content="")
    chunk.tool_call_chunks = [{"name": name, "args": args_str, "id": call_id, "index": index}]
    return chunk


def make_text_chunk(content: str, finish_reason: str | None = None) -> AIMessageChunk:
    """Create an AIMessageChunk carrying text and an optional finish reason."""
    metadata = {"finish_reason": finish_reason} if finish_reason else {}
    return AIMessageChunk(content=content, response_metadata=metadata)


def make_raw_chunk(
    content: str | None = None,
    finish_reason: str | None = None,
    tool_calls: list[dict] | None = None,
) -> dict:
    """Create a raw chat-completion stream chunk as decoded JSON."""
    delta: dict = {}
    if content is not None:
        delta["content"] = content
    if tool_calls is not None:
        delta["tool_calls"] = tool_calls
    return {"choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}]}


async def async_iter(items):
    """Convert a list to an async iterator."""
    for item in items:
        yield item


def sse_body(*events: dict) -> bytes:
    """Encode JSON events as a server-sent event stream ending in [DONE]."""
    lines = [f"data: {json.dumps(event)}\n\n" for event in events]
    lines.append("data: [DONE]\n\n")
    return "".join(lines).encode()


def chat_chunk(delta: dict, finish_reason: str | None = None) -> dict:
    """A chat.completion.chunk event as served by an OpenAI-compatible API."""
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion.chunk",
        "created": 1700000000,
        "model": "gpt-4o-mini",
        "choices": [{"index": 0, "delta": delta, "logprobs": None, "finish_reason": finish_reason}],
    }


def text_completion_chunk(text: str, finish_reason: str | None = None) -> dict:
    """A text_completion event as served by an OpenAI-compatible API."""
    return {
        "id": "cmpl-1",
        "object": "text_completion",
        "created": 1700000000,
        "model": "gpt-3.5-turbo-instruct",
        "choices": [{"index": 0, "text": text, "logprobs": None, "finish_reason": finish_reason}],
    }
