"""Stream normalizer: turn provider chunks into StreamTokens.

Accepts LangChain message chunks (``content`` plus
``response_metadata["finish_reason"]``), raw chat-completion chunks
(``choices[0].delta.content``) and text-completion chunks
(``choices[0].text``). Raw chunks carry ``choices[0].finish_reason`` and may be
dicts or SDK objects.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from actionchat.streaming.events import StreamToken
from actionchat.streaming.wire import field_of, first_choice

STOP_REASON = "stop"


def extract_text(content: Any) -> str:
    """Normalize chunk content to a plain string.

    Content may be a str, a list of content blocks
    (``[{"type": "text", "text": "..."}]``) or None.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict):
                text = block.get("text") or ""
                if text:
                    parts.append(str(text))
        return "".join(parts)
    return str(content)


def content_of(chunk: Any) -> str:
    """Text content carried by a single chunk (empty string if none)."""
    choice = first_choice(chunk)
    if choice is not None:
        delta = field_of(choice, "delta")
        if delta is not None:
            return extract_text(field_of(delta, "content"))
        # text-completion chunks carry the text on the choice itself
        return extract_text(field_of(choice, "text"))
    return extract_text(field_of(chunk, "content"))


def finish_reason_of(chunk: Any) -> str | None:
    """Finish reason carried by a single chunk, if any."""
    choice = first_choice(chunk)
    if choice is not None:
        return field_of(choice, "finish_reason")
    metadata = field_of(chunk, "response_metadata") or {}
    return metadata.get("finish_reason")


def normalize_stream(chunks: Iterable[Any]) -> Iterator[StreamToken]:
    """Yield one StreamToken per chunk, in input order.

    Token ids start at 0. ``generated_text`` is set only on the token whose
    chunk finished with ``"stop"`` and holds everything emitted up to and
    including that token.
    """
    generated_text = ""
    for token_id, chunk in enumerate(chunks):
        text = content_of(chunk)
        last = finish_reason_of(chunk) == STOP_REASON
        generated_text += text
        yield StreamToken(
            id=token_id,
            text=text,
            is_final=last,
            generated_text=generated_text if last else None,
        )
