"""Attribute access shared by the normalizer and accumulator.

Chunks arrive as dicts (raw JSON), SDK objects, or LangChain message chunks.
"""

from typing import Any


def field_of(obj: Any, name: str) -> Any:
    """Read ``name`` from a mapping or an object, None when missing."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def first_choice(chunk: Any) -> Any:
    """First ``choices`` entry of a raw chat-completion chunk, if present."""
    choices = field_of(chunk, "choices")
    if not choices:
        return None
    return choices[0]
