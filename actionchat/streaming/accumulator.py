"""Tool call accumulator: rebuild complete tool calls from streamed deltas.

Providers stream a tool call as fragments addressed by ``index``: the id
and function name usually arrive first and the JSON arguments arrive in
pieces. Fragments with the same index are appended field by field onto a
builder; builders live in a growable list (the arena) addressed by index.
Arguments are not parsed here, only after the stream has ended.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from actionchat.conversation import FunctionCall, ToolCallRef
from actionchat.streaming.wire import field_of, first_choice

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDelta:
    """A partial update to the tool call at ``index``."""

    index: int
    id: str | None = None
    name: str | None = None
    arguments: str | None = None

    @classmethod
    def from_wire(cls, raw: Any) -> ToolDelta:
        """Build a delta from a streamed tool call fragment.

        Accepts the chat-completion shape ``{index, id, function: {name, arguments}}``
        and the LangChain ``tool_call_chunks`` shape ``{index, id, name, args}``.
        """
        function = field_of(raw, "function")
        if function is not None:
            name = field_of(function, "name")
            arguments = field_of(function, "arguments")
        else:
            name = field_of(raw, "name")
            arguments = field_of(raw, "args")
        index = field_of(raw, "index")
        return cls(
            index=int(index) if index is not None else 0,
            id=field_of(raw, "id"),
            name=name,
            arguments=arguments,
        )


@dataclass
class ToolCallBuilder:
    """Mutable partial tool call; every field only ever grows."""

    id: str = ""
    name: str = ""
    arguments: str = ""

    def append(self, delta: ToolDelta) -> None:
        if delta.id:
            self.id += delta.id
        if delta.name:
            self.name += delta.name
        if delta.arguments:
            self.arguments += delta.arguments

    def build(self) -> ToolCallRef:
        return ToolCallRef(
            id=self.id,
            function=FunctionCall(name=self.name, arguments=self.arguments),
        )


class ToolCallAccumulator:
    """Arena of ToolCallBuilders addressed by delta index."""

    def __init__(self) -> None:
        self._builders: list[ToolCallBuilder] = []

    def __len__(self) -> int:
        return len(self._builders)

    def feed(self, delta: ToolDelta) -> None:
        """Append one delta, growing the arena to ``delta.index + 1`` first."""
        if delta.index < 0:
            raise ValueError(f"Tool call delta index must be >= 0, got {delta.index}")
        while len(self._builders) <= delta.index:
            self._builders.append(ToolCallBuilder())
        self._builders[delta.index].append(delta)

    def feed_chunk(self, chunk: Any) -> int:
        """Feed every tool call delta carried by one stream chunk.

        Returns:
            Number of deltas fed.
        """
        raw_deltas = tool_deltas_of(chunk)
        for raw in raw_deltas:
            self.feed(ToolDelta.from_wire(raw))
        return len(raw_deltas)

    def build(self) -> list[ToolCallRef]:
        return [builder.build() for builder in self._builders]


def tool_deltas_of(chunk: Any) -> list[Any]:
    """Raw tool call fragments carried by a chunk (empty list if none)."""
    choice = first_choice(chunk)
    if choice is not None:
        return list(field_of(field_of(choice, "delta"), "tool_calls") or [])
    return list(field_of(chunk, "tool_call_chunks") or [])


def accumulate_tool_calls(chunks: Iterable[Any]) -> list[ToolCallRef]:
    """Rebuild the ordered tool call list from a drained chunk sequence.

    Returns an empty list when no chunk carried tool call deltas.
    """
    accumulator = ToolCallAccumulator()
    delta_count = 0
    for chunk in chunks:
        delta_count += accumulator.feed_chunk(chunk)
    if delta_count:
        logger.debug("Accumulated %d tool call(s) from %d delta(s)", len(accumulator), delta_count)
    return accumulator.build()
