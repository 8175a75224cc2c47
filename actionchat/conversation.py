"""Conversation snapshots and OpenAI-style chat message models.

A Conversation is an immutable, ordered tuple of ChatMessage. Each stage of
a completion (instruction injection, tool dispatch) produces a new snapshot
instead of mutating the previous one.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from actionchat.exceptions import ArgumentParseError

Role = Literal["system", "user", "assistant", "tool"]


class FunctionCall(BaseModel):
    """Function name and JSON-encoded arguments of a tool call."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    arguments: str = ""


class ToolCallRef(BaseModel):
    """A complete tool call as requested by the model.

    ``function.arguments`` is a JSON string and is only guaranteed to parse
    once every streamed fragment has been accumulated.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    type: Literal["function"] = "function"
    function: FunctionCall = Field(default_factory=FunctionCall)

    @property
    def name(self) -> str:
        return self.function.name

    def parse_arguments(self) -> dict[str, Any]:
        """Decode ``function.arguments`` into a dict.

        Raises:
            ArgumentParseError: If the arguments are not a JSON object.
        """
        raw = self.function.arguments
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ArgumentParseError(
                f"Arguments for tool '{self.name}' are not valid JSON: {e.msg}",
                tool=self.name,
                raw_arguments=raw,
            ) from e
        if not isinstance(parsed, dict):
            raise ArgumentParseError(
                f"Arguments for tool '{self.name}' must be a JSON object, "
                f"got {type(parsed).__name__}",
                tool=self.name,
                raw_arguments=raw,
            )
        return parsed


class ChatMessage(BaseModel):
    """A chat message in OpenAI format."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="Message role: system, user, assistant, tool")
    content: str = Field(default="", description="Message content")
    name: str | None = Field(default=None, description="Tool name for tool responses")
    tool_calls: tuple[ToolCallRef, ...] | None = Field(default=None, description="Tool calls")
    tool_call_id: str | None = Field(default=None, description="Tool call ID for tool responses")


class InboundMessage(BaseModel):
    """A message as received from the chat application (``{from, content}``)."""

    model_config = ConfigDict(populate_by_name=True)

    role: Literal["system", "user", "assistant"] = Field(..., alias="from")
    content: str = ""


@dataclass(frozen=True)
class Conversation:
    """Immutable snapshot of an ordered message sequence."""

    messages: tuple[ChatMessage, ...] = ()

    @classmethod
    def from_inbound(cls, messages: Iterable[Mapping[str, Any] | InboundMessage]) -> Conversation:
        """Build a snapshot from ``{from, content}`` messages."""
        converted = []
        for message in messages:
            inbound = (
                message
                if isinstance(message, InboundMessage)
                else InboundMessage.model_validate(message)
            )
            converted.append(ChatMessage(role=inbound.role, content=inbound.content))
        return cls(tuple(converted))

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.messages)

    def __getitem__(self, index: int) -> ChatMessage:
        return self.messages[index]

    def ensure_system(self) -> Conversation:
        """Return a snapshot whose first message is a system message."""
        if self.messages and self.messages[0].role == "system":
            return self
        return Conversation((ChatMessage(role="system", content=""), *self.messages))

    def with_system_prompt(self, content: str) -> Conversation:
        """Return a snapshot whose leading system message has ``content``."""
        base = self.ensure_system()
        system = base.messages[0].model_copy(update={"content": content})
        return Conversation((system, *base.messages[1:]))

    def extend(self, *messages: ChatMessage) -> Conversation:
        return Conversation((*self.messages, *messages))
