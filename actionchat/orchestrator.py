"""Completion orchestrator: one chat completion with a single tool-call round.

Flow of one request:

    START
      -> FIRST_REQUEST_SENT -> FIRST_STREAM_DRAINED
           no tool calls:  -> DONE (output = first pass)
           tool calls:     -> DISPATCHING_TOOLS
                           -> SECOND_REQUEST_SENT -> SECOND_STREAM_DRAINED
                           -> DONE (output = second pass)

Each pass is drained completely before anything is yielded, so the caller
never sees first-pass text when a second pass follows. Tool calls requested
in the second pass are not serviced.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal

from actionchat.conversation import Conversation, InboundMessage, ToolCallRef
from actionchat.llm.config import GenerationParameters, ModelConfig
from actionchat.settings import DEFAULT_CONFIRMATION_INSTRUCTION, Settings
from actionchat.streaming.accumulator import accumulate_tool_calls
from actionchat.streaming.dispatcher import dispatch_tool_calls
from actionchat.streaming.normalizer import normalize_stream
from actionchat.tools.catalogue import DEFAULT_CATALOGUE, ToolDefinition, to_openai_tools

if TYPE_CHECKING:
    from actionchat.llm.provider import ChatProvider
    from actionchat.streaming.events import StreamToken
    from actionchat.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class CompletionStage(str, Enum):
    START = "start"
    FIRST_REQUEST_SENT = "first_request_sent"
    FIRST_STREAM_DRAINED = "first_stream_drained"
    DISPATCHING_TOOLS = "dispatching_tools"
    SECOND_REQUEST_SENT = "second_request_sent"
    SECOND_STREAM_DRAINED = "second_stream_drained"
    DONE = "done"


@dataclass(frozen=True)
class ToolingConfig:
    """Tools offered on every request and the system instruction policy.

    Attributes:
        catalogue: Tool definitions sent to the provider.
        tool_choice: Provider ``tool_choice`` value.
        instruction: Text asking the model to confirm before calling a tool.
        instruction_mode: ``replace`` overwrites the caller's system prompt
            with the instruction, ``prepend`` puts the instruction before it,
            ``off`` leaves the caller's prompt alone.
    """

    catalogue: tuple[ToolDefinition, ...] = DEFAULT_CATALOGUE
    tool_choice: str = "auto"
    instruction: str | None = DEFAULT_CONFIRMATION_INSTRUCTION
    instruction_mode: Literal["replace", "prepend", "off"] = "replace"

    @classmethod
    def from_settings(cls, settings: Settings) -> ToolingConfig:
        return cls(
            instruction=settings.confirmation_instruction or None,
            instruction_mode=settings.instruction_mode,
        )

    def tools(self) -> list[dict[str, Any]]:
        return to_openai_tools(self.catalogue)

    def system_prompt(self, caller_prompt: str) -> str:
        """System message content to send, given the caller's prompt."""
        if self.instruction_mode == "off" or not self.instruction:
            return caller_prompt
        if self.instruction_mode == "prepend" and caller_prompt:
            return f"{self.instruction}\n\n{caller_prompt}"
        return self.instruction


@dataclass
class CompletionRun:
    """Request-scoped state of one orchestrated completion."""

    conversation: Conversation
    parameters: GenerationParameters
    stage: CompletionStage = CompletionStage.START
    tool_calls: list[ToolCallRef] = field(default_factory=list)

    def advance(self, stage: CompletionStage) -> None:
        logger.debug("Completion stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage


class CompletionOrchestrator:
    """Runs the two-pass tool-call loop and yields normalized tokens.

    Holds only read-only collaborators; all per-request state lives in a
    CompletionRun, so one orchestrator can serve concurrent requests.
    """

    def __init__(
        self,
        provider: ChatProvider,
        registry: ToolRegistry,
        *,
        model: ModelConfig | None = None,
        tooling: ToolingConfig | None = None,
    ):
        self.provider = provider
        self.registry = registry
        self.model = model
        self.tooling = tooling or ToolingConfig()

    def prepare(
        self,
        messages: Iterable[Mapping[str, Any] | InboundMessage],
        *,
        preprompt: str | None = None,
        generate_settings: GenerationParameters | Mapping[str, Any] | None = None,
    ) -> CompletionRun:
        """Build the initial snapshot and merged parameters for a request."""
        conversation = Conversation.from_inbound(messages).ensure_system()
        caller_prompt = preprompt if preprompt is not None else conversation[0].content
        conversation = conversation.with_system_prompt(self.tooling.system_prompt(caller_prompt))

        defaults = self.model.parameters if self.model else GenerationParameters()
        return CompletionRun(
            conversation=conversation,
            parameters=defaults.merged(generate_settings),
        )

    async def _drain(self, conversation: Conversation, parameters: GenerationParameters) -> list[Any]:
        chunks: list[Any] = []
        async for chunk in self.provider.stream(
            conversation,
            parameters,
            tools=self.tooling.tools(),
            tool_choice=self.tooling.tool_choice,
        ):
            chunks.append(chunk)
        return chunks

    async def complete(self, run: CompletionRun) -> list[Any]:
        """Drive a run to DONE and return the chunks of the surfaced pass."""
        run.advance(CompletionStage.FIRST_REQUEST_SENT)
        chunks = await self._drain(run.conversation, run.parameters)
        run.advance(CompletionStage.FIRST_STREAM_DRAINED)

        run.tool_calls = accumulate_tool_calls(chunks)
        if not run.tool_calls:
            run.advance(CompletionStage.DONE)
            return chunks

        run.advance(CompletionStage.DISPATCHING_TOOLS)
        logger.info(
            "Model requested %d tool call(s): %s",
            len(run.tool_calls),
            ", ".join(tc.name for tc in run.tool_calls),
        )
        dispatched = await dispatch_tool_calls(
            run.conversation, run.tool_calls, registry=self.registry
        )
        run.conversation = dispatched.conversation

        run.advance(CompletionStage.SECOND_REQUEST_SENT)
        chunks = await self._drain(run.conversation, run.parameters)
        run.advance(CompletionStage.SECOND_STREAM_DRAINED)

        dropped = accumulate_tool_calls(chunks)
        if dropped:
            logger.warning(
                "Ignoring %d tool call(s) requested in the follow-up pass: %s",
                len(dropped),
                ", ".join(tc.name or "<unnamed>" for tc in dropped),
            )
        run.advance(CompletionStage.DONE)
        return chunks

    async def stream(
        self,
        messages: Iterable[Mapping[str, Any] | InboundMessage],
        *,
        preprompt: str | None = None,
        generate_settings: GenerationParameters | Mapping[str, Any] | None = None,
    ) -> AsyncIterator[StreamToken]:
        """Run one completion and yield its normalized tokens.

        Args:
            messages: Conversation as ``{from, content}`` messages.
            preprompt: Caller's system prompt (subject to the instruction policy).
            generate_settings: Overrides for the model's default parameters.

        Yields:
            StreamToken for each chunk of the surfaced completion pass.
        """
        run = self.prepare(messages, preprompt=preprompt, generate_settings=generate_settings)
        chunks = await self.complete(run)
        for token in normalize_stream(chunks):
            yield token
