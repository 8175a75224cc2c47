"""Streaming chat-completion provider.

The orchestrator talks to a ChatProvider; OpenAIChatProvider implements it on
top of a LangChain chat model, binding the tool catalogue and per-request
generation parameters before each streamed call.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Any, Protocol

from actionchat.exceptions import LLMError
from actionchat.llm.factory import build_chat_model
from actionchat.llm.messages import to_langchain_messages
from actionchat.streaming.accumulator import tool_deltas_of
from actionchat.streaming.normalizer import content_of, finish_reason_of

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from actionchat.conversation import Conversation
    from actionchat.llm.config import EndpointConfig, GenerationParameters

logger = logging.getLogger(__name__)


def is_stream_end_marker(chunk: Any) -> bool:
    """True for the empty closing chunk LangChain appends after the provider stream.

    It carries ``chunk_position="last"`` but no text, tool call fragments or
    finish reason, so it has no counterpart in the provider response.
    """
    return (
        getattr(chunk, "chunk_position", None) == "last"
        and not content_of(chunk)
        and not tool_deltas_of(chunk)
        and finish_reason_of(chunk) is None
    )


class ChatProvider(Protocol):
    """Source of streamed completion chunks for a conversation."""

    def stream(
        self,
        conversation: Conversation,
        parameters: GenerationParameters,
        *,
        tools: Sequence[dict[str, Any]] = (),
        tool_choice: str | None = None,
    ) -> AsyncIterator[Any]: ...


class OpenAIChatProvider:
    """ChatProvider backed by an OpenAI-compatible LangChain chat model."""

    def __init__(
        self,
        endpoint: EndpointConfig,
        *,
        chat_model: BaseChatModel | None = None,
        provider: str = "openai",
    ):
        self.endpoint = endpoint
        self.provider = provider
        self._chat_model = chat_model or build_chat_model(endpoint)

    async def stream(
        self,
        conversation: Conversation,
        parameters: GenerationParameters,
        *,
        tools: Sequence[dict[str, Any]] = (),
        tool_choice: str | None = None,
    ) -> AsyncIterator[Any]:
        """Stream message chunks for one completion pass.

        Raises:
            LLMError: If the request or the stream fails
        """
        request_kwargs = parameters.to_request_kwargs()
        if tools:
            runnable = self._chat_model.bind_tools(
                list(tools), tool_choice=tool_choice, **request_kwargs
            )
        else:
            runnable = self._chat_model.bind(**request_kwargs)

        messages = to_langchain_messages(conversation)
        logger.debug(
            "Starting streamed chat completion via %s with %d message(s)",
            self.endpoint.model.request_id,
            len(messages),
        )
        try:
            async for chunk in runnable.astream(messages):
                if is_stream_end_marker(chunk):
                    continue
                yield chunk
        except Exception as e:
            raise LLMError(
                f"Chat completion failed: {type(e).__name__}: {e}",
                provider=self.provider,
            ) from e
