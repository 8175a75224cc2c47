"""Text-completion endpoint for models served without a chat template.

The conversation is rendered to a single prompt by an injected prompt
builder (the same one used for legacy text-generation endpoints), streamed
from the ``/completions`` API and normalized into StreamTokens. There is no
tool round on this path; the tool catalogue is still sent in the request
body for backends that accept it.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

from actionchat.conversation import Conversation, InboundMessage
from actionchat.exceptions import LLMError
from actionchat.llm.factory import build_completions_client
from actionchat.orchestrator import ToolingConfig
from actionchat.streaming.normalizer import normalize_stream

if TYPE_CHECKING:
    from openai import AsyncOpenAI

    from actionchat.llm.config import EndpointConfig, GenerationParameters, ModelConfig
    from actionchat.streaming.events import StreamToken

logger = logging.getLogger(__name__)


class PromptBuilder(Protocol):
    """Renders a conversation into a text-completion prompt."""

    async def __call__(
        self,
        conversation: Conversation,
        *,
        preprompt: str | None,
        model: ModelConfig,
    ) -> str: ...


class TextCompletionEndpoint:
    """Serves ``stream()`` requests through the text-completions API."""

    def __init__(
        self,
        endpoint: EndpointConfig,
        prompt_builder: PromptBuilder,
        *,
        client: AsyncOpenAI | None = None,
        tooling: ToolingConfig | None = None,
        provider: str = "openai",
    ):
        self.endpoint = endpoint
        self.prompt_builder = prompt_builder
        self.tooling = tooling or ToolingConfig()
        self.provider = provider
        self._client = client or build_completions_client(endpoint)

    def request_body(self) -> dict[str, Any]:
        """Extra body fields: endpoint ``extra_body`` plus the tool catalogue."""
        return {
            **(self.endpoint.extra_body or {}),
            "tools": self.tooling.tools(),
            "tool_choice": self.tooling.tool_choice,
        }

    async def _drain(self, prompt: str, parameters: GenerationParameters) -> list[Any]:
        try:
            response = await self._client.completions.create(
                model=self.endpoint.model.request_id,
                prompt=prompt,
                stream=True,
                extra_body=self.request_body(),
                **parameters.to_request_kwargs(),
            )
            return [chunk async for chunk in response]
        except Exception as e:
            raise LLMError(
                f"Text completion failed: {type(e).__name__}: {e}",
                provider=self.provider,
            ) from e

    async def stream(
        self,
        messages: Iterable[Mapping[str, Any] | InboundMessage],
        *,
        preprompt: str | None = None,
        generate_settings: GenerationParameters | Mapping[str, Any] | None = None,
    ) -> AsyncIterator[StreamToken]:
        """Build the prompt, stream one completion and yield its tokens."""
        model = self.endpoint.model
        conversation = Conversation.from_inbound(messages)
        prompt = await self.prompt_builder(conversation, preprompt=preprompt, model=model)
        parameters = model.parameters.merged(generate_settings)

        logger.debug(
            "Starting streamed text completion via %s (%d prompt chars)",
            model.request_id,
            len(prompt),
        )
        chunks = await self._drain(prompt, parameters)
        for token in normalize_stream(chunks):
            yield token
