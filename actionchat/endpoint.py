"""Assemble a ready-to-use completion endpoint from configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from actionchat.completions import TextCompletionEndpoint
from actionchat.exceptions import ConfigurationError
from actionchat.llm.factory import endpoint_from_settings
from actionchat.llm.provider import OpenAIChatProvider
from actionchat.orchestrator import CompletionOrchestrator, ToolingConfig
from actionchat.settings import Settings, get_settings
from actionchat.tools.registry import build_tool_registry

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel
    from openai import AsyncOpenAI

    from actionchat.completions import PromptBuilder
    from actionchat.llm.config import EndpointConfig
    from actionchat.tools.handlers import ActionExecutor


def endpoint_openai(
    endpoint: EndpointConfig | None = None,
    *,
    settings: Settings | None = None,
    chat_model: BaseChatModel | None = None,
    executor: ActionExecutor | None = None,
    prompt_builder: PromptBuilder | None = None,
    completions_client: AsyncOpenAI | None = None,
) -> CompletionOrchestrator | TextCompletionEndpoint:
    """Build a streaming endpoint for an OpenAI-compatible backend.

    ``endpoint.completion`` selects the flavour: ``chat_completions`` returns
    the tool-calling orchestrator, ``completions`` returns a text-completion
    endpoint driven by ``prompt_builder``.

    Args:
        endpoint: Endpoint configuration (built from settings if omitted)
        settings: Settings override (uses get_settings() if omitted)
        chat_model: Pre-built chat model, mainly for tests
        executor: Action executor (uses the shared automation client if omitted)
        prompt_builder: Renders the conversation for text completions
        completions_client: Pre-built AsyncOpenAI client, mainly for tests

    Returns:
        Object whose ``stream()`` serves chat requests

    Raises:
        ConfigurationError: If text completions are selected without a prompt builder
    """
    settings = settings or get_settings()
    endpoint = endpoint or endpoint_from_settings(settings)
    tooling = ToolingConfig.from_settings(settings)

    if endpoint.completion == "completions":
        if prompt_builder is None:
            raise ConfigurationError(
                "Text completions (LLM_COMPLETION=completions) need a prompt builder"
            )
        return TextCompletionEndpoint(
            endpoint,
            prompt_builder,
            client=completions_client,
            tooling=tooling,
            provider=settings.llm_provider,
        )

    provider = OpenAIChatProvider(
        endpoint,
        chat_model=chat_model,
        provider=settings.llm_provider,
    )
    return CompletionOrchestrator(
        provider,
        build_tool_registry(executor, settings),
        model=endpoint.model,
        tooling=tooling,
    )
