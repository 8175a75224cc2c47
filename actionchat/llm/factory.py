"""Chat model and text-completions client factory.

Supports any OpenAI-compatible backend:
- OpenAI: Direct OpenAI API access
- OpenRouter, Together, Groq: hosted OpenAI-compatible APIs
- Ollama: local models
- Anything else: set LLM_BASE_URL

Environment variables:
- LLM_PROVIDER: openai (default), openrouter, together, groq, ollama, custom
- LLM_MODEL: Model name (e.g., gpt-4o)
- LLM_API_KEY: API key for the provider
- LLM_BASE_URL: Custom base URL for OpenAI-compatible APIs
- LLM_COMPLETION: chat_completions (default) or completions
"""

from __future__ import annotations

from typing import Any

from langchain_openai import ChatOpenAI
from openai import AsyncOpenAI
from pydantic import SecretStr

from actionchat.exceptions import ConfigurationError
from actionchat.llm.config import EndpointConfig, ModelConfig
from actionchat.settings import Settings, get_settings

# Provider base URLs
PROVIDER_BASE_URLS = {
    "openrouter": "https://openrouter.ai/api/v1",
    "openai": "https://api.openai.com/v1",
    "together": "https://api.together.xyz/v1",
    "groq": "https://api.groq.com/openai/v1",
    "ollama": "http://localhost:11434/v1",
}


def endpoint_from_settings(settings: Settings | None = None) -> EndpointConfig:
    """Build the endpoint configuration from environment settings.

    Raises:
        ConfigurationError: If the provider needs an API key or base URL that is not set
    """
    settings = settings or get_settings()
    provider = settings.llm_provider

    api_key = settings.llm_api_key.get_secret_value()
    if not api_key:
        if provider != "ollama":
            raise ConfigurationError(f"LLM_API_KEY is required when using {provider} provider")
        api_key = "ollama"

    base_url = settings.llm_base_url or PROVIDER_BASE_URLS.get(provider)
    if base_url is None:
        raise ConfigurationError(
            f"Unknown provider '{provider}'. Set LLM_BASE_URL for custom providers."
        )

    headers: dict[str, str] | None = None
    if provider == "openrouter":
        headers = {"X-Title": "actionchat"}

    return EndpointConfig(
        model=ModelConfig(name=settings.llm_model),
        base_url=base_url,
        api_key=SecretStr(api_key),
        completion=settings.llm_completion,
        default_headers=headers,
        timeout=settings.llm_request_timeout,
    )


def build_chat_model(endpoint: EndpointConfig, **kwargs: Any) -> ChatOpenAI:
    """Create a streaming ChatOpenAI client for an endpoint.

    Args:
        endpoint: Endpoint configuration
        **kwargs: Additional ChatOpenAI arguments

    Returns:
        Configured chat model
    """
    llm_kwargs: dict[str, Any] = {
        "model": endpoint.model.request_id,
        "api_key": endpoint.api_key.get_secret_value() or "sk-",
        "base_url": endpoint.base_url,
        "streaming": True,
        **kwargs,
    }
    if endpoint.timeout is not None:
        llm_kwargs["timeout"] = endpoint.timeout
    if endpoint.default_headers:
        llm_kwargs["default_headers"] = dict(endpoint.default_headers)
    if endpoint.default_query:
        llm_kwargs["default_query"] = dict(endpoint.default_query)
    if endpoint.extra_body:
        llm_kwargs["extra_body"] = dict(endpoint.extra_body)

    return ChatOpenAI(**llm_kwargs)


def build_completions_client(endpoint: EndpointConfig, **kwargs: Any) -> AsyncOpenAI:
    """Create an AsyncOpenAI client for the text-completions API.

    Args:
        endpoint: Endpoint configuration
        **kwargs: Additional AsyncOpenAI arguments (e.g. ``http_client``)
    """
    client_kwargs: dict[str, Any] = {
        "api_key": endpoint.api_key.get_secret_value() or "sk-",
        "base_url": endpoint.base_url,
        **kwargs,
    }
    if endpoint.timeout is not None:
        client_kwargs["timeout"] = endpoint.timeout
    if endpoint.default_headers:
        client_kwargs["default_headers"] = dict(endpoint.default_headers)
    if endpoint.default_query:
        client_kwargs["default_query"] = dict(endpoint.default_query)

    return AsyncOpenAI(**client_kwargs)
