"""Chat-completion provider: endpoint config, model factory, streaming adapter."""

from actionchat.llm.config import EndpointConfig, GenerationParameters, ModelConfig
from actionchat.llm.factory import (
    PROVIDER_BASE_URLS,
    build_chat_model,
    build_completions_client,
    endpoint_from_settings,
)
from actionchat.llm.messages import to_langchain_messages
from actionchat.llm.provider import ChatProvider, OpenAIChatProvider

__all__ = [
    "PROVIDER_BASE_URLS",
    "ChatProvider",
    "EndpointConfig",
    "GenerationParameters",
    "ModelConfig",
    "OpenAIChatProvider",
    "build_chat_model",
    "build_completions_client",
    "endpoint_from_settings",
    "to_langchain_messages",
]
