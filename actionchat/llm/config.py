"""Endpoint, model, and generation parameter models."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, SecretStr


class GenerationParameters(BaseModel):
    """Generation settings as sent by the chat application.

    Names follow the text-generation convention and are mapped to
    chat-completions names by :meth:`to_request_kwargs`.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    max_new_tokens: int | None = Field(default=None, ge=1)
    stop: str | list[str] | None = None
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    repetition_penalty: float | None = None

    def merged(
        self, overrides: GenerationParameters | Mapping[str, Any] | None
    ) -> GenerationParameters:
        """Return these parameters with non-null ``overrides`` applied on top."""
        if overrides is None:
            return self
        if not isinstance(overrides, GenerationParameters):
            overrides = GenerationParameters.model_validate(overrides)
        return GenerationParameters.model_validate(
            {**self.model_dump(exclude_none=True), **overrides.model_dump(exclude_none=True)}
        )

    def to_request_kwargs(self) -> dict[str, Any]:
        """Map to chat-completions request fields, dropping unset values."""
        mapped = {
            "max_tokens": self.max_new_tokens,
            "stop": self.stop,
            "temperature": self.temperature,
            "top_p": self.top_p,
            "frequency_penalty": self.repetition_penalty,
        }
        return {key: value for key, value in mapped.items() if value is not None}


class ModelConfig(BaseModel):
    """Model served by an endpoint, with its default generation parameters."""

    id: str | None = None
    name: str
    parameters: GenerationParameters = Field(default_factory=GenerationParameters)

    @property
    def request_id(self) -> str:
        return self.id or self.name


class EndpointConfig(BaseModel):
    """OpenAI-compatible endpoint (chat or text completions)."""

    weight: PositiveInt = 1
    model: ModelConfig
    type: Literal["openai"] = "openai"
    base_url: str = "https://api.openai.com/v1"
    api_key: SecretStr = Field(default=SecretStr("sk-"))
    completion: Literal["completions", "chat_completions"] = Field(
        default="chat_completions",
        description="chat_completions runs the tool loop; completions streams a built prompt",
    )
    default_headers: dict[str, str] | None = None
    default_query: dict[str, str] | None = None
    extra_body: dict[str, Any] | None = Field(
        default=None,
        description="Provider-specific fields merged verbatim into the request body",
    )
    timeout: float | None = 90.0
