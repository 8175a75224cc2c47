"""Application settings using pydantic-settings.

Loads configuration from environment variables with .env file support.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIRMATION_INSTRUCTION = (
    "If the user requests a function call, please ask for confirmation with the "
    "function arguments before executing the function."
)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,  # Allow both field name and alias
    )

    # Environment
    environment: Literal["development", "staging", "production", "testing"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Chat-completion provider
    # Supports: openai, openrouter, together, groq, ollama, or custom
    llm_provider: Literal["openai", "openrouter", "together", "groq", "ollama", "custom"] = Field(
        default="openai",
        description="LLM provider (openai, openrouter, together, groq, ollama, custom)",
    )
    llm_model: str = Field(
        default="gpt-4o",
        description="Model name (provider-specific format)",
    )
    llm_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="API key for the LLM provider",
        validation_alias=AliasChoices("llm_api_key", "openai_api_key"),
    )
    llm_base_url: str | None = Field(
        default=None,
        description="Custom base URL for OpenAI-compatible APIs",
    )
    llm_request_timeout: float = Field(default=90.0, gt=0)
    llm_completion: Literal["completions", "chat_completions"] = Field(
        default="chat_completions",
        description="Provider API used for streaming (text completions need a prompt builder)",
    )

    # Automation backend (StackStorm-style executions API)
    automation_url: str = Field(
        default="http://localhost/api/v1",
        description="Base URL of the automation executions API",
        validation_alias=AliasChoices("automation_url", "st2_url"),
    )
    automation_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="API key sent as St2-Api-Key",
        validation_alias=AliasChoices("automation_api_key", "st2_api"),
    )
    automation_action_pack: str = Field(
        default="anaita_actions",
        description="Action pack prefixed to every action name",
    )
    automation_timeout: int = Field(default=30, ge=1, description="Per-request timeout in seconds")
    poll_interval_seconds: float = Field(default=1.0, ge=0.0)
    poll_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Maximum time to wait for an execution to leave the in-progress states",
    )
    poll_max_attempts: int | None = Field(default=None, ge=1)

    # Storage upload credentials used by save_output
    onedrive_client_id: str = Field(
        default="",
        validation_alias=AliasChoices("onedrive_client_id", "client_ids"),
    )
    onedrive_client_secret: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("onedrive_client_secret", "client_secrets"),
    )
    onedrive_tenant_id: str = Field(
        default="",
        validation_alias=AliasChoices("onedrive_tenant_id", "tenant_ids"),
    )
    onedrive_user_id: str = Field(
        default="",
        validation_alias=AliasChoices("onedrive_user_id", "usr_ids"),
    )

    # System instruction injected into every completion request
    confirmation_instruction: str = Field(default=DEFAULT_CONFIRMATION_INSTRUCTION)
    instruction_mode: Literal["replace", "prepend", "off"] = Field(
        default="replace",
        description=(
            "'replace' overwrites the caller's system prompt, 'prepend' keeps it after "
            "the instruction, 'off' sends the caller's prompt unchanged"
        ),
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are loaded once and reused.
    """
    return Settings()
