"""Unit tests for endpoint assembly and settings."""

from unittest.mock import MagicMock

import pytest


class TestSettings:
    def test_legacy_environment_names(self, monkeypatch):
        """Deployment variable names used by existing installs are accepted."""
        from actionchat.settings import Settings

        for name in ("AUTOMATION_URL", "AUTOMATION_API_KEY", "LLM_API_KEY", "ONEDRIVE_USER_ID"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("ST2_URL", "https://st2.example.com/api/v1")
        monkeypatch.setenv("ST2_API", "legacy-key")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-legacy")
        monkeypatch.setenv("USR_IDS", "user-9")

        settings = Settings(_env_file=None)

        assert settings.automation_url == "https://st2.example.com/api/v1"
        assert settings.automation_api_key.get_secret_value() == "legacy-key"
        assert settings.llm_api_key.get_secret_value() == "sk-legacy"
        assert settings.onedrive_user_id == "user-9"

    def test_defaults(self, monkeypatch):
        from actionchat.settings import DEFAULT_CONFIRMATION_INSTRUCTION, Settings

        for name in ("INSTRUCTION_MODE", "AUTOMATION_ACTION_PACK", "CONFIRMATION_INSTRUCTION"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        assert settings.instruction_mode == "replace"
        assert settings.automation_action_pack == "anaita_actions"
        assert settings.confirmation_instruction == DEFAULT_CONFIRMATION_INSTRUCTION


class TestEndpointOpenai:
    def test_assembles_orchestrator(self, mock_settings):
        from actionchat.endpoint import endpoint_openai
        from actionchat.orchestrator import CompletionOrchestrator

        executor = MagicMock()
        orchestrator = endpoint_openai(chat_model=MagicMock(), executor=executor)

        assert isinstance(orchestrator, CompletionOrchestrator)
        assert orchestrator.model.request_id == "gpt-4o-mini"
        assert orchestrator.provider.provider == "openai"
        assert "delete_ticket" in orchestrator.registry
        assert orchestrator.tooling.instruction_mode == "replace"

    def test_missing_key_fails_fast(self, test_settings):
        from pydantic import SecretStr

        from actionchat.endpoint import endpoint_openai
        from actionchat.exceptions import ConfigurationError

        settings = test_settings.model_copy(update={"llm_api_key": SecretStr("")})
        with pytest.raises(ConfigurationError):
            endpoint_openai(settings=settings, executor=MagicMock())
