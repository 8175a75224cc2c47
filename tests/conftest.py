"""Shared test fixtures for actionchat.

Provides settings fixtures used across the unit tests.
"""

import pytest
from pydantic import SecretStr

from actionchat.settings import Settings


@pytest.fixture
def test_settings() -> Settings:
    """Provide test settings with safe defaults."""
    return Settings(
        environment="testing",
        debug=True,
        llm_provider="openai",
        llm_model="gpt-4o-mini",
        llm_api_key=SecretStr("test-api-key"),
        automation_url="http://automation.test/api/v1",
        automation_api_key=SecretStr("test-st2-key"),
        automation_action_pack="anaita_actions",
        poll_interval_seconds=0.0,
        poll_timeout_seconds=5.0,
        onedrive_client_id="client-1",
        onedrive_client_secret=SecretStr("secret-1"),
        onedrive_tenant_id="tenant-1",
        onedrive_user_id="user-1",
    )


@pytest.fixture
def mock_settings(test_settings: Settings, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Mock get_settings() to return test settings wherever it is imported."""
    for module in (
        "actionchat.settings",
        "actionchat.automation.client",
        "actionchat.endpoint",
        "actionchat.llm.factory",
        "actionchat.tools.registry",
    ):
        monkeypatch.setattr(f"{module}.get_settings", lambda: test_settings)
    return test_settings
