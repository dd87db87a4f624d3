"""Tests for Settings defaults and the remote credential check."""

from __future__ import annotations

import pytest

from src.recap.config import Environment, Settings
from src.recap.errors import ConfigurationError


def _settings(**overrides) -> Settings:
    values = {"OPENAI_API_KEY": "sk-test", "OPENAI_ASSISTANT_ID": "asst_test"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:
    """Tests for Settings."""

    def test_poll_defaults(self):
        settings = _settings()
        assert settings.RUN_POLL_INTERVAL_SECONDS == 1.0
        assert settings.RUN_POLL_TIMEOUT_SECONDS == 120.0

    def test_environment_parsed(self):
        assert _settings(ENVIRONMENT="production").ENVIRONMENT is Environment.production

    def test_remote_configured(self):
        assert _settings().remote_configured is True
        assert _settings(OPENAI_ASSISTANT_ID="").remote_configured is False


class TestRequireRemoteCredentials:
    """Tests for Settings.require_remote_credentials."""

    def test_passes_when_configured(self):
        _settings().require_remote_credentials()

    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY is not set"):
            _settings(OPENAI_API_KEY="").require_remote_credentials()

    def test_missing_assistant_id(self):
        with pytest.raises(ConfigurationError, match="OPENAI_ASSISTANT_ID is not set"):
            _settings(OPENAI_ASSISTANT_ID="").require_remote_credentials()

    def test_api_key_checked_first(self):
        settings = _settings(OPENAI_API_KEY="", OPENAI_ASSISTANT_ID="")
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            settings.require_remote_credentials()
