"""
Notes API - Settings Tests
===========================

What:  Defaults, log-level normalization and range checks on Settings.
How:   Settings is built with `_env_file=None` so only the variables set
       through monkeypatch are seen.
"""

import pytest
from pydantic import ValidationError

from notes_api.config import Settings


class TestSettings:

    def test_defaults_bind_locally(self, monkeypatch):
        monkeypatch.delenv("BACKEND_HOST", raising=False)
        monkeypatch.delenv("BACKEND_PORT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.backend_host == "127.0.0.1"
        assert settings.backend_port == 8000

    def test_log_level_is_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_invalid_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_port_range_enforced(self, monkeypatch):
        monkeypatch.setenv("BACKEND_PORT", "80")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
