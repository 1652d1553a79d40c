"""Tests for shared/config.py."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        assert settings.app_name == "Tavern Admin API"
        assert settings.debug is False
        assert settings.port == 8000
        assert settings.data_root == Path("data")
        assert settings.default_user_handle == "default-user"
        assert settings.template_user_handle == "default-template"
        assert settings.account_store_backend == "file"
        assert settings.scan_concurrency == 8
        assert settings.min_confirmation_token_length == 8
        assert settings.smtp_port == 587

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {
            "DEBUG": "true",
            "DATA_ROOT": "/srv/tavern/data",
            "ACCOUNT_STORE_BACKEND": "supabase",
            "SCAN_CONCURRENCY": "2",
        }):
            settings = Settings(_env_file=None)
        assert settings.debug is True
        assert settings.data_root == Path("/srv/tavern/data")
        assert settings.account_store_backend == "supabase"
        assert settings.scan_concurrency == 2

    def test_rejects_unknown_store_backend(self):
        with patch.dict(os.environ, {"ACCOUNT_STORE_BACKEND": "redis"}):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)

    def test_loads_smtp_config(self):
        with patch.dict(os.environ, {
            "SMTP_HOST": "smtp.example.com",
            "SMTP_USE_TLS": "false",
            "EMAIL_FROM": "admin@example.com",
        }):
            settings = Settings(_env_file=None)
        assert settings.smtp_host == "smtp.example.com"
        assert settings.smtp_use_tls is False
        assert settings.email_from == "admin@example.com"


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        get_settings.cache_clear()
        assert isinstance(get_settings(), Settings)

    def test_get_settings_caches(self):
        """get_settings should return cached instance."""
        get_settings.cache_clear()
        assert get_settings() is get_settings()
