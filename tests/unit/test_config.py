"""
Unit tests for console settings.

Tests defaults, environment overrides and startup validation.
"""

import logging
import os

import pytest
from clinic_console.core.config import Settings


class TestSettings:
    """Test settings defaults and environment overrides."""

    def test_defaults(self):
        """Test the documented default endpoints and timings."""
        settings = Settings()
        assert settings.api_base_url == "http://localhost:5001/api"
        assert settings.whatsapp_api_url == "https://whatsapp.aviawellness.com"
        assert settings.api_timeout == 30
        assert settings.whatsapp_timeout == 60
        assert settings.whatsapp_poll_interval == 3
        assert settings.whatsapp_poll_timeout == 120
        assert settings.expiring_days_default == 90

    def test_can_read_from_environment(self):
        """Test that endpoints can be read from environment variables."""
        os.environ["CLINIC_API_URL"] = "https://api.clinic.example/api"
        os.environ["WHATSAPP_API_URL"] = "https://wa.clinic.example"
        os.environ["CREDENTIAL_BACKEND"] = "redis"

        settings = Settings()

        assert settings.api_base_url == "https://api.clinic.example/api"
        assert settings.whatsapp_api_url == "https://wa.clinic.example"
        assert settings.credential_backend == "redis"

        # Cleanup
        del os.environ["CLINIC_API_URL"]
        del os.environ["WHATSAPP_API_URL"]
        del os.environ["CREDENTIAL_BACKEND"]

    def test_environment_variable_case_insensitive(self):
        """Test that environment variable names are case-insensitive."""
        os.environ["whatsapp_poll_timeout"] = "60"

        settings = Settings()
        assert settings.whatsapp_poll_timeout == 60

        del os.environ["whatsapp_poll_timeout"]

    def test_unknown_credential_backend_rejected(self):
        """Test that only memory, file and redis backends are accepted."""
        os.environ["CREDENTIAL_BACKEND"] = "sqlite"
        try:
            with pytest.raises(ValueError):
                Settings()
        finally:
            del os.environ["CREDENTIAL_BACKEND"]

    def test_log_level_parsing(self):
        """Test that log level names resolve to logging constants."""
        test_cases = [
            ("DEBUG", logging.DEBUG),
            ("info", logging.INFO),
            ("Warning", logging.WARNING),
            ("nonsense", logging.INFO),
        ]

        for value, expected in test_cases:
            settings = Settings(log_level=value)
            assert settings.get_log_level() == expected, f"Failed for value: {value}"

    def test_poll_timeout_shorter_than_interval_fails_startup(self):
        """Test that a poll timeout below one interval is refused."""
        settings = Settings(whatsapp_poll_interval=10, whatsapp_poll_timeout=5)
        with pytest.raises(ValueError):
            settings.validate_on_startup()

    def test_valid_settings_pass_startup(self):
        settings = Settings()
        settings.validate_on_startup()
