"""
Test suite for configuration classes.

System role: Verification of environment-driven settings
"""

import pytest
from pydantic import ValidationError

from backend.configs import Settings
from backend.configs.base import BaseSettings


class TestBaseSettings:
    """Test suite for shared base settings."""

    def test_defaults_should_be_production_safe(self, monkeypatch) -> None:
        """Test debug is off and logging is INFO by default."""
        # Arrange
        monkeypatch.delenv("DEBUG", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        # Act
        settings = BaseSettings(_env_file=None)

        # Assert
        assert settings.debug is False
        assert settings.log_level == "INFO"

    def test_env_should_override_debug_and_normalize_log_level(self, monkeypatch) -> None:
        """Test environment variables are read case-insensitively."""
        # Arrange
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        # Act
        settings = Settings(_env_file=None)

        # Assert
        assert settings.debug is True
        assert settings.log_level == "DEBUG"

    def test_unknown_log_level_should_be_rejected(self) -> None:
        """Test an invalid level fails validation."""
        with pytest.raises(ValidationError):
            BaseSettings(_env_file=None, log_level="chatty")
