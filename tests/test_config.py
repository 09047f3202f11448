"""Tests for settings and logging configuration."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from py_subsector.config import Settings, configure_logging, settings
from py_subsector.core.subsector import SubsectorOptions


class TestSettings:
    """Test environment driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("DEFAULT_SEED", "GEOMETRY", "DENSITY_THRESHOLD",
                     "GAS_GIANT_THRESHOLD", "INCLUDE_FILE", "LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)
        config = Settings()
        assert config.geometry == "square"
        assert config.density_threshold == 3
        assert config.gas_giant_threshold == 9
        assert config.include_file == "traveller.txt"
        assert config.log_format == "console"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DENSITY_THRESHOLD", "5")
        monkeypatch.setenv("GEOMETRY", "hex")
        config = Settings()
        assert config.density_threshold == 5
        assert config.geometry == "hex"

    def test_invalid_environment_rejected(self, monkeypatch):
        monkeypatch.setenv("GEOMETRY", "triangle")
        with pytest.raises(ValidationError):
            Settings()

    def test_options_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "include_file", "mapping.txt")
        monkeypatch.setattr(settings, "gas_giant_threshold", 4)
        options = SubsectorOptions.from_settings()
        assert options.include_file == "mapping.txt"
        assert options.gas_giant_threshold == 4


class TestLogging:
    """Test structlog setup."""

    @pytest.mark.parametrize("fmt", ["console", "json"])
    def test_configure_logging(self, fmt, capsys):
        configure_logging("INFO", fmt)
        structlog.get_logger("py_subsector.test").info("configured", fmt=fmt)
        captured = capsys.readouterr()
        assert "configured" in captured.err
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
