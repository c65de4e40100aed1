"""Tests for logging configuration and loguru sink setup."""

import argparse
from unittest.mock import patch

import pytest

from arborist.api.cli.main import setup_logging
from arborist.core.config.logging_config import FileLoggingConfig, LoggingConfig


class TestFileLoggingConfig:
    """Test FileLoggingConfig validation and functionality."""

    def test_file_logging_config_defaults(self):
        """Test default file logging configuration."""
        config = FileLoggingConfig()
        assert config.enabled is False
        assert config.path == "arborist.log"
        assert config.level == "INFO"
        assert config.rotation == "10 MB"
        assert config.retention == "1 week"
        assert "time" in config.format

    def test_file_logging_config_custom_values(self):
        config = FileLoggingConfig(
            enabled=True,
            path="/custom/path.log",
            level="DEBUG",
            rotation="1 day",
            retention="30 days",
            format="Custom format",
        )
        assert config.enabled is True
        assert config.path == "/custom/path.log"
        assert config.level == "DEBUG"
        assert config.rotation == "1 day"
        assert config.retention == "30 days"
        assert config.format == "Custom format"

    def test_file_logging_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            FileLoggingConfig(level="INVALID")

    def test_file_logging_level_normalized(self):
        assert FileLoggingConfig(level="debug").level == "DEBUG"

    def test_file_logging_invalid_path_empty(self):
        with pytest.raises(ValueError, match="Log file path cannot be empty"):
            FileLoggingConfig(path="")


class TestLoggingConfig:
    """Test top-level LoggingConfig functionality."""

    def test_logging_config_defaults(self):
        config = LoggingConfig()
        assert isinstance(config.file, FileLoggingConfig)
        assert config.console_level == "WARNING"
        assert config.is_enabled() is False

    def test_logging_config_file_enabled(self):
        config = LoggingConfig(file=FileLoggingConfig(enabled=True))
        assert config.is_enabled() is True

    def test_invalid_console_level(self):
        with pytest.raises(ValueError, match="Invalid console log level"):
            LoggingConfig(console_level="LOUD")

    def test_extract_cli_overrides_no_args(self):
        """No logging flags means no overrides."""
        overrides = LoggingConfig.extract_cli_overrides(argparse.Namespace())
        assert overrides is None

    def test_extract_cli_overrides_file_logging(self):
        args = argparse.Namespace(log_file="/tmp/test.log", log_level="DEBUG")
        overrides = LoggingConfig.extract_cli_overrides(args)
        assert overrides == {
            "file": {"enabled": True, "path": "/tmp/test.log", "level": "DEBUG"}
        }

    def test_extract_cli_overrides_partial_file_args(self):
        """Test CLI override extraction with only log_file (no level)."""
        overrides = LoggingConfig.extract_cli_overrides(
            argparse.Namespace(log_file="/tmp/test.log")
        )
        assert overrides["file"]["enabled"] is True
        assert "level" not in overrides["file"]

    def test_verbose_raises_console_level(self):
        overrides = LoggingConfig.extract_cli_overrides(argparse.Namespace(verbose=True))
        assert overrides == {"console_level": "DEBUG"}


class TestSetupLogging:
    """Test setup_logging function behavior."""

    @patch("arborist.api.cli.main.logger")
    def test_console_only_by_default(self, mock_logger):
        setup_logging(LoggingConfig())

        mock_logger.remove.assert_called_once()
        assert mock_logger.add.call_count == 1
        assert mock_logger.add.call_args_list[0][1]["level"] == "WARNING"

    @patch("arborist.api.cli.main.logger")
    def test_verbose_console_level(self, mock_logger):
        setup_logging(LoggingConfig(console_level="DEBUG"))

        assert mock_logger.add.call_args_list[0][1]["level"] == "DEBUG"

    @patch("arborist.api.cli.main.logger")
    def test_file_sink_added_when_enabled(self, mock_logger):
        config = LoggingConfig(
            file=FileLoggingConfig(
                enabled=True,
                path="/tmp/test.log",
                level="INFO",
                rotation="10 MB",
                retention="1 week",
            )
        )
        setup_logging(config)

        assert mock_logger.add.call_count == 2
        file_call = mock_logger.add.call_args_list[1]
        assert str(file_call[0][0]) == "/tmp/test.log"
        assert file_call[1]["level"] == "INFO"
        assert file_call[1]["rotation"] == "10 MB"
        assert file_call[1]["retention"] == "1 week"


class TestLoggingIntegration:
    """Test logging integration with main config."""

    def test_config_includes_logging(self, clean_environment):
        from arborist.core.config.config import Config

        config = Config()
        assert isinstance(config.logging, LoggingConfig)

    def test_config_logging_overrides_from_cli(self, clean_environment):
        from arborist.core.config.config import Config

        args = argparse.Namespace(log_file="/tmp/test.log", log_level="DEBUG", verbose=True)
        config = Config.from_sources(args=args)

        assert config.logging.is_enabled() is True
        assert config.logging.file.path == "/tmp/test.log"
        assert config.logging.file.level == "DEBUG"
        assert config.logging.console_level == "DEBUG"
