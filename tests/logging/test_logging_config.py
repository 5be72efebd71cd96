"""Tests for logging configuration."""

import os
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest

from docref_core.logging import get_pipeline_logger, setup_logging
from docref_core.logging.logging_config import DEFAULT_LOG_LEVELS, LoggingConfig, resolve_log_levels
from docref_core.settings import Settings


class TestLoggingConfig:
    """Test LoggingConfig class."""

    def test_default_config_path_from_env(self):
        """Test getting config path from environment."""
        with patch.dict(os.environ, {"DOCREF_LOGGING_CONFIG": "/path/to/config.yml"}):
            config = LoggingConfig()
            assert config.config_path == Path("/path/to/config.yml")

    def test_default_config_path_from_prefect_env(self):
        """Test getting config path from Prefect environment."""
        with patch.dict(os.environ, {"PREFECT_LOGGING_SETTINGS_PATH": "/prefect/config.yml"}, clear=True):
            config = LoggingConfig()
            assert config.config_path == Path("/prefect/config.yml")

    def test_docref_path_takes_precedence(self):
        env = {"DOCREF_LOGGING_CONFIG": "/docref.yml", "PREFECT_LOGGING_SETTINGS_PATH": "/prefect.yml"}
        with patch.dict(os.environ, env, clear=True):
            assert LoggingConfig().config_path == Path("/docref.yml")

    def test_no_config_path_returns_none(self):
        """Test that no env vars results in None config path."""
        with patch.dict(os.environ, clear=True):
            config = LoggingConfig()
            assert config.config_path is None

    def test_load_config_from_file(self, tmp_path: Path) -> None:
        """Test loading config from YAML file."""
        config_file = tmp_path / "logging.yml"
        config_file.write_text("""
version: 1
disable_existing_loggers: false
handlers:
  console:
    class: logging.StreamHandler
""")

        config = LoggingConfig(config_path=config_file)
        loaded = config.load_config()

        assert loaded["version"] == 1
        assert loaded["disable_existing_loggers"] is False
        assert "console" in loaded["handlers"]

    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path) -> None:
        config = LoggingConfig(config_path=tmp_path / "missing.yml")
        loaded = config.load_config()
        assert "docref_core" in loaded["loggers"]

    def test_load_default_config_when_no_file(self):
        """Test loading default config when no file exists."""
        with patch.dict(os.environ, clear=True):
            loaded = LoggingConfig().load_config()

        assert loaded["version"] == 1
        assert "formatters" in loaded
        assert "handlers" in loaded
        assert loaded["loggers"]["docref_core"]["level"] == "INFO"

    def test_default_level_from_settings(self):
        with (
            patch.dict(os.environ, clear=True),
            patch("docref_core.logging.logging_config.settings", Settings(log_level="DEBUG")),
        ):
            loaded = LoggingConfig().load_config()

        assert loaded["loggers"]["docref_core"]["level"] == "DEBUG"
        assert loaded["loggers"]["docref_core.sanitize"]["level"] == "DEBUG"

    def test_default_config_covers_every_module_logger(self):
        with patch("docref_core.logging.logging_config.settings", Settings(log_level="INFO")):
            loaded = LoggingConfig().load_config()

        for name, level in DEFAULT_LOG_LEVELS.items():
            assert loaded["loggers"][name]["level"] == level
        assert "handlers" not in loaded["loggers"]["docref_core.importer"]

    def test_config_is_cached(self):
        config = LoggingConfig()
        assert config.load_config() is config.load_config()

    @patch("logging.config.dictConfig")
    def test_apply_config(self, mock_dict_config: Mock) -> None:
        """Test applying logging configuration."""
        config = LoggingConfig()
        config.apply()

        mock_dict_config.assert_called_once()
        call_args = mock_dict_config.call_args[0][0]
        assert call_args["version"] == 1

    @patch("logging.config.dictConfig")
    def test_apply_with_prefect_settings(self, mock_dict_config: Mock) -> None:
        """Test applying config with Prefect settings."""
        with patch.dict(os.environ, clear=True):
            custom_config = {"version": 1, "loggers": {"prefect": {"level": "DEBUG"}}}
            with patch.object(LoggingConfig, "load_config", return_value=custom_config):
                config = LoggingConfig()
                config.apply()

                assert os.environ.get("PREFECT_LOGGING_LEVEL") == "DEBUG"


class TestResolveLogLevels:
    def test_package_logger_takes_level(self):
        assert resolve_log_levels("warning")["docref_core"] == "WARNING"

    def test_module_never_quieter_than_package(self):
        levels = {"docref_core": "INFO", "docref_core.sanitize": "WARNING", "docref_core.importer": "DEBUG"}
        with patch.dict(DEFAULT_LOG_LEVELS, levels, clear=True):
            assert resolve_log_levels("INFO") == {
                "docref_core": "INFO",
                "docref_core.sanitize": "INFO",
                "docref_core.importer": "DEBUG",
            }
            assert resolve_log_levels("DEBUG") == dict.fromkeys(levels, "DEBUG")
            assert resolve_log_levels("ERROR") == {
                "docref_core": "ERROR",
                "docref_core.sanitize": "WARNING",
                "docref_core.importer": "DEBUG",
            }

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            resolve_log_levels("LOUD")


class TestSetupLogging:
    """Test setup_logging function."""

    @patch("docref_core.logging.logging_config.LoggingConfig.apply")
    def test_setup_logging_basic(self, mock_apply: Mock) -> None:
        setup_logging()
        mock_apply.assert_called_once()

    @patch("docref_core.logging.logging_config.get_logger")
    @patch("docref_core.logging.logging_config.LoggingConfig.apply")
    def test_setup_logging_with_level(self, mock_apply: Mock, mock_get_logger: Mock) -> None:
        """Level override is applied to every docref logger."""
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger

        setup_logging(level="DEBUG")

        assert mock_get_logger.call_count == len(DEFAULT_LOG_LEVELS)
        mock_logger.setLevel.assert_called_with("DEBUG")

    @patch("docref_core.logging.logging_config.get_logger")
    @patch("docref_core.logging.logging_config.LoggingConfig.apply")
    def test_setup_logging_applies_module_levels(self, mock_apply: Mock, mock_get_logger: Mock) -> None:
        loggers = {name: MagicMock() for name in DEFAULT_LOG_LEVELS}
        mock_get_logger.side_effect = loggers.__getitem__

        with patch.dict(DEFAULT_LOG_LEVELS, {"docref_core.importer": "DEBUG"}):
            setup_logging(level="WARNING")

        loggers["docref_core"].setLevel.assert_called_once_with("WARNING")
        loggers["docref_core.sanitize"].setLevel.assert_called_once_with("WARNING")
        loggers["docref_core.importer"].setLevel.assert_called_once_with("DEBUG")

    @patch("docref_core.logging.logging_config.LoggingConfig")
    def test_setup_logging_with_config_path(self, mock_config_class: Mock, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yml"
        mock_instance = MagicMock()
        mock_config_class.return_value = mock_instance

        setup_logging(config_path=config_file)

        mock_config_class.assert_called_once_with(config_file)
        mock_instance.apply.assert_called_once()


class TestGetPipelineLogger:
    """Test get_pipeline_logger function."""

    @patch("docref_core.logging.logging_config.setup_logging")
    @patch("docref_core.logging.logging_config.get_logger")
    def test_get_pipeline_logger_ensures_setup(self, mock_get_logger: Mock, mock_setup: Mock) -> None:
        mock_logger = MagicMock()
        mock_get_logger.return_value = mock_logger

        import docref_core.logging.logging_config

        with patch.object(docref_core.logging.logging_config, "_logging_config", None):
            logger = get_pipeline_logger("test.module")

        mock_setup.assert_called_once()
        mock_get_logger.assert_called_with("test.module")
        assert logger == mock_logger

    @patch("docref_core.logging.logging_config.get_logger")
    def test_get_pipeline_logger_reuses_config(self, mock_get_logger: Mock) -> None:
        """Subsequent calls don't re-setup logging."""
        import docref_core.logging.logging_config

        with (
            patch.object(docref_core.logging.logging_config, "_logging_config", MagicMock()),
            patch("docref_core.logging.logging_config.setup_logging") as mock_setup,
        ):
            get_pipeline_logger("module1")
            get_pipeline_logger("module2")

            mock_setup.assert_not_called()
            assert mock_get_logger.call_count == 2
