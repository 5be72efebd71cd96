"""Centralized logging configuration for docref-core.

@public

Supports YAML-based configuration and programmatic setup with defaults.
Loggers are created through Prefect's logger factory so docref output
shares formatting with any Prefect-driven import jobs that embed it.

Usage:
    >>> from docref_core.logging import get_pipeline_logger
    >>> logger = get_pipeline_logger(__name__)
    >>> logger.info("Rendering started")

Environment variables:
    DOCREF_LOGGING_CONFIG: Path to custom logging.yml
    DOCREF_LOG_LEVEL: Package log level, read through ``settings.log_level``
    PREFECT_LOGGING_SETTINGS_PATH: Alternative config path
"""

import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from prefect.logging import get_logger

from docref_core.settings import settings

# Default log levels for different components
DEFAULT_LOG_LEVELS = {
    "docref_core": "INFO",
    "docref_core.sanitize": "INFO",
    "docref_core.render": "INFO",
    "docref_core.importer": "INFO",
}


class LoggingConfig:
    """Manages logging configuration for docref-core.

    @public

    Configuration precedence:
        1. Explicit config_path parameter
        2. DOCREF_LOGGING_CONFIG environment variable
        3. PREFECT_LOGGING_SETTINGS_PATH environment variable
        4. Default configuration

    Example:
        >>> config = LoggingConfig()
        >>> config.apply()
        >>>
        >>> config = LoggingConfig(Path("custom_logging.yml"))
        >>> config.apply()

    Note:
        Configuration is lazy-loaded and cached after first access.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize logging configuration.

        Args:
            config_path: Optional path to YAML configuration file.
                        If None, checks environment variables and
                        falls back to default configuration.
        """
        self.config_path = config_path or self._get_default_config_path()
        self._config: Optional[Dict[str, Any]] = None

    @staticmethod
    def _get_default_config_path() -> Optional[Path]:
        """Get default config path from environment variables."""
        if env_path := os.environ.get("DOCREF_LOGGING_CONFIG"):
            return Path(env_path)

        if prefect_path := os.environ.get("PREFECT_LOGGING_SETTINGS_PATH"):
            return Path(prefect_path)

        return None

    def load_config(self) -> Dict[str, Any]:
        """Load logging configuration from file or defaults.

        Returns:
            Dictionary in logging.config.dictConfig format.

        Note:
            Configuration is cached after first load. Create a new
            LoggingConfig instance to reload from disk.
        """
        if self._config is None:
            if self.config_path and self.config_path.exists():
                with open(self.config_path, "r") as f:
                    self._config = yaml.safe_load(f)
            else:
                self._config = self._get_default_config()
        assert self._config is not None
        return self._config

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """Get default logging configuration.

        Default format:
            "HH:MM:SS.mmm | LEVEL | logger.name - message"
        """
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s - %(message)s",
                    "datefmt": "%H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                name: {"level": level, "handlers": ["console"], "propagate": False}
                if name == "docref_core"
                else {"level": level}
                for name, level in resolve_log_levels(settings.log_level).items()
            },
            "root": {
                "level": "WARNING",
                "handlers": ["console"],
            },
        }

    def apply(self):
        """Apply the logging configuration to Python's logging system.

        Side effects:
            - Configures Python's logging system
            - May set PREFECT_LOGGING_LEVEL environment variable
        """
        config = self.load_config()
        logging.config.dictConfig(config)

        if "prefect" in config.get("loggers", {}):
            prefect_level = config["loggers"]["prefect"].get("level", "INFO")
            os.environ.setdefault("PREFECT_LOGGING_LEVEL", prefect_level)


def resolve_log_levels(level: str) -> Dict[str, str]:
    """Level of every docref logger for a package level.

    ``docref_core`` takes ``level``. Each module keeps its entry in
    DEFAULT_LOG_LEVELS unless ``level`` is more verbose.
    """
    names = logging.getLevelNamesMapping()
    level = level.upper()
    if level not in names:
        raise ValueError(f"Unknown log level: {level}")
    return {
        name: level if name == "docref_core" or names[level] < names[default] else default
        for name, default in DEFAULT_LOG_LEVELS.items()
    }


_logging_config: Optional[LoggingConfig] = None


def setup_logging(config_path: Optional[Path] = None, level: Optional[str] = None):
    """Setup logging for docref-core.

    @public

    Args:
        config_path: Optional path to YAML logging configuration file.
        level: Optional log level override, spread over the docref loggers
               with ``resolve_log_levels``. Without it the default
               configuration uses ``settings.log_level``.

    Example:
        >>> setup_logging()
        >>> setup_logging(level="DEBUG")
    """
    global _logging_config

    _logging_config = LoggingConfig(config_path)
    _logging_config.apply()

    if level:
        for logger_name, logger_level in resolve_log_levels(level).items():
            logger = get_logger(logger_name)
            logger.setLevel(logger_level)


def get_pipeline_logger(name: str):
    """Get a logger for docref components.

    @public

    Initializes logging on first use.

    Args:
        name: Logger name, typically __name__.

    Returns:
        Prefect logger instance.

    Example:
        >>> logger = get_pipeline_logger(__name__)
        >>> logger.debug("Stage applied", extra={"stage": "kses"})
    """
    if _logging_config is None:
        setup_logging()

    return get_logger(name)
