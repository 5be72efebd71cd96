"""Logging infrastructure for docref-core.

@public

Key components:
    get_pipeline_logger: Factory function for creating docref loggers
    setup_logging: Initialize logging configuration from YAML
    LoggingConfig: Configuration class for logging settings

Example:
    >>> from docref_core.logging import get_pipeline_logger
    >>>
    >>> logger = get_pipeline_logger(__name__)
    >>> logger.info("Import started")

Note:
    Library modules never call logging.getLogger() directly. Always use
    get_pipeline_logger() so configuration is applied consistently.
"""

from .logging_config import LoggingConfig, get_pipeline_logger, setup_logging

__all__ = [
    "LoggingConfig",
    "setup_logging",
    "get_pipeline_logger",
]
