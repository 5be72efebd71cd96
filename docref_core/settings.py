"""Configuration settings for docref-core.

@public

Settings are loaded from environment variables with .env file support via
pydantic-settings. Every variable carries the ``DOCREF_`` prefix.

Environment variables:
    DOCREF_CSS_PREFIX: Prefix for the CSS classes of rendered containers
    DOCREF_ARGUMENTS_HEADING: Heading of the argument-list section
    DOCREF_SOURCE_LABEL: Text of the source link
    DOCREF_TYPE_CONNECTIVE: Connective placed between union type alternatives
    DOCREF_SOURCE_BASE_URL: Base URL of a code browser for source links
    DOCREF_LOG_LEVEL: Default log level for docref_core loggers

Example:
    >>> from docref_core.settings import settings
    >>> print(settings.css_prefix)
    docref

Note:
    Settings are loaded once at module import and frozen. Components accept a
    Settings instance explicitly, so tests and embedding applications can pass
    their own without touching the environment.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Presentation and source-link configuration.

    @public

    Attributes:
        css_prefix: Prefix used for container classes, e.g. ``docref-description``.
        arguments_heading: Heading rendered at the top of the argument list.
        source_label: Link text of the source link fragment.
        type_connective: Localized connective between union type alternatives.
        source_base_url: When set, source links point to
                         ``{source_base_url}/{path}#L{line}``. When empty they
                         point to the source-file category archive.
        log_level: Default level for docref_core loggers.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCREF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Rendering
    css_prefix: str = "docref"
    arguments_heading: str = "Arguments"
    source_label: str = "Source"
    type_connective: str = " or "

    # Source links
    source_base_url: str = ""

    # Logging
    log_level: str = "INFO"


settings = Settings()
"""Global settings instance.

@public

Example:
    >>> from docref_core.settings import settings
    >>> print(settings.arguments_heading)
    Arguments
"""
