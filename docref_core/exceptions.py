"""Exception hierarchy for docref-core.

All exceptions inherit from DocRefError, so callers can catch every
library error with a single except clause.
"""


class DocRefError(Exception):
    """Base exception for all docref-core errors."""


class ConfigurationConflict(DocRefError):
    """Raised when an entity kind or relationship category is re-registered with different settings.

    Fatal to initialization: the process should abort startup.
    """


class UnknownEntityKind(DocRefError):
    """Raised when creating or rendering an entity whose kind was never registered."""


class UnknownRelationshipCategory(DocRefError):
    """Raised when a relationship category is unknown or does not apply to an entity kind."""


class EntityNotFoundError(DocRefError):
    """Raised when an entity identifier is not present in the index."""


class RecordValidationError(DocRefError):
    """Raised when a parsed documentation record cannot be imported."""
