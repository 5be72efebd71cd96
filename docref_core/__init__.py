"""docref-core - code reference content model with sanitized, renderable output.

@public

docref-core takes pre-parsed documentation metadata about functions and
classes and turns it into a cross-referenced content model:

    - **Schema**: entity kinds (functions, classes) and hierarchical relationship
      categories (source file, package, @since) in an explicit SchemaRegistry
    - **Index**: in-memory entities, term assignments and key/value metadata
    - **Sanitization**: an idempotent chain of text stages for raw doc comments
    - **Rendering**: deterministic prototype, description, argument list and
      source link fragments spliced around a stored body
    - **Hooks**: typed filter chains for late-stage customization

Quick Start:
    >>> from docref_core import ContentRenderer, ReferenceIndex, SchemaRegistry, register_reference_schema
    >>> from docref_core import Argument
    >>>
    >>> schema = register_reference_schema(SchemaRegistry())
    >>> schema.freeze()
    >>> index = ReferenceIndex(schema)
    >>> foo = index.create(
    ...     "function",
    ...     "foo",
    ...     excerpt="Short",
    ...     content="Long body",
    ...     arguments=[Argument(type="int|string", name="$bar", desc="Bar desc")],
    ... )
    >>> html = ContentRenderer(schema).render(foo, foo.content)

Environment Variables:
    - DOCREF_CSS_PREFIX, DOCREF_ARGUMENTS_HEADING, DOCREF_SOURCE_LABEL,
      DOCREF_TYPE_CONNECTIVE, DOCREF_SOURCE_BASE_URL: rendering settings
    - DOCREF_LOGGING_CONFIG, DOCREF_LOG_LEVEL: logging
"""

from .entities import Argument, Entity, ReferenceIndex, SourceReference, Term
from .exceptions import (
    ConfigurationConflict,
    DocRefError,
    EntityNotFoundError,
    RecordValidationError,
    UnknownEntityKind,
    UnknownRelationshipCategory,
)
from .hooks import FilterChain, HookPoint, HookRegistry, load_hooks
from .humanize import TypeHumanizer, humanize
from .importer import Importer, ImportResult, parse_records
from .logging import LoggingConfig, get_pipeline_logger, setup_logging
from .logging import get_pipeline_logger as get_logger
from .render import ContentRenderer
from .sanitize import SanitizationPipeline, Stage, sanitize, sanitize_arguments
from .schema import (
    CATEGORY_PACKAGE,
    CATEGORY_SINCE,
    CATEGORY_SOURCE_FILE,
    CLASS_KIND,
    FUNCTION_KIND,
    EntityKind,
    Feature,
    RelationshipCategory,
    SchemaRegistry,
    register_reference_schema,
)
from .settings import Settings, settings

__version__ = "0.1.0"

__all__ = [
    # Config/Settings
    "Settings",
    "settings",
    # Logging
    "get_logger",
    "get_pipeline_logger",
    "LoggingConfig",
    "setup_logging",
    # Errors
    "ConfigurationConflict",
    "DocRefError",
    "EntityNotFoundError",
    "RecordValidationError",
    "UnknownEntityKind",
    "UnknownRelationshipCategory",
    # Schema
    "CATEGORY_PACKAGE",
    "CATEGORY_SINCE",
    "CATEGORY_SOURCE_FILE",
    "CLASS_KIND",
    "FUNCTION_KIND",
    "EntityKind",
    "Feature",
    "RelationshipCategory",
    "SchemaRegistry",
    "register_reference_schema",
    # Entities
    "Argument",
    "Entity",
    "ReferenceIndex",
    "SourceReference",
    "Term",
    # Sanitization
    "SanitizationPipeline",
    "Stage",
    "sanitize",
    "sanitize_arguments",
    # Rendering
    "ContentRenderer",
    "TypeHumanizer",
    "humanize",
    # Hooks
    "FilterChain",
    "HookPoint",
    "HookRegistry",
    "load_hooks",
    # Import
    "Importer",
    "ImportResult",
    "parse_records",
]
