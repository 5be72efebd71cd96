"""Entity kinds, relationship categories and the registry that holds them."""

from .defaults import (
    CATEGORY_PACKAGE,
    CATEGORY_SINCE,
    CATEGORY_SOURCE_FILE,
    CLASS_KIND,
    DOCUMENTED_KINDS,
    FUNCTION_KIND,
    register_reference_schema,
)
from .models import EntityKind, Feature, RelationshipCategory
from .registry import SchemaRegistry

__all__ = [
    "CATEGORY_PACKAGE",
    "CATEGORY_SINCE",
    "CATEGORY_SOURCE_FILE",
    "CLASS_KIND",
    "DOCUMENTED_KINDS",
    "EntityKind",
    "FUNCTION_KIND",
    "Feature",
    "RelationshipCategory",
    "SchemaRegistry",
    "register_reference_schema",
]
