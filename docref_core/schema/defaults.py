"""Schema of the code reference site: functions, classes and their categories."""

from .models import EntityKind, Feature, RelationshipCategory
from .registry import SchemaRegistry

__all__ = [
    "CATEGORY_PACKAGE",
    "CATEGORY_SINCE",
    "CATEGORY_SOURCE_FILE",
    "CLASS_KIND",
    "DOCUMENTED_KINDS",
    "FUNCTION_KIND",
    "REFERENCE_CATEGORIES",
    "REFERENCE_KINDS",
    "register_reference_schema",
]

FUNCTION_KIND = "function"
CLASS_KIND = "class"
DOCUMENTED_KINDS = frozenset({FUNCTION_KIND, CLASS_KIND})

CATEGORY_SOURCE_FILE = "source-file"
CATEGORY_PACKAGE = "package"
CATEGORY_SINCE = "since"

REFERENCE_KINDS = (
    # Functions nest under a parent function for namespaced or overloaded forms
    EntityKind(
        name=FUNCTION_KIND,
        label="Functions",
        hierarchical=True,
        supports=frozenset(
            {
                Feature.COMMENTS,
                Feature.CUSTOM_FIELDS,
                Feature.EDITOR,
                Feature.EXCERPT,
                Feature.PAGE_ATTRIBUTES,
                Feature.REVISIONS,
                Feature.TITLE,
            }
        ),
        slug="functions",
    ),
    EntityKind(
        name=CLASS_KIND,
        label="Classes",
        hierarchical=False,
        supports=frozenset(
            {
                Feature.COMMENTS,
                Feature.CUSTOM_FIELDS,
                Feature.EDITOR,
                Feature.EXCERPT,
                Feature.REVISIONS,
                Feature.TITLE,
            }
        ),
        slug="classes",
    ),
)

REFERENCE_CATEGORIES = (
    RelationshipCategory(name=CATEGORY_SOURCE_FILE, label="Files", applies_to=DOCUMENTED_KINDS, slug="files"),
    RelationshipCategory(name=CATEGORY_PACKAGE, label="@package", applies_to=DOCUMENTED_KINDS),
    RelationshipCategory(name=CATEGORY_SINCE, label="@since", applies_to=DOCUMENTED_KINDS),
)


def register_reference_schema(registry: SchemaRegistry) -> SchemaRegistry:
    """Register the function and class kinds and the file, package and @since categories.

    Safe to call more than once: identical definitions are no-ops.
    """
    for kind in REFERENCE_KINDS:
        registry.define_entity_kind(kind)
    for category in REFERENCE_CATEGORIES:
        registry.define_relationship_category(category)
    return registry
