"""Schema definitions for entity kinds and relationship categories."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

__all__ = [
    "EntityKind",
    "Feature",
    "RelationshipCategory",
]


class Feature(StrEnum):
    """Auxiliary features an entity kind can support, each independently togglable."""

    COMMENTS = "comments"
    CUSTOM_FIELDS = "custom-fields"
    EDITOR = "editor"
    EXCERPT = "excerpt"
    PAGE_ATTRIBUTES = "page-attributes"
    REVISIONS = "revisions"
    TITLE = "title"


def _validate_name(v: str) -> str:
    if not v or v != v.strip() or any(c.isspace() for c in v):
        raise ValueError(f"Schema names must be non-empty and contain no whitespace: {v!r}")
    return v


class EntityKind(BaseModel):
    """Configuration of a documentable entity kind.

    Two kinds compare equal when every setting matches, which is what makes
    re-registration with identical settings a no-op.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    label: str
    hierarchical: bool = False
    supports: frozenset[Feature] = frozenset({Feature.TITLE, Feature.EDITOR})
    slug: str
    has_archive: bool = True
    public: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_name(v)

    def supports_feature(self, feature: Feature | str) -> bool:
        return Feature(feature) in self.supports


class RelationshipCategory(BaseModel):
    """Configuration of a term taxonomy linking entities many-to-many."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    label: str
    applies_to: frozenset[str]
    hierarchical: bool = True
    slug: str | None = None
    public: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_name(v)

    @property
    def url_slug(self) -> str:
        """Slug used in archive URLs, falling back to the category name."""
        return self.slug or self.name
