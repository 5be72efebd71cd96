"""Documentation record models.

Entities, their arguments and source references are immutable pydantic
models. Updates go through ``model_copy(update=...)`` in the index, so a
rendered entity can never be changed underneath the renderer.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "Argument",
    "Entity",
    "SourceReference",
    "Term",
]


class Argument(BaseModel):
    """One documented parameter, in signature position order.

    ``type`` may be a union of pipe-separated alternatives, e.g. ``"int|string"``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str = ""
    name: str
    desc: str = ""


class SourceReference(BaseModel):
    """Location of a symbol in the documented code base."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str
    line: int | None = Field(default=None, ge=1)
    end_line: int | None = Field(default=None, ge=1)

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Normalize separators and reject empty or traversing paths."""
        v = v.replace("\\", "/").strip()
        while v.startswith("./"):
            v = v[2:]
        v = v.lstrip("/")
        if not v:
            raise ValueError("Source path cannot be empty")
        if ".." in v.split("/"):
            raise ValueError(f"Source path cannot contain '..' segments: {v}")
        return v


class Entity(BaseModel):
    """A documentable unit: a function or a class.

    Attributes:
        id: Stable identifier assigned by the index.
        kind: Name of a registered entity kind.
        title: Symbol name.
        excerpt: Short description.
        content: Long description, the stored body the renderer wraps.
        arguments: Documented parameters in signature order.
        source: Originating file and line, if known.
        parent_id: Parent entity for hierarchical kinds.
        return_type: Documented return type, possibly a union.
        prototype: Pre-rendered signature fragment supplied by the caller.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    kind: str
    title: str
    excerpt: str = ""
    content: str = ""
    arguments: tuple[Argument, ...] = ()
    source: SourceReference | None = None
    parent_id: str | None = None
    return_type: str | None = None
    prototype: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Entity title cannot be empty")
        return v


class Term(BaseModel):
    """A term of a relationship category.

    ``count`` reflects the last recount, not live assignments.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: str
    name: str
    parent: str | None = None
    count: int = 0
