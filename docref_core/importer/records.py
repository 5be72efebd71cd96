"""Pre-parsed documentation records.

These models describe the structured output of a doc-comment parser: one
``ParsedFile`` per source file with its functions and classes, each carrying
its signature arguments and parsed doc block tags.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from docref_core.exceptions import RecordValidationError

__all__ = [
    "ParsedArgument",
    "ParsedClass",
    "ParsedDocBlock",
    "ParsedFile",
    "ParsedFunction",
    "ParsedTag",
    "parse_records",
]


class ParsedTag(BaseModel):
    """A doc block tag such as ``@param``, ``@return`` or ``@since``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    content: str = ""
    types: tuple[str, ...] = ()
    variable: str | None = None


class ParsedDocBlock(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    description: str = ""
    long_description: str = ""
    tags: tuple[ParsedTag, ...] = ()

    def tags_named(self, name: str) -> list[ParsedTag]:
        return [tag for tag in self.tags if tag.name == name]

    def first_tag(self, name: str) -> ParsedTag | None:
        return next(iter(self.tags_named(name)), None)


class ParsedArgument(BaseModel):
    """A parameter as written in the signature."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    default: str | None = None
    type: str = ""


class ParsedFunction(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    line: int | None = None
    end_line: int | None = None
    arguments: tuple[ParsedArgument, ...] = ()
    doc: ParsedDocBlock = Field(default_factory=ParsedDocBlock)


class ParsedClass(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    line: int | None = None
    end_line: int | None = None
    doc: ParsedDocBlock = Field(default_factory=ParsedDocBlock)


class ParsedFile(BaseModel):
    """Everything parsed from one source file."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    path: str
    file: ParsedDocBlock = Field(default_factory=ParsedDocBlock)
    functions: tuple[ParsedFunction, ...] = ()
    classes: tuple[ParsedClass, ...] = ()


def parse_records(raw: str | bytes | list[dict[str, Any]]) -> list[ParsedFile]:
    """Validate parser output given as JSON text or already-decoded data.

    Raises:
        RecordValidationError: If the JSON is malformed or a record does not match the schema.
    """
    try:
        data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    except json.JSONDecodeError as e:
        raise RecordValidationError(f"Records are not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise RecordValidationError(f"Records must be a list of files, got {type(data).__name__}")
    files: list[ParsedFile] = []
    for position, item in enumerate(data):
        try:
            files.append(ParsedFile.model_validate(item))
        except ValidationError as e:
            raise RecordValidationError(f"Invalid file record at position {position}: {e}") from e
    return files
