"""Import of pre-parsed documentation records."""

from .importer import Importer, ImportResult, since_path, source_file_path
from .records import ParsedArgument, ParsedClass, ParsedDocBlock, ParsedFile, ParsedFunction, ParsedTag, parse_records

__all__ = [
    "ImportResult",
    "Importer",
    "ParsedArgument",
    "ParsedClass",
    "ParsedDocBlock",
    "ParsedFile",
    "ParsedFunction",
    "ParsedTag",
    "parse_records",
    "since_path",
    "source_file_path",
]
