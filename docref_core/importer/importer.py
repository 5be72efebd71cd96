"""Import parsed documentation records into a reference index.

Functions and classes are upserted by kind and name. Signature arguments are
matched with their ``@param`` tags by variable name and kept in signature
order. Term assignments are made for the source file (one nested term per
directory level), ``@package``/``@subpackage`` and ``@since`` (``4.2.1`` nests
under ``4.2``). Term counts are rebuilt once, after the whole batch.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from pydantic import ValidationError

from docref_core.entities import Argument, Entity, ReferenceIndex, SourceReference
from docref_core.exceptions import UnknownEntityKind
from docref_core.logging import get_pipeline_logger
from docref_core.schema import CATEGORY_PACKAGE, CATEGORY_SINCE, CATEGORY_SOURCE_FILE, CLASS_KIND, FUNCTION_KIND

from .records import ParsedArgument, ParsedClass, ParsedDocBlock, ParsedFile, ParsedFunction, ParsedTag

__all__ = ["ImportResult", "Importer", "since_path", "source_file_path"]

logger = get_pipeline_logger(__name__)


@dataclass
class ImportResult:
    """Outcome of an import run.

    Attributes:
        created: Ids of entities created
        updated: Ids of existing entities that were updated
        skipped: Names of records that could not be imported
        counts: Term counts per category after the final recount
    """

    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    counts: dict[str, dict[str, int]] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.created) + len(self.updated)


def source_file_path(path: str) -> list[str]:
    """Nested term names for a file: ``a/b/c.php`` -> ``a``, ``a/b``, ``a/b/c.php``."""
    segments = [s for s in path.replace("\\", "/").split("/") if s and s != "."]
    return ["/".join(segments[: i + 1]) for i in range(len(segments))]


def since_path(version: str) -> list[str]:
    """Nested term names for a version: ``4.2.1`` -> ``4.2``, ``4.2.1``.

    Major-only and non-numeric versions are a single top-level term.
    """
    version = version.strip().split()[0] if version.strip() else ""
    if not version:
        return []
    parts = version.split(".")
    if len(parts) <= 2:
        return [version]
    return [".".join(parts[:i]) for i in range(2, len(parts) + 1)]


def _union(types: Iterable[str]) -> str:
    return "|".join(t.strip() for t in types if t.strip())


class Importer:
    """Writes parsed files into a ReferenceIndex.

    Example:
        >>> importer = Importer(index)
        >>> result = importer.import_files(parse_records(raw_json))
        >>> print(result.total, result.counts["since"])
    """

    def __init__(self, index: ReferenceIndex) -> None:
        self.index = index

    def import_files(self, files: Iterable[ParsedFile]) -> ImportResult:
        """Import every file, then recount all categories once."""
        result = ImportResult()
        for parsed in files:
            self.import_file(parsed, result=result, recount=False)
        result.counts = self.index.recount_all()
        logger.info(f"Imported {result.total} entities ({len(result.created)} new, {len(result.updated)} updated, {len(result.skipped)} skipped)")
        return result

    def import_file(self, parsed: ParsedFile, *, result: ImportResult | None = None, recount: bool = True) -> ImportResult:
        result = result or ImportResult()
        logger.debug(f"Importing {parsed.path}: {len(parsed.functions)} functions, {len(parsed.classes)} classes")
        for function in parsed.functions:
            self._import_symbol(FUNCTION_KIND, function, parsed, result)
        for cls in parsed.classes:
            self._import_symbol(CLASS_KIND, cls, parsed, result)
        if recount:
            result.counts = self.index.recount_all()
        return result

    def _import_symbol(self, kind: str, symbol: ParsedFunction | ParsedClass, parsed: ParsedFile, result: ImportResult) -> None:
        try:
            fields = {
                "excerpt": symbol.doc.description,
                "content": symbol.doc.long_description,
                "source": SourceReference(path=parsed.path, line=symbol.line, end_line=symbol.end_line),
            }
            if isinstance(symbol, ParsedFunction):
                fields["arguments"] = self._arguments(symbol)
                return_tag = symbol.doc.first_tag("return")
                fields["return_type"] = _union(return_tag.types) if return_tag and return_tag.types else None

            existing = self.index.find(kind, symbol.name)
            if existing is None:
                entity = self.index.create(kind, symbol.name, **fields)
                result.created.append(entity.id)
            else:
                entity = self.index.update(existing.id, **fields)
                result.updated.append(entity.id)
        except (UnknownEntityKind, ValidationError, ValueError) as e:
            logger.warning(f"Skipping {symbol.name} in {parsed.path}: {e}")
            result.skipped.append(symbol.name)
            return

        self._assign_terms(entity, symbol.doc, parsed)
        self._store_meta(entity, symbol, parsed)

    def _arguments(self, function: ParsedFunction) -> list[Argument]:
        params = {tag.variable: tag for tag in function.doc.tags_named("param") if tag.variable}
        documented = {arg.name for arg in function.arguments}
        for variable in params.keys() - documented:
            logger.debug(f"{function.name}: @param {variable} does not match the signature")
        return [self._argument(arg, params.get(arg.name)) for arg in function.arguments]

    @staticmethod
    def _argument(arg: ParsedArgument, tag: ParsedTag | None) -> Argument:
        if tag is None:
            return Argument(type=arg.type, name=arg.name)
        return Argument(type=_union(tag.types) or arg.type, name=arg.name, desc=tag.content)

    def _assign_terms(self, entity: Entity, doc: ParsedDocBlock, parsed: ParsedFile) -> None:
        file_terms = source_file_path(entity.source.path if entity.source else parsed.path)
        if file_terms:
            self.index.ensure_term_path(CATEGORY_SOURCE_FILE, file_terms)
        self.index.assign_terms(entity.id, CATEGORY_SOURCE_FILE, file_terms[-1:])

        # Assignments replace earlier imports. Symbol tags override the file-level doc block
        package = doc.first_tag("package") or parsed.file.first_tag("package")
        subpackage = doc.first_tag("subpackage") or parsed.file.first_tag("subpackage")
        package_terms: list[str] = []
        if package and package.content.strip():
            package_terms.append(package.content.strip())
            if subpackage and subpackage.content.strip():
                package_terms.append(subpackage.content.strip())
            self.index.ensure_term_path(CATEGORY_PACKAGE, package_terms)
        self.index.assign_terms(entity.id, CATEGORY_PACKAGE, package_terms)

        versions: list[str] = []
        for tag in doc.tags_named("since"):
            path = since_path(tag.content)
            if path:
                self.index.ensure_term_path(CATEGORY_SINCE, path)
                versions.append(path[-1])
        self.index.assign_terms(entity.id, CATEGORY_SINCE, versions)

    def _store_meta(self, entity: Entity, symbol: ParsedFunction | ParsedClass, parsed: ParsedFile) -> None:
        if symbol.line is not None:
            self.index.set_meta(entity.id, "line_num", symbol.line)
        if symbol.end_line is not None:
            self.index.set_meta(entity.id, "end_line_num", symbol.end_line)
        deprecated = symbol.doc.first_tag("deprecated")
        if deprecated is not None:
            self.index.set_meta(entity.id, "deprecated", deprecated.content.strip() or True)
        else:
            self.index.delete_meta(entity.id, "deprecated")
        self.index.set_meta(entity.id, "file_path", parsed.path)
