"""In-memory reference index: entities, term assignments and metadata.

Stands in for the content-management runtime that hosts the reference:
it creates entities for registered kinds only, attaches key/value metadata,
and keeps many-to-many term assignments per relationship category.

Term counts are not maintained on assignment. Imports assign in bulk and out
of order, so counts are rebuilt with ``recount``/``recount_all`` once the
import has finished.
"""

import threading
import uuid
from collections.abc import Iterable, Sequence
from typing import Any

from docref_core.exceptions import EntityNotFoundError, UnknownRelationshipCategory
from docref_core.logging import get_pipeline_logger
from docref_core.schema import SchemaRegistry

from .models import Argument, Entity, SourceReference, Term

__all__ = ["ReferenceIndex"]

logger = get_pipeline_logger(__name__)


class ReferenceIndex:
    """Dict-based store of documentation entities.

    Storage layout: entities by id, metadata by entity id, and per category
    a term table (name -> parent) plus assignments (entity id -> term names,
    in assignment order).

    All writes hold one lock, so concurrent import workers never lose updates
    to an entity's assignment set.
    """

    def __init__(self, schema: SchemaRegistry) -> None:
        self.schema = schema
        self._entities: dict[str, Entity] = {}
        self._meta: dict[str, dict[str, Any]] = {}
        self._terms: dict[str, dict[str, str | None]] = {}  # category -> term name -> parent name
        self._counts: dict[str, dict[str, int]] = {}  # category -> term name -> count at last recount
        self._assignments: dict[str, dict[str, list[str]]] = {}  # category -> entity id -> term names
        self._lock = threading.RLock()

    # --- Entities ---

    def create(
        self,
        kind: str,
        title: str,
        *,
        excerpt: str = "",
        content: str = "",
        arguments: Sequence[Argument] = (),
        source: SourceReference | None = None,
        parent_id: str | None = None,
        return_type: str | None = None,
        prototype: str | None = None,
        entity_id: str | None = None,
    ) -> Entity:
        """Create an entity of a registered kind.

        Raises:
            UnknownEntityKind: If ``kind`` was never registered.
            EntityNotFoundError: If ``parent_id`` does not exist.
            ValueError: If a parent is given for a non-hierarchical kind, or the id is taken.
        """
        self.schema.entity_kind(kind)
        with self._lock:
            entity = Entity(
                id=entity_id or uuid.uuid4().hex,
                kind=kind,
                title=title,
                excerpt=excerpt,
                content=content,
                arguments=tuple(arguments),
                source=source,
                parent_id=parent_id,
                return_type=return_type,
                prototype=prototype,
            )
            if entity.id in self._entities:
                raise ValueError(f"Entity id already exists: {entity.id}")
            self._check_parent(entity)
            self._entities[entity.id] = entity
        logger.debug(f"Created {kind} '{title}' ({entity.id})")
        return entity

    def update(self, entity_id: str, **changes: Any) -> Entity:
        """Replace fields of an existing entity and return the new version.

        ``id`` and ``kind`` cannot change.
        """
        forbidden = {"id", "kind"} & changes.keys()
        if forbidden:
            raise ValueError(f"Cannot change {', '.join(sorted(forbidden))} of an entity")
        if "arguments" in changes:
            changes["arguments"] = tuple(changes["arguments"])
        with self._lock:
            current = self.get(entity_id)
            updated = Entity.model_validate({**current.model_dump(), **changes})
            self._check_parent(updated)
            self._entities[entity_id] = updated
        return updated

    def _check_parent(self, entity: Entity) -> None:
        if entity.parent_id is None:
            return
        if not self.schema.entity_kind(entity.kind).hierarchical:
            raise ValueError(f"Entity kind '{entity.kind}' is not hierarchical; '{entity.title}' cannot have a parent")
        parent = self.get(entity.parent_id)
        if parent.kind != entity.kind:
            raise ValueError(f"Parent of a {entity.kind} must be a {entity.kind}, got {parent.kind}")
        if parent.id == entity.id:
            raise ValueError(f"Entity {entity.id} cannot be its own parent")

    def get(self, entity_id: str) -> Entity:
        try:
            return self._entities[entity_id]
        except KeyError:
            raise EntityNotFoundError(f"Entity not found: {entity_id}") from None

    def find(self, kind: str, title: str, *, parent_id: str | None = None) -> Entity | None:
        """Return the entity with this kind, title and parent, if any."""
        for entity in self._entities.values():
            if entity.kind == kind and entity.title == title and entity.parent_id == parent_id:
                return entity
        return None

    def entities(self, kind: str | None = None) -> list[Entity]:
        """All entities in creation order, optionally filtered by kind."""
        return [e for e in self._entities.values() if kind is None or e.kind == kind]

    def children(self, entity_id: str) -> list[Entity]:
        return [e for e in self._entities.values() if e.parent_id == entity_id]

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    # --- Metadata ---

    def set_meta(self, entity_id: str, key: str, value: Any) -> None:
        with self._lock:
            self.get(entity_id)
            self._meta.setdefault(entity_id, {})[key] = value

    def get_meta(self, entity_id: str, key: str, default: Any = None) -> Any:
        return self._meta.get(entity_id, {}).get(key, default)

    def delete_meta(self, entity_id: str, key: str) -> None:
        with self._lock:
            self._meta.get(entity_id, {}).pop(key, None)

    def meta(self, entity_id: str) -> dict[str, Any]:
        """Copy of all metadata attached to an entity."""
        return dict(self._meta.get(entity_id, {}))

    # --- Terms ---

    def _category_for(self, name: str, kind: str | None = None):
        category = self.schema.relationship_category(name)
        if kind is not None and kind not in category.applies_to:
            raise UnknownRelationshipCategory(f"Relationship category '{name}' does not apply to entity kind '{kind}'")
        return category

    def ensure_term(self, category: str, name: str, parent: str | None = None) -> Term:
        """Return the term, creating it under ``parent`` if it does not exist.

        An existing term keeps its original parent.

        Raises:
            ValueError: If a parent is given for a non-hierarchical category, or the name is empty.
        """
        definition = self._category_for(category)
        name = name.strip()
        if not name:
            raise ValueError("Term name cannot be empty")
        if parent is not None and not definition.hierarchical:
            raise ValueError(f"Relationship category '{category}' is not hierarchical")
        with self._lock:
            terms = self._terms.setdefault(category, {})
            if parent is not None and parent not in terms:
                self.ensure_term(category, parent)
            if name not in terms:
                terms[name] = parent
            elif parent is not None and terms[name] != parent:
                logger.debug(f"Term '{name}' in '{category}' keeps parent {terms[name]!r}, ignoring {parent!r}")
        return self.term(category, name)

    def ensure_term_path(self, category: str, path: Sequence[str]) -> Term:
        """Create a chain of nested terms, each the parent of the next, and return the leaf."""
        if not path:
            raise ValueError("Term path cannot be empty")
        parent: str | None = None
        term: Term | None = None
        for name in path:
            term = self.ensure_term(category, name, parent)
            parent = term.name
        assert term is not None
        return term

    def term(self, category: str, name: str) -> Term:
        """Return a term with the count of the last recount.

        Raises:
            KeyError: If the term does not exist.
        """
        terms = self._terms.get(category, {})
        if name not in terms:
            raise KeyError(f"Term '{name}' not found in '{category}'")
        return Term(
            category=category,
            name=name,
            parent=terms[name],
            count=self._counts.get(category, {}).get(name, 0),
        )

    def terms(self, category: str) -> list[Term]:
        self._category_for(category)
        return [self.term(category, name) for name in self._terms.get(category, {})]

    def term_children(self, category: str, name: str) -> list[Term]:
        return [t for t in self.terms(category) if t.parent == name]

    # --- Assignments ---

    def assign_terms(self, entity_id: str, category: str, names: Iterable[str | Term], *, append: bool = False) -> list[Term]:
        """Assign terms to an entity, creating missing ones at the top level.

        Replaces the entity's current terms in this category unless
        ``append`` is set. Duplicates are ignored; order is kept.

        Raises:
            UnknownRelationshipCategory: If the category does not apply to the entity's kind.
        """
        with self._lock:
            entity = self.get(entity_id)
            self._category_for(category, entity.kind)
            assigned = self._assignments.setdefault(category, {})
            current = list(assigned.get(entity_id, [])) if append else []
            for item in names:
                name = item.name if isinstance(item, Term) else item
                term = self.ensure_term(category, name)
                if term.name not in current:
                    current.append(term.name)
            assigned[entity_id] = current
        return self.terms_for(entity_id, category)

    def terms_for(self, entity_id: str, category: str) -> list[Term]:
        """Terms of ``category`` assigned to an entity, in assignment order."""
        names = self._assignments.get(category, {}).get(entity_id, [])
        return [self.term(category, name) for name in names]

    def entities_in(self, category: str, name: str, *, include_children: bool = False) -> list[Entity]:
        """Entities assigned to a term, optionally including its descendant terms."""
        wanted = {name}
        if include_children:
            wanted |= self._descendants(category, name)
        assigned = self._assignments.get(category, {})
        return [self._entities[eid] for eid, names in assigned.items() if eid in self._entities and wanted.intersection(names)]

    def _descendants(self, category: str, name: str) -> set[str]:
        found: set[str] = set()
        pending = [name]
        terms = self._terms.get(category, {})
        while pending:
            current = pending.pop()
            for child, parent in terms.items():
                if parent == current and child not in found:
                    found.add(child)
                    pending.append(child)
        return found

    # --- Counting ---

    def recount(self, category: str) -> dict[str, int]:
        """Rebuild the counts of every term in a category from direct assignments."""
        self._category_for(category)
        with self._lock:
            counts = dict.fromkeys(self._terms.get(category, {}), 0)
            for entity_id, names in self._assignments.get(category, {}).items():
                if entity_id not in self._entities:
                    continue
                for name in names:
                    counts[name] = counts.get(name, 0) + 1
            self._counts[category] = counts
        logger.debug(f"Recounted {len(counts)} terms in '{category}'")
        return dict(counts)

    def recount_all(self) -> dict[str, dict[str, int]]:
        return {category.name: self.recount(category.name) for category in self.schema.relationship_categories()}

    def remove(self, entity_id: str) -> Entity:
        """Delete an entity with its metadata and assignments. Counts stay until the next recount."""
        with self._lock:
            entity = self.get(entity_id)
            if self.children(entity_id):
                raise ValueError(f"Entity {entity_id} still has children")
            del self._entities[entity_id]
            self._meta.pop(entity_id, None)
            for assigned in self._assignments.values():
                assigned.pop(entity_id, None)
        return entity
