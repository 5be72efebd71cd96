"""Schema registry for entity kinds and relationship categories.

The registry is the single mutation point for schema state. It is created
once at startup, populated (usually by ``register_reference_schema``), frozen,
and then passed to every component that needs to look kinds up. After that
it is read-only, so concurrent render calls share it without coordination.
"""

import threading

from docref_core.exceptions import ConfigurationConflict, UnknownEntityKind, UnknownRelationshipCategory
from docref_core.logging import get_pipeline_logger

from .models import EntityKind, RelationshipCategory

__all__ = ["SchemaRegistry"]

logger = get_pipeline_logger(__name__)


class SchemaRegistry:
    """Registered entity kinds and relationship categories.

    Example:
        >>> registry = SchemaRegistry()
        >>> register_reference_schema(registry)
        >>> registry.freeze()
        >>> registry.entity_kind("function").hierarchical
        True
    """

    def __init__(self) -> None:
        self._kinds: dict[str, EntityKind] = {}
        self._categories: dict[str, RelationshipCategory] = {}
        self._frozen = False
        self._lock = threading.Lock()

    def define_entity_kind(self, kind: EntityKind) -> EntityKind:
        """Register an entity kind.

        Registering the same name again with identical settings is a no-op
        and returns the existing definition.

        Raises:
            ConfigurationConflict: If the name is registered with different
                settings, or the registry is frozen and the name is new.
        """
        with self._lock:
            existing = self._kinds.get(kind.name)
            if existing is not None:
                if existing != kind:
                    raise ConfigurationConflict(f"Entity kind '{kind.name}' is already registered with different settings")
                return existing
            if self._frozen:
                raise ConfigurationConflict(f"Cannot register entity kind '{kind.name}': schema registry is frozen")
            self._kinds[kind.name] = kind
        logger.debug(f"Registered entity kind '{kind.name}'")
        return kind

    def define_relationship_category(self, category: RelationshipCategory) -> RelationshipCategory:
        """Register a relationship category.

        Raises:
            ConfigurationConflict: On conflicting re-registration or a frozen registry.
            UnknownEntityKind: If ``applies_to`` names a kind that was never registered.
        """
        with self._lock:
            unknown = sorted(category.applies_to - self._kinds.keys())
            if unknown:
                raise UnknownEntityKind(f"Relationship category '{category.name}' applies to unregistered kinds: {', '.join(unknown)}")
            existing = self._categories.get(category.name)
            if existing is not None:
                if existing != category:
                    raise ConfigurationConflict(f"Relationship category '{category.name}' is already registered with different settings")
                return existing
            if self._frozen:
                raise ConfigurationConflict(f"Cannot register relationship category '{category.name}': schema registry is frozen")
            self._categories[category.name] = category
        logger.debug(f"Registered relationship category '{category.name}'")
        return category

    def freeze(self) -> None:
        """End the registration phase. New definitions are rejected afterwards."""
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def entity_kind(self, name: str) -> EntityKind:
        """Return the registered kind.

        Raises:
            UnknownEntityKind: If no kind with this name was registered.
        """
        try:
            return self._kinds[name]
        except KeyError:
            raise UnknownEntityKind(f"Entity kind '{name}' is not registered") from None

    def relationship_category(self, name: str) -> RelationshipCategory:
        """Return the registered category.

        Raises:
            UnknownRelationshipCategory: If no category with this name was registered.
        """
        try:
            return self._categories[name]
        except KeyError:
            raise UnknownRelationshipCategory(f"Relationship category '{name}' is not registered") from None

    def has_entity_kind(self, name: str) -> bool:
        return name in self._kinds

    def entity_kinds(self) -> list[EntityKind]:
        return list(self._kinds.values())

    def relationship_categories(self, kind: str | None = None) -> list[RelationshipCategory]:
        """All categories, or only those applying to ``kind``."""
        categories = list(self._categories.values())
        if kind is None:
            return categories
        return [c for c in categories if kind in c.applies_to]
