"""Common test fixtures for docref-core."""

import pytest

from docref_core.entities import Argument, ReferenceIndex, SourceReference
from docref_core.hooks import HookRegistry
from docref_core.render import ContentRenderer
from docref_core.schema import EntityKind, SchemaRegistry, register_reference_schema
from docref_core.settings import Settings


@pytest.fixture
def schema() -> SchemaRegistry:
    """Registry with the reference kinds and categories plus a plain 'page' kind."""
    registry = register_reference_schema(SchemaRegistry())
    registry.define_entity_kind(EntityKind(name="page", label="Pages", slug="pages"))
    registry.freeze()
    return registry


@pytest.fixture
def index(schema: SchemaRegistry) -> ReferenceIndex:
    return ReferenceIndex(schema)


@pytest.fixture
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def test_settings() -> Settings:
    """Settings independent of the environment and any .env file."""
    return Settings(_env_file=None, css_prefix="docref", arguments_heading="Arguments", source_label="Source", type_connective=" or ", source_base_url="")


@pytest.fixture
def renderer(schema: SchemaRegistry, hooks: HookRegistry, test_settings: Settings) -> ContentRenderer:
    return ContentRenderer(schema, hooks=hooks, settings=test_settings)


@pytest.fixture
def three_arguments() -> list[Argument]:
    return [
        Argument(type="int", name="$a", desc="First."),
        Argument(type="string", name="$b", desc="Second."),
        Argument(type="bool", name="$c", desc="Third."),
    ]


@pytest.fixture
def source() -> SourceReference:
    return SourceReference(path="wp-includes/post.php", line=42, end_line=60)
