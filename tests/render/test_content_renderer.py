"""Tests for ContentRenderer."""

import pytest

from docref_core.entities import Argument, Entity, ReferenceIndex, SourceReference
from docref_core.exceptions import UnknownEntityKind
from docref_core.hooks import HookRegistry
from docref_core.render import ContentRenderer
from docref_core.schema import SchemaRegistry
from docref_core.settings import Settings

UNION_TYPE = 'int<span class="type-or"> or </span>string'


@pytest.fixture
def foo(index: ReferenceIndex) -> Entity:
    return index.create(
        "function",
        "foo",
        excerpt="<script>x</script>Short desc",
        content="Long body",
        arguments=[Argument(type="int|string", name="$bar", desc="The bar.")],
    )


class TestRenderFunction:
    def test_end_to_end(self, renderer: ContentRenderer, foo: Entity):
        page = renderer.render(foo, foo.content)

        assert "<script>" not in page
        assert "x</p>" not in page
        assert '<p class="docref-description">Short desc</p>' in page
        assert f'<span class="type">{UNION_TYPE}</span> <span class="variable">$bar</span>' in page
        assert "<p>The bar.</p>" in page
        assert page.index("Short desc") < page.index("Long body") < page.index('class="docref-arguments"')
        assert "docref-source" not in page

    def test_body_nested_in_long_description(self, renderer: ContentRenderer, foo: Entity):
        page = renderer.render(foo, "BODY")
        assert '<div class="docref-longdesc">BODY</div><div class="docref-arguments">' in page

    def test_before_and_after_wrap_body(self, renderer: ContentRenderer, foo: Entity):
        assert renderer.render(foo, "BODY") == renderer.before(foo) + "BODY" + renderer.after(foo)

    def test_default_prototype(self, renderer: ContentRenderer, foo: Entity):
        assert renderer.before(foo).startswith(f'<div class="docref-prototype"><code>foo( {UNION_TYPE} $bar )</code></div>')

    def test_prototype_with_return_type(self, renderer: ContentRenderer, index: ReferenceIndex):
        entity = index.create("function", "get_the_ID", return_type="int|false")
        assert '<code>int<span class="type-or"> or </span>false get_the_ID()</code>' in renderer.before(entity)

    def test_stored_prototype_wins(self, renderer: ContentRenderer, index: ReferenceIndex):
        entity = index.create("function", "foo", prototype="<pre>function foo() {}</pre>")
        assert renderer.before(entity).startswith("<pre>function foo() {}</pre><p")

    def test_argument_order(self, renderer: ContentRenderer, index: ReferenceIndex, three_arguments: list[Argument]):
        entity = index.create("function", "foo", arguments=three_arguments)
        after = renderer.after(entity)
        assert after.index("$a") < after.index("$b") < after.index("$c")
        assert after.count('<div class="docref-arg">') == 3

    def test_no_arguments_renders_empty_section(self, renderer: ContentRenderer, index: ReferenceIndex):
        entity = index.create("function", "wp_die_handler")
        assert renderer.after(entity) == '</div><div class="docref-arguments"><h3>Arguments</h3></div>'

    def test_argument_fields_sanitized(self, renderer: ContentRenderer, index: ReferenceIndex):
        entity = index.create("function", "foo", arguments=[Argument(type="int", name="$id", desc='<a href="javascript:x()">ID</a>')])
        after = renderer.after(entity)
        assert "javascript" not in after
        assert "<p><a>ID</a></p>" in after

    def test_entity_not_mutated(self, renderer: ContentRenderer, foo: Entity):
        snapshot = foo.model_dump()
        renderer.render(foo, foo.content)
        assert foo.model_dump() == snapshot


class TestSourceLink:
    def test_link_to_archive(self, renderer: ContentRenderer, index: ReferenceIndex, source: SourceReference):
        entity = index.create("function", "get_post", source=source)
        after = renderer.after(entity)

        assert after.count('<a class="docref-source"') == 1
        assert after.endswith('<a class="docref-source" href="/files/wp-includes/post.php/">Source</a>')

    def test_link_to_code_browser(self, schema: SchemaRegistry, index: ReferenceIndex, source: SourceReference):
        settings = Settings(_env_file=None, source_base_url="https://example.org/browser/trunk", source_label="View source")
        renderer = ContentRenderer(schema, settings=settings)
        entity = index.create("function", "get_post", source=source)

        assert '<a class="docref-source" href="https://example.org/browser/trunk/wp-includes/post.php#L42">View source</a>' in renderer.after(entity)

    def test_custom_linker(self, schema: SchemaRegistry, test_settings: Settings, index: ReferenceIndex):
        renderer = ContentRenderer(schema, settings=test_settings, source_link=lambda entity: f"/x/{entity.title}")
        entity = index.create("class", "WP_Post")
        assert 'href="/x/WP_Post"' in renderer.after(entity)


class TestRenderClass:
    def test_class_prototype(self, renderer: ContentRenderer, index: ReferenceIndex):
        entity = index.create("class", "WP_Post", excerpt="Core class used to implement the WP_Post object.")
        page = renderer.render(entity, "")

        assert page.startswith('<div class="docref-prototype"><code>class WP_Post</code></div>')
        assert "<h3>Arguments</h3></div>" in page


class TestOtherKinds:
    def test_registered_kind_passes_through(self, renderer: ContentRenderer, index: ReferenceIndex):
        page = index.create("page", "About", content="<p>About us</p>")
        assert renderer.render(page, page.content) == "<p>About us</p>"

    def test_unregistered_kind_raises(self, renderer: ContentRenderer):
        entity = Entity(id="1", kind="hook", title="init")
        with pytest.raises(UnknownEntityKind):
            renderer.render(entity, "body")


class TestHooks:
    def test_fragment_hooks_receive_assembled_fragments(self, renderer: ContentRenderer, hooks: HookRegistry, foo: Entity):
        seen: dict[str, str] = {}

        @hooks.before_fragment_postprocess.register
        def before(fragment: str) -> str:
            seen["before"] = fragment
            return "[B]"

        @hooks.after_fragment_postprocess.register
        def after(fragment: str) -> str:
            seen["after"] = fragment
            return "[A]"

        assert renderer.render(foo, "BODY") == "[B]BODY[A]"
        assert seen["before"].startswith('<div class="docref-prototype">')
        assert seen["before"].endswith('<div class="docref-longdesc">')
        assert seen["after"].startswith("</div>")
        assert "$bar" in seen["after"]

    def test_args_hook_sees_sanitized_arguments(self, renderer: ContentRenderer, hooks: HookRegistry, index: ReferenceIndex):
        entity = index.create("function", "foo", arguments=[Argument(type="int", name="$a", desc="<script>x</script>Kept")])
        received: list[list[Argument]] = []

        @hooks.args_postprocess.register
        def drop_all(arguments: list[Argument]) -> list[Argument]:
            received.append(arguments)
            return []

        after = renderer.after(entity)
        assert received[0][0].desc == "Kept"
        assert 'class="docref-arg"' not in after

    def test_type_hook_applies_to_each_argument(self, renderer: ContentRenderer, hooks: HookRegistry, index: ReferenceIndex, three_arguments):
        entity = index.create("function", "foo", arguments=three_arguments)
        hooks.type_string_postprocess.register(lambda value: f"<em>{value}</em>")

        after = renderer.after(entity)
        assert after.count("<em>") == 3


class TestSettings:
    def test_css_prefix_and_heading(self, schema: SchemaRegistry, index: ReferenceIndex):
        settings = Settings(_env_file=None, css_prefix="ref", arguments_heading="Parameters")
        renderer = ContentRenderer(schema, settings=settings)
        entity = index.create("function", "foo")

        assert renderer.after(entity) == '</div><div class="ref-arguments"><h3>Parameters</h3></div>'
