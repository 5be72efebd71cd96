"""Content expansion for function and class pages.

The renderer wraps an entity's stored body (its long description) with
generated fragments:

    before = prototype + short description + opening long-description container
    after  = closing container + argument list + optional source link

The long-description container is opened in ``before`` and closed in
``after`` so the stored body nests inside it. Each fragment goes through its
post-process hook after it is fully assembled.

Rendering never mutates the entity, holds no state between calls and is
safe to run concurrently.
"""

import html
from collections.abc import Callable, Sequence

from docref_core.entities.models import Argument, Entity
from docref_core.hooks import HookRegistry
from docref_core.humanize import TypeHumanizer
from docref_core.sanitize import SanitizationPipeline, default_pipeline
from docref_core.schema import CATEGORY_SOURCE_FILE, CLASS_KIND, DOCUMENTED_KINDS, SchemaRegistry
from docref_core.settings import Settings, settings as default_settings

from .fragments import autop, source_url

__all__ = ["ContentRenderer", "PrototypeBuilder", "SourceLinker"]

PrototypeBuilder = Callable[[Entity, Sequence[Argument]], str]
SourceLinker = Callable[[Entity], str | None]


class ContentRenderer:
    """Expands function and class bodies with reference fragments.

    Args:
        schema: Registry used to validate entity kinds.
        hooks: Filter chains for arguments, type strings and fragments.
        pipeline: Sanitization pipeline for excerpts and argument fields.
        settings: Labels, CSS prefix and source link configuration.
        prototype: Builds the signature fragment. Receives the entity and its
            sanitized arguments. Defaults to ``entity.prototype`` when set, or
            a ``<code>`` signature built from the arguments.
        source_link: Returns the source URL for an entity, or None for no link.

    Example:
        >>> renderer = ContentRenderer(schema)
        >>> page = renderer.render(entity, entity.content)
    """

    def __init__(
        self,
        schema: SchemaRegistry,
        *,
        hooks: HookRegistry | None = None,
        pipeline: SanitizationPipeline | None = None,
        settings: Settings | None = None,
        prototype: PrototypeBuilder | None = None,
        source_link: SourceLinker | None = None,
    ) -> None:
        self.schema = schema
        self.hooks = hooks or HookRegistry()
        self.pipeline = pipeline or default_pipeline
        self.settings = settings or default_settings
        self.humanizer = TypeHumanizer(self.hooks, self.settings)
        self._prototype = prototype or self.default_prototype
        self._source_link = source_link or self.default_source_link

    def render(self, entity: Entity, body: str) -> str:
        """Return ``before + body + after`` for functions and classes.

        Entities of other registered kinds get their body back unchanged.

        Raises:
            UnknownEntityKind: If the entity's kind was never registered.
        """
        self.schema.entity_kind(entity.kind)
        if entity.kind not in DOCUMENTED_KINDS:
            return body
        arguments = self.arguments(entity)
        return self._before(entity, arguments) + body + self._after(entity, arguments)

    def arguments(self, entity: Entity) -> list[Argument]:
        """Sanitized arguments after the ``args-postprocess`` hook."""
        return self.hooks.args_postprocess(self.pipeline.sanitize_arguments(entity.arguments))

    def before(self, entity: Entity) -> str:
        return self._before(entity, self.arguments(entity))

    def after(self, entity: Entity) -> str:
        return self._after(entity, self.arguments(entity))

    def _css(self, name: str) -> str:
        return f"{self.settings.css_prefix}-{name}"

    def _before(self, entity: Entity, arguments: Sequence[Argument]) -> str:
        fragment = self._prototype(entity, arguments)
        fragment += f'<p class="{self._css("description")}">{self.pipeline(entity.excerpt)}</p>'
        fragment += f'<div class="{self._css("longdesc")}">'
        return self.hooks.before_fragment_postprocess(fragment)

    def _after(self, entity: Entity, arguments: Sequence[Argument]) -> str:
        parts = ["</div>", f'<div class="{self._css("arguments")}"><h3>{html.escape(self.settings.arguments_heading)}</h3>']
        for argument in arguments:
            parts.append(
                f'<div class="{self._css("arg")}">'
                f'<h4><code><span class="type">{self.humanizer(argument.type)}</span> <span class="variable">{argument.name}</span></code></h4>'
                f"{autop(argument.desc)}"
                "</div>"
            )
        parts.append("</div>")

        link = self._source_link(entity)
        if link:
            parts.append(f'<a class="{self._css("source")}" href="{html.escape(link)}">{html.escape(self.settings.source_label)}</a>')

        return self.hooks.after_fragment_postprocess("".join(parts))

    def default_prototype(self, entity: Entity, arguments: Sequence[Argument]) -> str:
        """Signature fragment, e.g. ``<code>int foo( string $bar )</code>``."""
        if entity.prototype is not None:
            return entity.prototype
        title = html.escape(entity.title, quote=False)
        if entity.kind == CLASS_KIND:
            signature = f"class {title}"
        else:
            params = ", ".join(" ".join(part for part in (self.humanizer(a.type), a.name) if part) for a in arguments)
            signature = f"{title}( {params} )" if params else f"{title}()"
            if entity.return_type:
                signature = f"{self.humanizer(self.pipeline(entity.return_type))} {signature}"
        return f'<div class="{self._css("prototype")}"><code>{signature}</code></div>'

    def default_source_link(self, entity: Entity) -> str | None:
        """Link to the code browser or the source-file archive; None without a source reference."""
        if entity.source is None:
            return None
        files_slug = CATEGORY_SOURCE_FILE
        if CATEGORY_SOURCE_FILE in {c.name for c in self.schema.relationship_categories()}:
            files_slug = self.schema.relationship_category(CATEGORY_SOURCE_FILE).url_slug
        return source_url(entity.source, base_url=self.settings.source_base_url, files_slug=files_slug)
