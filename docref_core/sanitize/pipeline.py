"""Sanitization pipeline for free-form documentation text.

Raw doc comments could introduce unsafe markup into rendered pages, so every
argument field and description passes through a fixed chain of stages:

    kses -> autolink -> balance-tags -> texturize -> smilies -> convert-chars -> strip-slashes

Escaping runs before auto-linking so injected anchors are not re-escaped,
typography runs after tag balancing so it never sees malformed fragments,
and slash-stripping runs last because it reverses storage artifacts.

A stage that fails is logged and skipped: its input is passed on unchanged,
so one broken description never blocks the rest of the page.
"""

from collections.abc import Iterable, Sequence

from docref_core.entities.models import Argument
from docref_core.logging import get_pipeline_logger

from .stages import (
    AutolinkStage,
    BalanceTagsStage,
    ConvertCharsStage,
    KsesStage,
    SmiliesStage,
    Stage,
    StripSlashesStage,
    TexturizeStage,
)

__all__ = [
    "DEFAULT_STAGES",
    "SanitizationPipeline",
    "default_pipeline",
    "sanitize",
    "sanitize_arguments",
]

logger = get_pipeline_logger(__name__)

DEFAULT_STAGES: tuple[Stage, ...] = (
    KsesStage(),
    AutolinkStage(),
    BalanceTagsStage(),
    TexturizeStage(),
    SmiliesStage(),
    ConvertCharsStage(),
    StripSlashesStage(),
)


class SanitizationPipeline:
    """Ordered, immutable chain of sanitization stages.

    Custom stages are appended after the built-ins with ``extended``, which
    returns a new pipeline and leaves the original untouched.

    Example:
        >>> pipeline = SanitizationPipeline()
        >>> pipeline("<script>alert(1)</script>Returns the post")
        'Returns the post'
        >>> no_links = pipeline.extended(KsesStage(allowed_tags={}))
        >>> no_links.stage_names[-1]
        'kses'
    """

    def __init__(self, stages: Sequence[Stage] = DEFAULT_STAGES) -> None:
        for stage in stages:
            if not isinstance(stage, Stage):
                raise TypeError(f"Sanitization stages need a name and must be callable, got {type(stage).__name__}")
        self._stages: tuple[Stage, ...] = tuple(stages)

    @property
    def stages(self) -> tuple[Stage, ...]:
        return self._stages

    @property
    def stage_names(self) -> list[str]:
        return [stage.name for stage in self._stages]

    def extended(self, *stages: Stage) -> "SanitizationPipeline":
        """Return a pipeline running these stages after the current ones."""
        return SanitizationPipeline((*self._stages, *stages))

    def __call__(self, text: str | None) -> str:
        if not text:
            return ""
        for stage in self._stages:
            try:
                result = stage(text)
                if not isinstance(result, str):
                    raise TypeError(f"stage returned {type(result).__name__}, expected str")
                text = result
            except Exception as e:
                logger.warning(f"Sanitization stage '{stage.name}' failed, keeping its input: {e}")
        return text

    def sanitize_argument(self, argument: Argument) -> Argument:
        """Sanitize every text field of one argument."""
        return argument.model_copy(
            update={
                "type": self(argument.type),
                "name": self(argument.name),
                "desc": self(argument.desc),
            }
        )

    def sanitize_arguments(self, arguments: Iterable[Argument]) -> list[Argument]:
        """Sanitize a list of arguments. Order and length are preserved."""
        return [self.sanitize_argument(argument) for argument in arguments]

    def __repr__(self) -> str:
        return f"SanitizationPipeline({', '.join(self.stage_names)})"


default_pipeline = SanitizationPipeline()


def sanitize(text: str | None) -> str:
    """Run text through the default pipeline."""
    return default_pipeline(text)


def sanitize_arguments(arguments: Iterable[Argument]) -> list[Argument]:
    """Run every argument field through the default pipeline."""
    return default_pipeline.sanitize_arguments(arguments)
