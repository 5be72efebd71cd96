"""Readable rendering of union type strings."""

from docref_core.hooks import HookRegistry
from docref_core.settings import Settings, settings as default_settings

__all__ = ["TYPE_OR_CLASS", "TypeHumanizer", "humanize"]

TYPE_OR_CLASS = "type-or"


def humanize(type_string: str, connective: str = " or ") -> str:
    """Replace ``|`` separators with a marked-up connective.

    Presentation only: the alternatives are not validated or normalized.

    Example:
        >>> humanize("int|string")
        'int<span class="type-or"> or </span>string'
    """
    if "|" not in type_string:
        return type_string
    return f'<span class="{TYPE_OR_CLASS}">{connective}</span>'.join(type_string.split("|"))


class TypeHumanizer:
    """Humanize with the configured connective, then apply the ``type-string-postprocess`` hook."""

    def __init__(self, hooks: HookRegistry | None = None, settings: Settings | None = None) -> None:
        self.hooks = hooks or HookRegistry()
        self.settings = settings or default_settings

    def __call__(self, type_string: str) -> str:
        return self.hooks.type_string_postprocess(humanize(type_string, self.settings.type_connective))
