"""Content expansion renderer for reference pages."""

from .fragments import autop, source_url
from .renderer import ContentRenderer, PrototypeBuilder, SourceLinker

__all__ = [
    "ContentRenderer",
    "PrototypeBuilder",
    "SourceLinker",
    "autop",
    "source_url",
]
