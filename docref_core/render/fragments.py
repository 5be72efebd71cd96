"""Small HTML helpers used while assembling rendered fragments."""

import re
from urllib.parse import quote

from docref_core.entities.models import SourceReference

__all__ = ["autop", "source_url"]

_BLANK_LINES = re.compile(r"\n\s*\n")
_STARTS_WITH_BLOCK = re.compile(r"^<(?:p|div|ul|ol|dl|pre|blockquote|table|h[1-6]|hr)\b", re.IGNORECASE)


def autop(text: str) -> str:
    """Wrap blank-line separated blocks of text in paragraphs.

    Blocks that already start with a block-level element are left as they
    are. Single newlines are kept, not turned into line breaks. Empty or
    whitespace-only text gives an empty string.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if not text.strip():
        return ""
    blocks = [block.strip() for block in _BLANK_LINES.split(text) if block.strip()]
    return "\n".join(block if _STARTS_WITH_BLOCK.match(block) else f"<p>{block}</p>" for block in blocks)


def source_url(source: SourceReference, *, base_url: str = "", files_slug: str = "files") -> str:
    """URL of the code behind an entity.

    With a code browser base URL the link points at the exact line,
    otherwise at the file's archive page.
    """
    path = quote(source.path, safe="/")
    if base_url:
        anchor = f"#L{source.line}" if source.line else ""
        return f"{base_url.rstrip('/')}/{path}{anchor}"
    return f"/{files_slug.strip('/')}/{path}/"
