"""Built-in sanitization stages.

Every stage is a pure ``text -> text`` transform with a ``name``. Stages that
work on text content (autolink, texturize, smilies) split the input into tag
and text segments and only rewrite the text segments, so markup produced by
earlier stages is never re-processed.

Each stage maps its own output to itself, and the later stages only produce
forms the earlier ones leave alone (numeric entities, balanced tags, anchors),
which keeps the whole chain idempotent.
"""

import re
import warnings
from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field
from typing import ClassVar, Protocol, runtime_checkable

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning, Tag
from bs4.element import PreformattedString

__all__ = [
    "ALLOWED_TAGS",
    "AutolinkStage",
    "BalanceTagsStage",
    "ConvertCharsStage",
    "KsesStage",
    "SmiliesStage",
    "Stage",
    "StripSlashesStage",
    "TexturizeStage",
]


@runtime_checkable
class Stage(Protocol):
    """A named text transform."""

    name: str

    def __call__(self, text: str) -> str: ...


# Tag -> allowed attributes
ALLOWED_TAGS: Mapping[str, frozenset[str]] = {
    "a": frozenset({"href", "title", "rel"}),
    "abbr": frozenset({"title"}),
    "acronym": frozenset({"title"}),
    "b": frozenset(),
    "blockquote": frozenset({"cite"}),
    "br": frozenset(),
    "cite": frozenset(),
    "code": frozenset(),
    "dd": frozenset(),
    "del": frozenset({"datetime"}),
    "dl": frozenset(),
    "dt": frozenset(),
    "em": frozenset(),
    "i": frozenset(),
    "kbd": frozenset(),
    "li": frozenset(),
    "ol": frozenset(),
    "p": frozenset(),
    "pre": frozenset(),
    "q": frozenset({"cite"}),
    "s": frozenset(),
    "samp": frozenset(),
    "span": frozenset({"class"}),
    "strike": frozenset(),
    "strong": frozenset(),
    "sub": frozenset(),
    "sup": frozenset(),
    "tt": frozenset(),
    "ul": frozenset(),
    "var": frozenset(),
}

# Removed together with everything inside them
DROPPED_TAGS = frozenset({"script", "style", "iframe", "object", "embed", "noscript", "template", "textarea", "select", "head", "title"})

URL_ATTRIBUTES = frozenset({"href", "cite"})
ALLOWED_PROTOCOLS = frozenset({"http", "https", "ftp", "mailto"})

VOID_TAGS = frozenset({"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "param", "source", "track", "wbr"})

# Text inside these is shown verbatim
VERBATIM_TAGS = frozenset({"code", "pre", "kbd", "tt", "samp", "script", "style"})

_SCHEME = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")
_CONTROL_AND_SPACE = re.compile(r"[\x00-\x20]+")
_SEGMENTS = re.compile(r"(<[^>]*>)")
_TAG_NAME = re.compile(r"^<\s*(/?)\s*([a-zA-Z][a-zA-Z0-9]*)[^>]*?(/?)\s*>$")


def _is_safe_url(value: str) -> bool:
    compact = _CONTROL_AND_SPACE.sub("", value)
    match = _SCHEME.match(compact)
    return match is None or match.group(1).lower() in ALLOWED_PROTOCOLS


def transform_text_segments(text: str, transform: Callable[[str], str], skip_tags: Collection[str] = VERBATIM_TAGS) -> str:
    """Apply ``transform`` to the text between tags, leaving tags and skipped elements untouched."""
    parts = _SEGMENTS.split(text)
    open_skipped: list[str] = []
    for i, part in enumerate(parts):
        if i % 2 == 1:
            match = _TAG_NAME.match(part)
            if match is None:
                continue
            closing, name, self_closing = match.group(1), match.group(2).lower(), match.group(3)
            if name not in skip_tags or name in VOID_TAGS or self_closing:
                continue
            if not closing:
                open_skipped.append(name)
            elif name in open_skipped:
                del open_skipped[len(open_skipped) - 1 - open_skipped[::-1].index(name)]
        elif part and not open_skipped:
            parts[i] = transform(part)
    return "".join(parts)


@dataclass(frozen=True)
class KsesStage:
    """Allow-list HTML filter.

    Tags off the allow-list are unwrapped (their text survives), dangerous
    containers are dropped with their content, comments and declarations are
    removed, and attributes are limited per tag. URL attributes with a scheme
    outside ALLOWED_PROTOCOLS are removed.
    """

    name: ClassVar[str] = "kses"

    allowed_tags: Mapping[str, Collection[str]] = field(default_factory=lambda: ALLOWED_TAGS)

    def __call__(self, text: str) -> str:
        if not any(c in text for c in "<>&"):
            return text
        with warnings.catch_warnings():
            # Short descriptions are often a bare URL or file name
            warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)
            soup = BeautifulSoup(text, "html.parser")
        for node in soup.find_all(string=lambda s: isinstance(s, PreformattedString)):
            node.extract()
        self._clean(soup)
        return str(soup)

    def _clean(self, parent: Tag) -> None:
        for child in list(parent.children):
            if not isinstance(child, Tag):
                continue
            name = child.name.lower()
            if name in DROPPED_TAGS:
                child.decompose()
                continue
            self._clean(child)
            if name not in self.allowed_tags:
                child.unwrap()
                continue
            allowed = self.allowed_tags[name]
            for attr in list(child.attrs):
                value = child.attrs[attr]
                if isinstance(value, list):
                    value = " ".join(value)
                if attr not in allowed or (attr in URL_ATTRIBUTES and not _is_safe_url(value)):
                    del child.attrs[attr]


# Quotes around a URL may come back curled or as CP1252 bytes on a second
# pass, so every quote form is a valid left boundary and none is part of a URL.
_URL = re.compile(
    r"(?<![^\s(\[{\"'\u2018\u2019\u201c\u201d\x91-\x94])"
    r"(?:(?:https?|ftp)://|www\.(?!(?:https?|ftp)://))"
    r"[a-z0-9]"
    r"(?:(?!&lt;|&gt;|&quot;)[^\s<>\"'\\\u2018\u2019\u201c\u201d\x91-\x94])*",
    re.IGNORECASE,
)
_SCHEME_PREFIX = re.compile(r"(?:https?|ftp)://", re.IGNORECASE)
_URL_TRAILING = ".,;:!?"


def _split_trailing(url: str) -> tuple[str, str]:
    trailing = ""
    while url:
        last = url[-1]
        if last == ";" and url.endswith("&amp;"):
            break
        if last in _URL_TRAILING or (last == ")" and url.count("(") < url.count(")")):
            trailing = last + trailing
            url = url[:-1]
        else:
            break
    return url, trailing


@dataclass(frozen=True)
class AutolinkStage:
    """Wrap bare URLs in anchors. Text already inside links or code is skipped."""

    name: ClassVar[str] = "autolink"

    rel: str = "nofollow"

    def __call__(self, text: str) -> str:
        if "://" not in text and "www." not in text.lower():
            return text
        return transform_text_segments(text, self._link, skip_tags=VERBATIM_TAGS | {"a"})

    def _link(self, segment: str) -> str:
        def replace(match: re.Match[str]) -> str:
            url, trailing = _split_trailing(match.group(0))
            href = url if _SCHEME_PREFIX.match(url) else f"http://{url}"
            return f'<a href="{href}" rel="{self.rel}">{url}</a>{trailing}'

        return _URL.sub(replace, segment)


_BALANCE_TAG = re.compile(r"<(/?)([a-zA-Z][a-zA-Z0-9]*)((?:[^>\"']|\"[^\"]*\"|'[^']*')*?)(/?)>")


@dataclass(frozen=True)
class BalanceTagsStage:
    """Close unclosed tags and drop closing tags that match nothing open.

    A closing tag for an element deeper in the stack closes the elements
    opened after it first.
    """

    name: ClassVar[str] = "balance-tags"

    def __call__(self, text: str) -> str:
        if "<" not in text:
            return text
        out: list[str] = []
        stack: list[str] = []
        pos = 0
        for match in _BALANCE_TAG.finditer(text):
            out.append(text[pos : match.start()])
            pos = match.end()
            closing, name, _, self_closing = match.groups()
            name = name.lower()
            if closing:
                if name in VOID_TAGS or name not in stack:
                    continue
                while stack:
                    top = stack.pop()
                    out.append(f"</{top}>")
                    if top == name:
                        break
            elif self_closing or name in VOID_TAGS:
                out.append(match.group(0))
            else:
                stack.append(name)
                out.append(match.group(0))
        out.append(text[pos:])
        out.extend(f"</{name}>" for name in reversed(stack))
        return "".join(out)


_OPENING_CONTEXT = r"(?<![^\s(\[{\-])"

# Applied in order; every rule rewrites all of its matches in one pass
_TEXTURIZE_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"---"), "&#8212;"),
    (re.compile(r"(?<=\s)--(?=\s)"), "&#8212;"),
    (re.compile(r"--"), "&#8211;"),
    (re.compile(r"(?<=\s)-(?=\s)"), "&#8211;"),
    (re.compile(r"\.\.\."), "&#8230;"),
    (re.compile(r"(?<!\S)\(c\)", re.IGNORECASE), "&#169;"),
    (re.compile(r"(?<!\S)\(r\)", re.IGNORECASE), "&#174;"),
    (re.compile(r"\(tm\)", re.IGNORECASE), "&#8482;"),
    (re.compile(r"(?<!\b0)(?<=\d)x(?=\d)"), "&#215;"),
    (re.compile(_OPENING_CONTEXT + '"'), "&#8220;"),
    (re.compile('"'), "&#8221;"),
    (re.compile(_OPENING_CONTEXT + "'"), "&#8216;"),
    (re.compile("'"), "&#8217;"),
)


@dataclass(frozen=True)
class TexturizeStage:
    """Typographic substitutions: curly quotes, dashes, ellipses, symbols."""

    name: ClassVar[str] = "texturize"

    def __call__(self, text: str) -> str:
        return transform_text_segments(text, self._texturize)

    @staticmethod
    def _texturize(segment: str) -> str:
        for pattern, replacement in _TEXTURIZE_RULES:
            segment = pattern.sub(replacement, segment)
        return segment


SMILIES: Mapping[str, str] = {
    ":-)": "\U0001f642",
    ":)": "\U0001f642",
    ":-(": "\U0001f641",
    ":(": "\U0001f641",
    ";-)": "\U0001f609",
    ";)": "\U0001f609",
    ":-D": "\U0001f600",
    ":D": "\U0001f600",
    ":-P": "\U0001f61b",
    ":P": "\U0001f61b",
    ":-o": "\U0001f62e",
    ":o": "\U0001f62e",
    "8-)": "\U0001f60e",
    ":-|": "\U0001f610",
    ":|": "\U0001f610",
    ":lol:": "\U0001f606",
    ":?:": "\u2753",
    ":!:": "\u2757",
}


@dataclass(frozen=True)
class SmiliesStage:
    """Convert whitespace-delimited emoticons to emoji glyphs."""

    name: ClassVar[str] = "smilies"

    smilies: Mapping[str, str] = field(default_factory=lambda: SMILIES)

    def __post_init__(self) -> None:
        alternatives = "|".join(re.escape(s) for s in sorted(self.smilies, key=len, reverse=True))
        object.__setattr__(self, "_pattern", re.compile(rf"(?<!\S)(?:{alternatives})(?!\S)"))

    def __call__(self, text: str) -> str:
        return transform_text_segments(text, lambda segment: self._pattern.sub(lambda m: self.smilies[m.group(0)], segment))


# Windows-1252 bytes that leak into text as C1 control characters
_CP1252_ENTITIES: Mapping[str, str] = {
    "\x80": "&#8364;",
    "\x82": "&#8218;",
    "\x83": "&#402;",
    "\x84": "&#8222;",
    "\x85": "&#8230;",
    "\x86": "&#8224;",
    "\x87": "&#8225;",
    "\x88": "&#710;",
    "\x89": "&#8240;",
    "\x8a": "&#352;",
    "\x8b": "&#8249;",
    "\x8c": "&#338;",
    "\x8e": "&#381;",
    "\x91": "&#8216;",
    "\x92": "&#8217;",
    "\x93": "&#8220;",
    "\x94": "&#8221;",
    "\x95": "&#8226;",
    "\x96": "&#8211;",
    "\x97": "&#8212;",
    "\x98": "&#732;",
    "\x99": "&#8482;",
    "\x9a": "&#353;",
    "\x9b": "&#8250;",
    "\x9c": "&#339;",
    "\x9e": "&#382;",
    "\x9f": "&#376;",
}

_LONE_AMPERSAND = re.compile(r"&(?!#\d+;|#[xX][0-9a-fA-F]+;|[a-zA-Z][a-zA-Z0-9]*;)")


@dataclass(frozen=True)
class ConvertCharsStage:
    """Encode special characters as numeric entities so output is plain ASCII."""

    name: ClassVar[str] = "convert-chars"

    def __call__(self, text: str) -> str:
        text = _LONE_AMPERSAND.sub("&amp;", text)
        if text.isascii():
            return text
        return "".join(_CP1252_ENTITIES.get(c) or (f"&#{ord(c)};" if ord(c) > 127 else c) for c in text)


# Quotes may already be curled into numeric entities by texturize
_ESCAPED_QUOTE = re.compile(r"\\+(?=['\"]|&#(?:34|39|8216|8217|8220|8221);)")
_BACKSLASH_RUN = re.compile(r"\\{2,}")


@dataclass(frozen=True)
class StripSlashesStage:
    """Undo storage-layer slash escaping, however many levels deep."""

    name: ClassVar[str] = "strip-slashes"

    def __call__(self, text: str) -> str:
        if "\\" not in text:
            return text
        text = _ESCAPED_QUOTE.sub("", text)
        return _BACKSLASH_RUN.sub(r"\\", text)
