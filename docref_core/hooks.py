"""Filter hooks for late-stage customization of rendered output.

Each extension point is a named, ordered chain of transform functions with a
fixed value type. Handlers are registered at startup and applied in
registration order at the documented point:

- ``args-postprocess``: list of sanitized Arguments, before rendering
- ``type-string-postprocess``: humanized type string
- ``before-fragment-postprocess``: assembled fragment preceding the body
- ``after-fragment-postprocess``: assembled fragment following the body

Hook modules can be listed in pyproject.toml for predictable loading:

    [tool.docref]
    hooks = ["my_site.docref_hooks"]

Each listed module must expose ``register(hooks: HookRegistry) -> None``.
"""

import importlib
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar

from docref_core.entities.models import Argument

__all__ = [
    "FilterChain",
    "HookPoint",
    "HookRegistry",
    "load_hooks",
]

T = TypeVar("T")


class HookPoint(StrEnum):
    """Names of the extension points."""

    ARGS_POSTPROCESS = "args-postprocess"
    TYPE_STRING_POSTPROCESS = "type-string-postprocess"
    BEFORE_FRAGMENT_POSTPROCESS = "before-fragment-postprocess"
    AFTER_FRAGMENT_POSTPROCESS = "after-fragment-postprocess"


class FilterChain(Generic[T]):
    """Ordered list of ``T -> T`` transforms for one extension point."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: list[Callable[[T], T]] = []
        self._lock = threading.Lock()

    def register(self, handler: Callable[[T], T]) -> Callable[[T], T]:
        """Append a handler. Returns it unchanged so it can be used as a decorator."""
        with self._lock:
            self._handlers.append(handler)
        return handler

    def unregister(self, handler: Callable[[T], T]) -> None:
        """Remove a previously registered handler. Raises ValueError if absent."""
        with self._lock:
            self._handlers.remove(handler)

    @property
    def handlers(self) -> tuple[Callable[[T], T], ...]:
        return tuple(self._handlers)

    def __call__(self, value: T) -> T:
        for handler in self.handlers:
            value = handler(value)
        return value

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"FilterChain({self.name!r}, handlers={len(self._handlers)})"


@dataclass
class HookRegistry:
    """The four filter chains consulted by the renderer."""

    args_postprocess: FilterChain[list[Argument]] = field(default_factory=lambda: FilterChain(HookPoint.ARGS_POSTPROCESS))
    type_string_postprocess: FilterChain[str] = field(default_factory=lambda: FilterChain(HookPoint.TYPE_STRING_POSTPROCESS))
    before_fragment_postprocess: FilterChain[str] = field(default_factory=lambda: FilterChain(HookPoint.BEFORE_FRAGMENT_POSTPROCESS))
    after_fragment_postprocess: FilterChain[str] = field(default_factory=lambda: FilterChain(HookPoint.AFTER_FRAGMENT_POSTPROCESS))

    def chain(self, point: HookPoint | str) -> FilterChain[Any]:
        """Look up a chain by its hook point name.

        Raises:
            KeyError: If the name is not a known hook point.
        """
        try:
            hook_point = HookPoint(point)
        except ValueError:
            raise KeyError(f"Unknown hook point: {point!r}") from None
        return getattr(self, hook_point.name.lower())

    def add(self, point: HookPoint | str, handler: Callable[[Any], Any]) -> Callable[[Any], Any]:
        """Register ``handler`` on the named chain."""
        return self.chain(point).register(handler)


def load_hooks(pyproject: dict[str, Any], hooks: HookRegistry) -> list[str]:
    """Load hook modules configured under ``[tool.docref] hooks``.

    Args:
        pyproject: Parsed pyproject.toml contents
        hooks: Registry the modules register their handlers on

    Returns:
        Module paths that were loaded, in configuration order

    Raises:
        RuntimeError: If a module cannot be imported or has no register() function
    """
    module_paths = pyproject.get("tool", {}).get("docref", {}).get("hooks", [])
    loaded: list[str] = []

    for module_path in module_paths:
        try:
            module = importlib.import_module(module_path)
            register = getattr(module, "register", None)
            if not callable(register):
                raise AttributeError(f"Hook module {module_path} must have register() function")
            register(hooks)
        except Exception as e:
            raise RuntimeError(f"Failed to load docref hook '{module_path}': {e}") from e
        loaded.append(module_path)

    return loaded
