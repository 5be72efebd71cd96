"""Tests for filter hooks and hook module loading."""

import sys
import types

import pytest

from docref_core.entities import Argument
from docref_core.hooks import FilterChain, HookPoint, HookRegistry, load_hooks


class TestFilterChain:
    def test_empty_chain_is_identity(self):
        chain: FilterChain[str] = FilterChain("test")
        assert chain("value") == "value"
        assert len(chain) == 0

    def test_handlers_run_in_registration_order(self):
        chain: FilterChain[str] = FilterChain("test")
        chain.register(lambda v: v + "a")
        chain.register(lambda v: v + "b")
        assert chain("") == "ab"

    def test_register_as_decorator(self):
        chain: FilterChain[str] = FilterChain("test")

        @chain.register
        def shout(value: str) -> str:
            return value.upper()

        assert chain.handlers == (shout,)
        assert shout("x") == "X"

    def test_unregister(self):
        chain: FilterChain[str] = FilterChain("test")
        handler = chain.register(str.upper)
        chain.unregister(handler)
        assert chain("x") == "x"
        with pytest.raises(ValueError):
            chain.unregister(handler)


class TestHookRegistry:
    def test_chain_lookup(self, hooks: HookRegistry):
        assert hooks.chain("args-postprocess") is hooks.args_postprocess
        assert hooks.chain(HookPoint.AFTER_FRAGMENT_POSTPROCESS) is hooks.after_fragment_postprocess

    def test_unknown_point(self, hooks: HookRegistry):
        with pytest.raises(KeyError, match="content-postprocess"):
            hooks.chain("content-postprocess")

    def test_add(self, hooks: HookRegistry):
        hooks.add("type-string-postprocess", lambda v: f"<em>{v}</em>")
        assert hooks.type_string_postprocess("int") == "<em>int</em>"

    def test_registries_are_independent(self):
        first, second = HookRegistry(), HookRegistry()
        first.add(HookPoint.BEFORE_FRAGMENT_POSTPROCESS, str.upper)
        assert len(second.before_fragment_postprocess) == 0

    def test_args_chain_can_reorder(self, hooks: HookRegistry, three_arguments: list[Argument]):
        hooks.args_postprocess.register(lambda args: list(reversed(args)))
        assert [a.name for a in hooks.args_postprocess(three_arguments)] == ["$c", "$b", "$a"]


@pytest.fixture
def hook_module(monkeypatch: pytest.MonkeyPatch) -> str:
    module = types.ModuleType("docref_test_hooks")

    def register(hooks: HookRegistry) -> None:
        hooks.add(HookPoint.AFTER_FRAGMENT_POSTPROCESS, lambda v: v + "<!-- footer -->")

    module.register = register  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "docref_test_hooks", module)
    return "docref_test_hooks"


class TestLoadHooks:
    def test_no_configuration(self, hooks: HookRegistry):
        assert load_hooks({}, hooks) == []

    def test_loads_configured_module(self, hooks: HookRegistry, hook_module: str):
        loaded = load_hooks({"tool": {"docref": {"hooks": [hook_module]}}}, hooks)

        assert loaded == [hook_module]
        assert hooks.after_fragment_postprocess("</div>") == "</div><!-- footer -->"

    def test_missing_module(self, hooks: HookRegistry):
        with pytest.raises(RuntimeError, match="docref_missing_hooks"):
            load_hooks({"tool": {"docref": {"hooks": ["docref_missing_hooks"]}}}, hooks)

    def test_module_without_register(self, hooks: HookRegistry, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setitem(sys.modules, "docref_empty_hooks", types.ModuleType("docref_empty_hooks"))
        with pytest.raises(RuntimeError, match="register"):
            load_hooks({"tool": {"docref": {"hooks": ["docref_empty_hooks"]}}}, hooks)
