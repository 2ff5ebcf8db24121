"""Tests for the action and filter hooks."""

import pytest

from blockcms.lib.hooks import HookRegistry, action, filter, hooks


@pytest.fixture
def registry():
    return HookRegistry()


class TestHookRegistry:
    async def test_actions_run_in_priority_order(self, registry):
        calls = []
        registry.add_action("save", lambda: calls.append("late"), priority=20)
        registry.add_action("save", lambda: calls.append("early"), priority=5)

        await registry.do_action("save")

        assert calls == ["early", "late"]

    async def test_filters_thread_the_value(self, registry):
        registry.add_filter("title", lambda v: v + "b", priority=20)
        registry.add_filter("title", lambda v: v + "a")

        assert await registry.apply_filters("title", "") == "ab"

    async def test_async_callbacks_are_awaited(self, registry):
        async def double(value, factor):
            return value * factor

        registry.add_filter("n", double)

        assert await registry.apply_filters("n", 3, 2) == 6

    async def test_kwargs_reach_actions(self, registry):
        seen = {}

        async def on_save(page, is_new):
            seen.update(page=page, is_new=is_new)

        registry.add_action("save", on_save)
        await registry.do_action("save", "home", is_new=True)

        assert seen == {"page": "home", "is_new": True}

    async def test_no_filters_returns_value(self, registry):
        assert await registry.apply_filters("missing", {"a": 1}) == {"a": 1}

    async def test_action_errors_propagate(self, registry):
        def broken():
            raise RuntimeError("nope")

        registry.add_action("save", broken)

        with pytest.raises(RuntimeError):
            await registry.do_action("save")

    def test_remove(self, registry):
        def handler():
            pass

        registry.add_action("a", handler)
        registry.add_filter("f", handler)

        assert registry.remove_action("a", handler) is True
        assert registry.remove_filter("f", handler) is True
        assert registry.remove_action("a", handler) is False
        assert not registry.has_action("a")
        assert not registry.has_filter("f")

    def test_clear(self, registry):
        registry.add_action("a", print)
        registry.add_filter("f", print)

        registry.clear()

        assert not registry.has_action("a")
        assert not registry.has_filter("f")


class TestDecorators:
    def test_action_decorator_registers_globally(self, clean_hooks):
        @action("custom_action", priority=1)
        def handler():
            pass

        assert hooks.has_action("custom_action")
        assert handler.__name__ == "handler"

    async def test_filter_decorator_registers_globally(self, clean_hooks):
        @filter("custom_filter")
        def upper(value):
            return value.upper()

        assert await hooks.apply_filters("custom_filter", "x") == "X"
