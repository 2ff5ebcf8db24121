"""Async action/filter hooks around page persistence and block rendering.

Actions run callbacks for their side effects; filters thread a value through
every callback and return the result.

    from blockcms.lib.hooks import action, filter, AFTER_PAGE_SAVE, BLOCK_RENDER_CONTEXT

    @action(AFTER_PAGE_SAVE)
    async def purge_cdn(page, is_new):
        ...

    @filter(BLOCK_RENDER_CONTEXT)
    def add_tracking(context, block):
        context["tracking_id"] = block.id
        return context

Callbacks may be plain functions or coroutines. Lower priorities run first.
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

T = TypeVar("T")

# Actions
BEFORE_PAGE_SAVE = "before_page_save"
AFTER_PAGE_SAVE = "after_page_save"
BEFORE_PAGE_DELETE = "before_page_delete"
AFTER_PAGE_DELETE = "after_page_delete"
PAGE_STATUS_CHANGED = "page_status_changed"

# Filters
BLOCK_RENDER_CONTEXT = "block_render_context"
PAGE_SEO_META = "page_seo_meta"
PAGE_OG_META = "page_og_meta"


@dataclass(order=True)
class HookHandler:
    """A registered callback and its priority."""

    priority: int
    callback: Callable = field(compare=False)

    async def call(self, *args: Any, **kwargs: Any) -> Any:
        result = self.callback(*args, **kwargs)
        if asyncio.iscoroutine(result):
            return await result
        return result


class HookRegistry:
    """Holds the action and filter handlers, sorted by priority."""

    def __init__(self) -> None:
        self._actions: dict[str, list[HookHandler]] = defaultdict(list)
        self._filters: dict[str, list[HookHandler]] = defaultdict(list)

    @staticmethod
    def _register(table: dict[str, list[HookHandler]], name: str, callback: Callable, priority: int) -> None:
        table[name].append(HookHandler(priority=priority, callback=callback))
        table[name].sort()

    @staticmethod
    def _unregister(table: dict[str, list[HookHandler]], name: str, callback: Callable) -> bool:
        handlers = table.get(name, [])
        for i, handler in enumerate(handlers):
            if handler.callback is callback:
                del handlers[i]
                return True
        return False

    def add_action(self, hook_name: str, callback: Callable[..., Any], priority: int = 10) -> None:
        self._register(self._actions, hook_name, callback, priority)

    def add_filter(self, hook_name: str, callback: Callable[..., Any], priority: int = 10) -> None:
        self._register(self._filters, hook_name, callback, priority)

    def remove_action(self, hook_name: str, callback: Callable[..., Any]) -> bool:
        return self._unregister(self._actions, hook_name, callback)

    def remove_filter(self, hook_name: str, callback: Callable[..., Any]) -> bool:
        return self._unregister(self._filters, hook_name, callback)

    def has_action(self, hook_name: str) -> bool:
        return bool(self._actions.get(hook_name))

    def has_filter(self, hook_name: str) -> bool:
        return bool(self._filters.get(hook_name))

    async def do_action(self, hook_name: str, *args: Any, **kwargs: Any) -> None:
        """Run every action callback registered under ``hook_name``."""
        from blockcms.lib.observability import span

        with span(f"hook.action:{hook_name}", hook_name=hook_name):
            for handler in list(self._actions.get(hook_name, [])):
                await handler.call(*args, **kwargs)

    async def apply_filters(self, hook_name: str, value: T, *args: Any, **kwargs: Any) -> T:
        """Pass ``value`` through every filter callback and return the result."""
        from blockcms.lib.observability import span

        with span(f"hook.filter:{hook_name}", hook_name=hook_name):
            for handler in list(self._filters.get(hook_name, [])):
                value = await handler.call(value, *args, **kwargs)
            return value

    def clear(self) -> None:
        self._actions.clear()
        self._filters.clear()


hooks = HookRegistry()


async def do_action(hook_name: str, *args: Any, **kwargs: Any) -> None:
    await hooks.do_action(hook_name, *args, **kwargs)


async def apply_filters(hook_name: str, value: T, *args: Any, **kwargs: Any) -> T:
    return await hooks.apply_filters(hook_name, value, *args, **kwargs)


def action(hook_name: str, priority: int = 10) -> Callable[[Callable], Callable]:
    """Register the decorated function as an action handler."""

    def decorator(func: Callable) -> Callable:
        hooks.add_action(hook_name, func, priority)
        return func

    return decorator


def filter(hook_name: str, priority: int = 10) -> Callable[[Callable], Callable]:
    """Register the decorated function as a filter handler."""

    def decorator(func: Callable) -> Callable:
        hooks.add_filter(hook_name, func, priority)
        return func

    return decorator
