"""Invoke helpers: call sync or async callables uniformly.

Route handlers and lifecycle hooks can be ``def`` or ``async def``.
This module keeps the sync/async check in exactly one place.

Usage::

    from extroute._internal.invoke import invoke

    result = await invoke(handler, *args, **kwargs)
"""

import inspect
from collections.abc import Callable, Iterable
from typing import Any


async def invoke(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


async def run_hooks(hooks: Iterable[Callable[..., Any]]) -> None:
    """Run zero-argument lifecycle hooks in registration order."""
    for hook in hooks:
        await invoke(hook)
