"""The ``@ext_mapping`` marker.

Marks a handler for duplication under the ext prefix. Marking is pure
metadata: nothing is registered at decoration time. The app reads the
marker once, when it builds the route table, and records it on
``Route.ext``.

Usage::

    from extroute import App, ext_mapping

    app = App()

    @app.route("/users/{id:int}")
    @ext_mapping
    def get_user(id: int):
        ...

    # served at /users/42 and /ext/users/42

Decorator order does not matter; wrappers between the two must use
``functools.wraps``.
"""

from collections.abc import Callable
from typing import Any, TypeVar, overload

EXT_MAPPING_ATTR = "__ext_mapping__"

_F = TypeVar("_F", bound=Callable[..., Any])


@overload
def ext_mapping(handler: _F, /) -> _F: ...


@overload
def ext_mapping() -> Callable[[_F], _F]: ...


def ext_mapping(handler: _F | None = None, /) -> _F | Callable[[_F], _F]:
    """Mark *handler* for an extra route under the ext prefix.

    Works bare (``@ext_mapping``) or called (``@ext_mapping()``).
    Returns the handler itself with the marker attribute set.
    """

    def decorator(func: _F) -> _F:
        setattr(func, EXT_MAPPING_ATTR, True)
        return func

    if handler is None:
        return decorator
    return decorator(handler)


def _marked(obj: object) -> bool:
    """Follow ``__wrapped__`` chains looking for the marker."""
    seen: set[int] = set()
    while obj is not None and id(obj) not in seen:
        seen.add(id(obj))
        if getattr(obj, EXT_MAPPING_ATTR, False) is True:
            return True
        obj = getattr(obj, "__wrapped__", None)
    return False


def is_ext_mapped(handler: Callable[..., Any]) -> bool:
    """True if *handler* carries the ext marker.

    Checks the handler itself, any ``functools.wraps`` chain below it,
    and for bound methods the underlying function plus the same-named
    attribute on every class in the owner's MRO, so an override of a
    marked base-class method is marked too.
    """
    if _marked(handler):
        return True

    func = getattr(handler, "__func__", None)
    owner = getattr(handler, "__self__", None)
    if func is None or owner is None:
        return False
    if _marked(func):
        return True

    cls = owner if isinstance(owner, type) else type(owner)
    name = func.__name__
    for base in cls.__mro__:
        attr = base.__dict__.get(name)
        if attr is None:
            continue
        # classmethod/staticmethod objects wrap the function in __func__
        if _marked(attr) or _marked(getattr(attr, "__func__", None)):
            return True
    return False
