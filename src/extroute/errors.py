"""extroute exception hierarchy.

Shared across Router, augmenter, App, and request dispatch so every
module raises and catches the same types.
"""

from dataclasses import dataclass
from typing import Any


class ExtRouteError(Exception):
    """Base for all extroute-specific errors."""


class ConfigurationError(ExtRouteError):
    """Raised when app configuration or a route pattern is invalid.

    Typically surfaces during ``App._freeze()`` at startup.
    """


class RouteConflict(ExtRouteError):  # noqa: N818: mirrors "ambiguous mapping" in other frameworks
    """A route maps a path and method that another route already owns.

    Raised by ``Router.add()`` before any part of the new route is
    registered, so the route table is left untouched.
    """

    def __init__(self, path: str, method: str, existing: Any) -> None:
        self.path = path
        self.method = method
        self.existing = existing
        owner = getattr(existing, "handler_name", repr(existing))
        verb = "any method" if method == "*" else method
        super().__init__(f"{verb} {path!r} is already mapped to {owner}")


class ConverterConflict(ConfigurationError):
    """Two paths put different converters at the same parameter position.

    The trie keeps one converter per position, so ``/items/{id:int}`` and
    ``/items/{slug}`` cannot both be registered.
    """

    def __init__(self, path: str, segment: str, converter: str, existing: str) -> None:
        self.path = path
        self.converter = converter
        self.existing = existing
        super().__init__(
            f"Route {path!r}: parameter {segment} uses converter "
            f"{converter!r} where another path uses {existing!r}."
        )


@dataclass(frozen=True, slots=True)
class HTTPError(ExtRouteError):
    """An error that maps directly to an HTTP status code.

    Raised by the router or handlers. The ASGI dispatcher catches these
    and turns them into a plain-text response with the same status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818: conventional name in web frameworks
    """404: no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818: conventional name in web frameworks
    """405: route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
