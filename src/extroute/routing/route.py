"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from extroute.routing.params import convert_param

# Router key for routes that accept every HTTP method (empty ``methods``)
ANY_METHOD = "*"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``paths`` is the full set of patterns the handler is mounted at.
    An empty ``methods`` set means the route accepts every HTTP method.
    ``ext`` marks the handler for duplication under the ext prefix.
    """

    paths: frozenset[str]
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None
    ext: bool = False

    @property
    def handler_name(self) -> str:
        """Readable handler name for logs and route listings."""
        return getattr(
            self.handler,
            "__qualname__",
            getattr(self.handler, "__name__", repr(self.handler)),
        )

    def allows(self, method: str) -> bool:
        """True if this route serves *method*."""
        return not self.methods or method in self.methods


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``path_params`` holds the raw captured strings; ``param_types`` maps
    each name to its converter.
    """

    route: Route
    path_params: dict[str, str]
    param_types: dict[str, str] = field(default_factory=dict)

    def typed_params(self) -> dict[str, str | int | float]:
        """Path params converted with their declared converters."""
        return {
            name: convert_param(value, self.param_types.get(name, "str"))
            for name, value in self.path_params.items()
        }
