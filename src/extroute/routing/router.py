"""Route table with trie-based path matching.

Routes are registered during setup (host routes first, then ext
duplicates) and the table is frozen with ``compile()`` before the first
request.
"""

from dataclasses import dataclass

from extroute.errors import (
    ConfigurationError,
    ConverterConflict,
    MethodNotAllowed,
    NotFound,
    RouteConflict,
)
from extroute.routing.params import param_regex
from extroute.routing.route import ANY_METHOD, PathSegment, Route, RouteMatch


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}" -> [PathSegment("{id:int}", is_param=True, param_type="int")]
        "/files/{path:path}" -> [PathSegment("{path:path}", is_param=True, param_type="path")]

    Raises ``ConfigurationError`` for ``<param>`` segments, unknown
    converters, and ``path`` converters that are not the last segment.
    """
    segments: list[PathSegment] = []
    parts = [part for part in path.strip("/").split("/") if part]
    for index, part in enumerate(parts):
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Route {path!r} uses <param> syntax. "
                f"Path parameters are written as {{param}} or {{param:type}}."
            )
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name = inner
                param_type = "str"
            param_regex(param_type)
            if param_type == "path" and index != len(parts) - 1:
                msg = f"Route {path!r}: a {{name:path}} segment must be the last segment."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


@dataclass(slots=True)
class _Endpoint:
    """A route mounted at a trie node, with the param names of that path."""

    route: Route
    params: tuple[tuple[str, str], ...]  # (name, converter) in path order


class _TrieNode:
    """A node in the route trie. Mutable until the router is compiled."""

    __slots__ = ("catch_all", "children", "endpoints", "param_child")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (one converter per level)
        self.param_child: _ParamEdge | None = None
        # Catch-all terminal (path converter), consumes the rest of the path
        self.catch_all: _TrieNode | None = None
        # Endpoints at this node, keyed by HTTP method or ANY_METHOD
        self.endpoints: dict[str, _Endpoint] = {}


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie, shared by every name of one converter."""

    param_type: str
    node: _TrieNode


def _insert(root: _TrieNode, segments: list[PathSegment], path: str) -> _TrieNode:
    """Create the nodes for *segments* under *root* and return the last one."""
    node = root
    for seg in segments:
        if seg.is_param and seg.param_type == "path":
            if node.catch_all is None:
                node.catch_all = _TrieNode()
            return node.catch_all
        if seg.is_param:
            if node.param_child is None:
                node.param_child = _ParamEdge(param_type=seg.param_type, node=_TrieNode())
            elif node.param_child.param_type != seg.param_type:
                raise ConverterConflict(
                    path, seg.value, seg.param_type, node.param_child.param_type
                )
            node = node.param_child.node
        else:
            node = node.children.setdefault(seg.value, _TrieNode())
    return node


class Router:
    """Route table with trie-based path matching.

    Patterns that differ only in parameter names (``/users/{id}`` and
    ``/users/{name}``) are the same pattern and compete for the same
    methods.

    Usage::

        router = Router()
        router.add(Route(frozenset({"/users"}), handler, frozenset({"GET"})))
        router.add(Route(frozenset({"/users/{id:int}"}), handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._routes: list[Route] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route under every one of its paths.

        All paths are checked before any is inserted: on a conflict
        ``RouteConflict`` or ``ConverterConflict`` is raised and the table
        is unchanged.
        Must be called before ``compile()``.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        parsed = [(path, parse_path(path)) for path in sorted(route.paths)]
        # The route's own paths must agree on converters too
        scratch = _TrieNode()
        for path, segments in parsed:
            node = self._find(segments, path)
            if node is not None:
                self._check_conflict(node, route, path)
            _insert(scratch, segments, path)

        keys = route.methods or frozenset({ANY_METHOD})
        for path, segments in parsed:
            node = _insert(self._root, segments, path)
            params = tuple(
                (seg.param_name or "", seg.param_type) for seg in segments if seg.is_param
            )
            for key in keys:
                node.endpoints[key] = _Endpoint(route=route, params=params)

        self._routes.append(route)

    def _find(self, segments: list[PathSegment], path: str) -> _TrieNode | None:
        """Walk existing nodes for *segments* without creating any."""
        node: _TrieNode | None = self._root
        for seg in segments:
            assert node is not None
            if seg.is_param and seg.param_type == "path":
                return node.catch_all
            if seg.is_param:
                edge = node.param_child
                if edge is None:
                    return None
                if edge.param_type != seg.param_type:
                    raise ConverterConflict(path, seg.value, seg.param_type, edge.param_type)
                node = edge.node
            else:
                node = node.children.get(seg.value)
                if node is None:
                    return None
        return node

    @staticmethod
    def _check_conflict(node: _TrieNode, route: Route, path: str) -> None:
        """Raise ``RouteConflict`` if *route* overlaps a method already at *node*."""
        for key in sorted(route.methods or {ANY_METHOD}):
            if key == ANY_METHOD:
                clashes = list(node.endpoints.values())
            else:
                clashes = [
                    endpoint
                    for endpoint in (node.endpoints.get(key), node.endpoints.get(ANY_METHOD))
                    if endpoint is not None
                ]
            for endpoint in clashes:
                if endpoint.route is not route:
                    raise RouteConflict(path, key, endpoint.route)

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes in registration order.

        The list is a snapshot; adding routes while iterating it is safe.
        Routes with no paths are included even though they never match.
        """
        return list(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against registered routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, ())

        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        node, values = result
        endpoint = node.endpoints.get(method) or node.endpoints.get(ANY_METHOD)
        if endpoint is None:
            raise MethodNotAllowed(frozenset(node.endpoints))

        names = [name for name, _ in endpoint.params]
        return RouteMatch(
            route=endpoint.route,
            path_params=dict(zip(names, values, strict=True)),
            param_types=dict(endpoint.params),
        )

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        values: tuple[str, ...],
    ) -> tuple[_TrieNode, tuple[str, ...]] | None:
        """Recursively match path parts against the trie."""
        # All parts consumed: return this node
        if index == len(parts):
            if node.endpoints:
                return node, values
            return None

        part = parts[index]

        # 1. Try static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, values)
            if result is not None:
                return result

        # 2. Try parameter child
        if node.param_child is not None:
            edge = node.param_child
            if param_regex(edge.param_type).match(part):
                result = self._match_node(edge.node, parts, index + 1, (*values, part))
                if result is not None:
                    return result

        # 3. Try catch-all
        if node.catch_all is not None and node.catch_all.endpoints:
            remaining = "/".join(parts[index:])
            return node.catch_all, (*values, remaining)

        return None
