"""Tests for extroute.routing.router: trie-based route table."""

import pytest

from extroute.errors import (
    ConfigurationError,
    ConverterConflict,
    MethodNotAllowed,
    NotFound,
    RouteConflict,
)
from extroute.routing.route import Route
from extroute.routing.router import Router, parse_path


def _handler() -> str:
    return "ok"


def _other() -> str:
    return "other"


def _route(
    *paths: str,
    methods: frozenset[str] | None = None,
    handler=_handler,
) -> Route:
    return Route(
        paths=frozenset(paths),
        handler=handler,
        methods=frozenset({"GET"}) if methods is None else methods,
    )


class TestParsePath:
    def test_static(self) -> None:
        segments = parse_path("/users")
        assert len(segments) == 1
        assert segments[0].value == "users"
        assert segments[0].is_param is False

    def test_multi_static(self) -> None:
        segments = parse_path("/api/v2/users")
        assert [s.value for s in segments] == ["api", "v2", "users"]

    def test_param(self) -> None:
        segments = parse_path("/users/{id}")
        assert segments[1].is_param is True
        assert segments[1].param_name == "id"
        assert segments[1].param_type == "str"

    def test_typed_param(self) -> None:
        segments = parse_path("/users/{id:int}")
        assert segments[1].param_type == "int"

    def test_root(self) -> None:
        assert parse_path("/") == []

    def test_leading_slash_optional(self) -> None:
        assert parse_path("users/{id}") == parse_path("/users/{id}")

    def test_rejects_flask_style_param(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_path("/share/<slug>")
        assert "<param>" in str(exc_info.value)
        assert "{param}" in str(exc_info.value)
        assert "/share/<slug>" in str(exc_info.value)

    def test_rejects_unknown_converter(self) -> None:
        with pytest.raises(ConfigurationError, match="uuid"):
            parse_path("/items/{id:uuid}")

    def test_path_converter_must_be_last(self) -> None:
        with pytest.raises(ConfigurationError, match="last segment"):
            parse_path("/files/{rest:path}/raw")


class TestRouterMatching:
    def test_root(self) -> None:
        r = Router()
        r.add(_route("/"))
        r.compile()
        assert r.match("GET", "/").path_params == {}

    def test_trailing_slash_ignored(self) -> None:
        r = Router()
        r.add(_route("/users"))
        r.compile()
        assert r.match("GET", "/users/").route.paths == frozenset({"/users"})

    def test_multiple_paths_one_route(self) -> None:
        route = _route("/users", "/people")
        r = Router()
        r.add(route)
        r.compile()
        assert r.match("GET", "/users").route is route
        assert r.match("GET", "/people").route is route

    def test_int_param(self) -> None:
        r = Router()
        r.add(_route("/users/{id:int}"))
        r.compile()

        match = r.match("GET", "/users/42")
        assert match.path_params == {"id": "42"}
        assert match.typed_params() == {"id": 42}

        with pytest.raises(NotFound):
            r.match("GET", "/users/alice")

    def test_path_param(self) -> None:
        r = Router()
        r.add(_route("/files/{filepath:path}"))
        r.compile()

        match = r.match("GET", "/files/docs/api/index.html")
        assert match.path_params == {"filepath": "docs/api/index.html"}

    def test_static_preferred_over_param(self) -> None:
        me = _route("/users/me")
        by_id = _route("/users/{id}", handler=_other)
        r = Router()
        r.add(me)
        r.add(by_id)
        r.compile()

        assert r.match("GET", "/users/me").route is me
        assert r.match("GET", "/users/42").route is by_id

    def test_param_names_come_from_matched_route(self) -> None:
        r = Router()
        r.add(_route("/users/{id}", methods=frozenset({"GET"})))
        r.add(_route("/users/{name}", methods=frozenset({"DELETE"}), handler=_other))
        r.compile()

        assert r.match("GET", "/users/7").path_params == {"id": "7"}
        assert r.match("DELETE", "/users/7").path_params == {"name": "7"}


class TestRouterMethods:
    def test_method_filtering(self) -> None:
        getter = _route("/users", methods=frozenset({"GET"}))
        poster = _route("/users", methods=frozenset({"POST"}), handler=_other)
        r = Router()
        r.add(getter)
        r.add(poster)
        r.compile()

        assert r.match("GET", "/users").route is getter
        assert r.match("POST", "/users").route is poster

    def test_method_not_allowed(self) -> None:
        r = Router()
        r.add(_route("/users", methods=frozenset({"GET", "PUT"})))
        r.compile()

        with pytest.raises(MethodNotAllowed) as exc_info:
            r.match("POST", "/users")

        err = exc_info.value
        assert err.status == 405
        assert dict(err.headers)["Allow"] == "GET, PUT"

    def test_empty_methods_match_any(self) -> None:
        r = Router()
        r.add(_route("/hook", methods=frozenset()))
        r.compile()

        assert r.match("PATCH", "/hook").route.methods == frozenset()
        assert r.match("GET", "/hook").route.methods == frozenset()


class TestRouterConflicts:
    def test_same_path_same_method(self) -> None:
        r = Router()
        r.add(_route("/health"))

        with pytest.raises(RouteConflict) as exc_info:
            r.add(_route("/health", handler=_other))

        err = exc_info.value
        assert err.path == "/health"
        assert err.method == "GET"
        assert err.existing.handler is _handler
        assert "_handler" in str(err)

    def test_param_names_do_not_disambiguate(self) -> None:
        r = Router()
        r.add(_route("/users/{id}"))
        with pytest.raises(RouteConflict):
            r.add(_route("/users/{name}", handler=_other))

    def test_any_method_conflicts_with_specific(self) -> None:
        r = Router()
        r.add(_route("/hook", methods=frozenset({"POST"})))
        with pytest.raises(RouteConflict, match="any method"):
            r.add(_route("/hook", methods=frozenset(), handler=_other))

    def test_specific_conflicts_with_any_method(self) -> None:
        r = Router()
        r.add(_route("/hook", methods=frozenset()))
        with pytest.raises(RouteConflict):
            r.add(_route("/hook", methods=frozenset({"DELETE"}), handler=_other))

    def test_trailing_slash_is_same_pattern(self) -> None:
        r = Router()
        r.add(_route("/users"))
        with pytest.raises(RouteConflict):
            r.add(_route("users/", handler=_other))

    def test_conflict_leaves_table_unchanged(self) -> None:
        r = Router()
        r.add(_route("/b"))
        before = r.routes

        with pytest.raises(RouteConflict):
            r.add(_route("/a", "/b", handler=_other))

        assert r.routes == before
        r.compile()
        with pytest.raises(NotFound):
            r.match("GET", "/a")

    def test_converter_mismatch_across_routes(self) -> None:
        r = Router()
        r.add(_route("/items/{id:int}"))
        with pytest.raises(ConverterConflict, match="converter"):
            r.add(_route("/items/{slug}", methods=frozenset({"POST"}), handler=_other))

    def test_converter_mismatch_is_configuration_error(self) -> None:
        assert issubclass(ConverterConflict, ConfigurationError)

    def test_converter_mismatch_within_one_route(self) -> None:
        r = Router()
        with pytest.raises(ConverterConflict, match="converter"):
            r.add(_route("/a/{x:int}", "/a/{y}"))

        assert r.routes == []
        r.add(_route("/a/{y}"))
        r.compile()
        assert r.match("GET", "/a/abc").path_params == {"y": "abc"}


class TestRouterRoutes:
    def test_registration_order(self) -> None:
        first = _route("/a")
        second = _route("/b")
        r = Router()
        r.add(first)
        r.add(second)
        assert r.routes == [first, second]

    def test_snapshot_is_a_copy(self) -> None:
        r = Router()
        r.add(_route("/a"))
        snapshot = r.routes
        r.add(_route("/b"))
        assert len(snapshot) == 1
        assert len(r.routes) == 2

    def test_pathless_route_is_listed_but_never_matches(self) -> None:
        route = _route()
        r = Router()
        r.add(route)
        r.compile()
        assert r.routes == [route]
        with pytest.raises(NotFound):
            r.match("GET", "/")


class TestRouterErrors:
    def test_not_found(self) -> None:
        r = Router()
        r.add(_route("/users"))
        r.compile()

        with pytest.raises(NotFound) as exc_info:
            r.match("GET", "/nonexistent")
        assert exc_info.value.status == 404

    def test_add_after_compile_raises(self) -> None:
        r = Router()
        r.compile()
        assert r.compiled

        with pytest.raises(RuntimeError, match="Cannot add routes after compilation"):
            r.add(_route("/users"))
