"""Tests for extroute.markers: @ext_mapping and marker lookup."""

import functools

from extroute.markers import EXT_MAPPING_ATTR, ext_mapping, is_ext_mapped


def _plain() -> str:
    return "plain"


def _logged(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper


def _opaque(func):
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper


class _Base:
    @ext_mapping
    def status(self) -> str:
        return "base"

    def plain(self) -> str:
        return "plain"

    @classmethod
    @ext_mapping
    def version(cls) -> str:
        return "1"


class _Child(_Base):
    def status(self) -> str:  # override without the marker
        return "child"


class TestExtMapping:
    def test_bare_decorator_returns_same_function(self) -> None:
        def handler() -> str:
            return "ok"

        assert ext_mapping(handler) is handler
        assert getattr(handler, EXT_MAPPING_ATTR) is True

    def test_called_decorator(self) -> None:
        @ext_mapping()
        def handler() -> str:
            return "ok"

        assert is_ext_mapped(handler)
        assert handler() == "ok"


class TestIsExtMapped:
    def test_unmarked(self) -> None:
        assert not is_ext_mapped(_plain)

    def test_marked_function(self) -> None:
        @ext_mapping
        def handler() -> str:
            return "ok"

        assert is_ext_mapped(handler)

    def test_marker_below_wraps(self) -> None:
        @_logged
        @ext_mapping
        def handler() -> str:
            return "ok"

        assert is_ext_mapped(handler)

    def test_marker_hidden_by_opaque_wrapper(self) -> None:
        @_opaque
        @ext_mapping
        def handler() -> str:
            return "ok"

        assert not is_ext_mapped(handler)

    def test_bound_method(self) -> None:
        assert is_ext_mapped(_Base().status)
        assert not is_ext_mapped(_Base().plain)

    def test_inherited_marker_on_override(self) -> None:
        assert is_ext_mapped(_Child().status)

    def test_classmethod(self) -> None:
        assert is_ext_mapped(_Base.version)

    def test_non_true_attribute_ignored(self) -> None:
        def handler() -> str:
            return "ok"

        setattr(handler, EXT_MAPPING_ATTR, "yes")
        assert not is_ext_mapped(handler)
