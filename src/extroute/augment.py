"""Ext route augmentation: duplicate marked routes under ``/ext``.

Runs once, after every host route is in the table and before the table
is compiled. For each route flagged ``ext`` it registers one more route
with every path rewritten under the prefix, the same methods, and the
same handler::

    GET /users/{id}   ->   GET /ext/users/{id}   (same handler)

Strictly additive: existing routes are never changed. A duplicate that
collides with a route already in the table, by method or by path
converter, is logged and skipped; the remaining routes are still
processed.
"""

import logging
from collections.abc import Iterable

from extroute.errors import ConfigurationError, ConverterConflict, RouteConflict
from extroute.routing.route import Route
from extroute.routing.router import Router

logger = logging.getLogger("extroute.augment")

EXT_PREFIX = "/ext"
PATH_DELIMITER = "/"


def normalize_path(path: str, delimiter: str = PATH_DELIMITER) -> str:
    """Return *path* with a leading delimiter, adding one only if missing."""
    return path if path.startswith(delimiter) else delimiter + path


def prefix_paths(
    paths: Iterable[str],
    prefix: str = EXT_PREFIX,
    delimiter: str = PATH_DELIMITER,
) -> frozenset[str]:
    """Rewrite every path under *prefix*. Paths that normalize alike collapse."""
    return frozenset(prefix + normalize_path(path, delimiter) for path in paths)


class PrefixAugmenter:
    """Registers an ext duplicate for every marked route in a router.

    The router is borrowed for the duration of one call; the augmenter
    keeps no reference to it.

    Usage::

        router = Router()
        ...  # host routes
        PrefixAugmenter().augment_marked_routes(router)
        router.compile()
    """

    __slots__ = ("delimiter", "prefix")

    def __init__(self, prefix: str = EXT_PREFIX, *, delimiter: str = PATH_DELIMITER) -> None:
        if not delimiter:
            msg = "Path delimiter must not be empty."
            raise ConfigurationError(msg)
        if not prefix.startswith(delimiter) or prefix.endswith(delimiter):
            msg = (
                f"Ext prefix {prefix!r} must start with {delimiter!r} "
                f"and must not end with it (e.g. {EXT_PREFIX!r})."
            )
            raise ConfigurationError(msg)
        self.prefix = prefix
        self.delimiter = delimiter

    def augment_marked_routes(self, router: Router) -> None:
        """Register the ext duplicate of every ``ext`` route in *router*.

        Iterates a snapshot of the table, so duplicates added here are
        never themselves augmented. ``RouteConflict`` and
        ``ConverterConflict`` are logged per route; any other error
        propagates to the caller.
        """
        for route in router.routes:
            if route.ext:
                self._augment(router, route)

    def _augment(self, router: Router, route: Route) -> None:
        if not route.paths:
            logger.warning("No valid path found for handler: %s", route.handler_name)
            return

        prefixed = prefix_paths(route.paths, self.prefix, self.delimiter)
        # Empty methods stay empty: "all methods" is never narrowed
        duplicate = Route(paths=prefixed, handler=route.handler, methods=route.methods)

        try:
            router.add(duplicate)
        except (RouteConflict, ConverterConflict) as exc:
            logger.warning("Ext route conflict for %s -> %s", sorted(prefixed), exc)
            return
        logger.debug("Registered ext route: %s -> %s", sorted(prefixed), route.handler_name)


def augment_marked_routes(router: Router, *, prefix: str = EXT_PREFIX) -> None:
    """Shortcut for ``PrefixAugmenter(prefix).augment_marked_routes(router)``."""
    PrefixAugmenter(prefix).augment_marked_routes(router)
