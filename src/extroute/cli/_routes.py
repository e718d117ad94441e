"""``extroute routes``: list registered routes.

Loads the app named by a ``module[:attr]`` target, builds its route
table (so ext duplicates exist), and prints one row per path with
method, path, and handler info.
"""

import argparse
import importlib
import sys

from extroute.app import App
from extroute.errors import ConfigurationError, ExtRouteError
from extroute.routing.route import ANY_METHOD, Route


def load_routes(target: str) -> list[Route]:
    """Import the app named by *target* and return its built route table.

    *target* is ``"module:attr"``; a bare ``"module"`` means
    ``"module:app"``. An attribute that is a callable but not an ``App``
    is called once as a factory.

    Every failure to reach an ``App`` is reported as
    ``ConfigurationError``. Errors raised while building the table
    (host ``RouteConflict``, bad patterns) propagate unchanged.
    """
    module_name, _, attr = target.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Cannot import {module_name!r}: {exc}"
        raise ConfigurationError(msg) from exc

    obj = getattr(module, attr or "app", None)
    if obj is None:
        msg = f"Module {module_name!r} has no attribute {attr or 'app'!r}"
        raise ConfigurationError(msg)
    if not isinstance(obj, App) and callable(obj):
        obj = obj()
    if not isinstance(obj, App):
        msg = f"{target!r} is a {type(obj).__name__}, not an extroute App"
        raise ConfigurationError(msg)

    return obj.router.routes


def format_routes(routes: list[Route]) -> list[str]:
    """Render *routes* as an aligned METHOD / PATH / HANDLER table."""
    rows: list[tuple[str, str, str]] = []
    for route in routes:
        methods_str = ", ".join(sorted(route.methods)) or ANY_METHOD
        handler_name = route.handler_name
        if route.name:
            handler_name = f"{handler_name} ({route.name})"
        if not route.paths:
            rows.append((methods_str, "-", handler_name))
        rows.extend((methods_str, path, handler_name) for path in sorted(route.paths))

    max_methods = max([6, *(len(r[0]) for r in rows)])  # "METHOD" header
    max_path = max([4, *(len(r[1]) for r in rows)])  # "PATH" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{}}"
    lines = [fmt.format("METHOD", "PATH", "HANDLER")]
    sep_len = max_methods + max_path + 4 + max((len(r[2]) for r in rows), default=0)
    lines.append("-" * min(sep_len, 80))
    lines.extend(fmt.format(*row) for row in rows)
    return lines


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for an extroute app."""
    try:
        routes = load_routes(args.app)
    except ExtRouteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not routes:
        print("No routes registered.")
        return

    for line in format_routes(routes):
        print(line)
