"""extroute CLI: route table inspection.

Entry point registered as ``extroute`` in ``pyproject.toml``::

    [project.scripts]
    extroute = "extroute.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``extroute`` command."""
    parser = argparse.ArgumentParser(
        prog="extroute",
        description="extroute: serve marked handlers again under /ext.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging (e.g. each registered ext route)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- extroute routes --------------------------------------------------
    routes_parser = subparsers.add_parser(
        "routes",
        help="List registered routes, ext duplicates included",
    )
    routes_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "routes":
        from extroute.cli._routes import run_routes

        run_routes(args)
