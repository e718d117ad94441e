"""extroute: serve marked route handlers a second time under ``/ext``.

Mark a handler with ``@ext_mapping`` and the app registers one more
route for it when the route table is built: every path rewritten under
``/ext``, same HTTP methods, same handler.

Basic usage::

    from extroute import App, ext_mapping

    app = App()

    @app.route("/health")
    @ext_mapping
    def health():
        return {"ok": True}

    # GET /health and GET /ext/health both reach health()

Standalone, against any ``Router``::

    from extroute.augment import augment_marked_routes

    augment_marked_routes(router)
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "ConverterConflict",
    "ExtRouteError",
    "HTTPError",
    "MethodNotAllowed",
    "NotFound",
    "PrefixAugmenter",
    "Request",
    "Response",
    "Route",
    "RouteConflict",
    "Router",
    "augment_marked_routes",
    "ext_mapping",
    "is_ext_mapped",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import extroute`` fast while providing a clean top-level API.
    """
    if name == "App":
        from extroute.app import App

        return App

    if name == "AppConfig":
        from extroute.config import AppConfig

        return AppConfig

    if name == "Request":
        from extroute.http.request import Request

        return Request

    if name == "Response":
        from extroute.http.response import Response

        return Response

    if name == "Route":
        from extroute.routing.route import Route

        return Route

    if name == "Router":
        from extroute.routing.router import Router

        return Router

    if name in ("PrefixAugmenter", "augment_marked_routes"):
        from extroute import augment as _augment

        return getattr(_augment, name)

    if name in ("ext_mapping", "is_ext_mapped"):
        from extroute import markers as _markers

        return getattr(_markers, name)

    if name in (
        "ConfigurationError",
        "ConverterConflict",
        "ExtRouteError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "RouteConflict",
    ):
        from extroute import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
