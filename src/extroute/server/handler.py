"""ASGI handler: matches a request against the route table and calls the handler.

The only component besides the App that touches raw ASGI. Ext routes
need no special casing here: they are ordinary entries in the router.
"""

import inspect
import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from extroute._internal.asgi import Receive, Scope, Send
from extroute._internal.invoke import invoke
from extroute.errors import HTTPError
from extroute.http.request import Request
from extroute.http.response import Response, to_response
from extroute.routing.route import RouteMatch
from extroute.routing.router import Router

logger = logging.getLogger("extroute.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    debug: bool = False,
) -> None:
    """Process a single HTTP request."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        match = router.match(request.method, request.path)
        response = await _invoke_handler(match, request)
    except HTTPError as exc:
        logger.debug("%d %s %s (%s)", exc.status, request.method, request.path, exc.detail)
        response = Response(body=exc.detail, status=exc.status, headers=exc.headers)
    except Exception as exc:
        logger.exception("500 %s %s", request.method, request.path)
        detail = f"{type(exc).__name__}: {exc}" if debug else "Internal Server Error"
        response = Response(body=detail, status=500)

    await _send_response(response, send)


async def _invoke_handler(match: RouteMatch, request: Request) -> Response:
    """Call the matched route handler, converting path params and return value."""
    handler = match.route.handler
    request = replace(request, path_params=match.path_params)
    kwargs = _build_handler_kwargs(handler, request, match.typed_params())
    result = await invoke(handler, **kwargs)
    return to_response(result)


def _build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    path_params: dict[str, Any],
) -> dict[str, Any]:
    """Inspect handler signature and build kwargs from request + path params.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Path parameters (by name, already converted by the route's converters)
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in path_params:
            kwargs[name] = path_params[name]

    return kwargs


async def _send_response(response: Response, send: Send) -> None:
    """Translate a Response into the two ASGI send() calls."""
    # 1xx, 204 and 304 responses carry no body
    bodyless = 100 <= response.status < 200 or response.status in {204, 304}
    body = b"" if bodyless else response.body_bytes

    raw_headers = [
        (b"content-type", response.content_type.encode("latin-1")),
        *(
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in response.headers
        ),
        (b"content-length", str(len(body)).encode("latin-1")),
    ]

    await send({"type": "http.response.start", "status": response.status, "headers": raw_headers})
    await send({"type": "http.response.body", "body": body})
