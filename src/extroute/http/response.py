"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response.
"""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body_bytes)

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of header *name* (case-insensitive)."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default


def to_response(value: Any) -> Response:
    """Normalise a handler return value into a ``Response``.

    - ``Response`` passes through
    - ``str`` / ``bytes`` become the body
    - ``dict`` / ``list`` are serialised as JSON
    - ``(value, status)`` tuples set the status
    - ``None`` is an empty 204
    """
    if isinstance(value, Response):
        return value
    if isinstance(value, tuple) and len(value) == 2 and isinstance(value[1], int):
        return to_response(value[0]).with_status(value[1])
    if value is None:
        return Response(status=204)
    if isinstance(value, (str, bytes)):
        return Response(body=value)
    if isinstance(value, (dict, list)):
        return Response(
            body=json_module.dumps(value),
            content_type="application/json",
        )
    msg = f"Cannot convert handler return value of type {type(value).__name__} to a Response"
    raise TypeError(msg)
