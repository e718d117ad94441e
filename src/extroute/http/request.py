"""Immutable HTTP request.

Frozen metadata with async body access. Handlers receive it by naming a
parameter ``request`` or annotating one with ``Request``.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl

from extroute._internal.asgi import Receive, Scope


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Header names are lower-cased; the first value of a repeated header
    wins. The body is read once from ASGI ``receive`` and cached.
    """

    method: str
    path: str
    headers: Mapping[str, str]
    query_string: str
    path_params: dict[str, str]

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for the body
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def query(self) -> dict[str, str]:
        """Query parameters, first value per key."""
        result: dict[str, str] = {}
        for key, value in parse_qsl(self.query_string, keep_blank_values=True):
            result.setdefault(key, value)
        return result

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    async def body(self) -> bytes:
        """Read the full request body (cached after the first call)."""
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks: list[bytes] = []
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                chunks.append(chunk)
            if not message.get("more_body", False):
                break
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(await self.body())

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        return (await self.body()).decode("utf-8")

    @classmethod
    def from_asgi(
        cls,
        scope: Scope,
        receive: Receive,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        headers: dict[str, str] = {}
        for name, value in scope.get("headers", ()):
            headers.setdefault(name.decode("latin-1").lower(), value.decode("latin-1"))
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=headers,
            query_string=scope.get("query_string", b"").decode("latin-1"),
            path_params={},
            _receive=receive,
        )
