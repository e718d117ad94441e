"""extroute application class.

Mutable during setup (route registration, lifecycle hooks).
Frozen at runtime when the app is first called: the route table is
built, ext duplicates are added, and the table is compiled.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from extroute._internal.asgi import Receive, Scope, Send
from extroute._internal.invoke import run_hooks
from extroute._internal.types import Handler, Hook
from extroute.augment import PrefixAugmenter
from extroute.config import AppConfig
from extroute.markers import is_ext_mapped
from extroute.routing.route import Route
from extroute.routing.router import Router
from extroute.server.handler import handle_request

logger = logging.getLogger("extroute.app")


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    paths: tuple[str, ...]
    handler: Handler
    methods: list[str] | None
    name: str | None
    ext: bool | None = None


class App:
    """The extroute application.

    Mutable during setup (route registration, hooks).
    Frozen at runtime when ``__call__()`` is first invoked.

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread builds the route table and runs the ext augmentation.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_pending_routes",
        # Compiled state (populated by _freeze)
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._startup_hooks: list[Hook] = []
        self._shutdown_hooks: list[Hook] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._router: Router | None = None

    # -- Route registration --

    def route(
        self,
        *paths: str,
        methods: Iterable[str] | None = None,
        name: str | None = None,
        ext: bool | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            paths: URL path patterns. Use ``{param}`` or ``{param:type}``
                for path parameters. One handler may serve several paths.
            methods: HTTP methods. Defaults to ``["GET"]``. An empty
                list means the route accepts every method.
            name: Optional route name.
            ext: Also serve the handler under the ext prefix. ``None``
                (the default) reads the ``@ext_mapping`` marker when the
                route table is built.
        """

        def decorator(func: Handler) -> Handler:
            self.add_route(func, *paths, methods=methods, name=name, ext=ext)
            return func

        return decorator

    def add_route(
        self,
        handler: Handler,
        *paths: str,
        methods: Iterable[str] | None = None,
        name: str | None = None,
        ext: bool | None = None,
    ) -> None:
        """Register *handler* directly, e.g. a bound method of a controller."""
        self._check_not_frozen()
        self._pending_routes.append(
            _PendingRoute(
                paths=paths,
                handler=handler,
                methods=None if methods is None else list(methods),
                name=name,
                ext=ext,
            )
        )

    # -- Lifecycle hooks --

    def on_startup(self, func: Hook) -> Hook:
        """Register a startup hook (sync or async).

        Runs after the route table is built, during the ASGI lifespan
        startup phase::

            @app.on_startup
            async def setup():
                ...
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Hook) -> Hook:
        """Register a shutdown hook (sync or async)."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    @property
    def router(self) -> Router:
        """The compiled route table, freezing the app if needed."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles the lifespan scope directly, then delegates HTTP scopes
        to the request handler.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        await handle_request(scope, receive, send, router=self.router, debug=self.config.debug)

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before the first HTTP request), then
        runs startup/shutdown hooks and signals completion to the server.
        A failed freeze (e.g. a conflict between two host routes) is
        reported as ``lifespan.startup.failed``.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    await run_hooks(self._startup_hooks)
                except Exception as exc:
                    logger.exception("Application startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await run_hooks(self._shutdown_hooks)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Host routes. A conflict here is a programming error and aborts startup.
        router = Router()
        for pending in self._pending_routes:
            methods = (
                frozenset({"GET"})
                if pending.methods is None
                else frozenset(m.upper() for m in pending.methods)
            )
            ext = pending.ext if pending.ext is not None else is_ext_mapped(pending.handler)
            router.add(
                Route(
                    paths=frozenset(pending.paths),
                    handler=pending.handler,
                    methods=methods,
                    name=pending.name,
                    ext=ext,
                )
            )

        # 2. Ext duplicates. Conflicts are logged and skipped per route.
        if self.config.ext_routes:
            PrefixAugmenter(self.config.ext_prefix).augment_marked_routes(router)

        router.compile()
        self._router = router
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and hooks before the first request."
            )
            raise RuntimeError(msg)
