# hookloader/core/hook.py
from __future__ import annotations

import asyncio
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Sequence

if TYPE_CHECKING:
    from hookloader.bootstrap.context import HookContext

logger = logging.getLogger(__name__)

Middleware = Callable[..., Any]


class Hook:
    """
    Base class for pluggable hooks.

    A hook is initialized once per load through `initialize(context)`. It may
    expose named handlers through `middleware`; the loader files them under
    the hook's identity in the registry.

    Readiness is a one-shot latch. Unless `deferred_ready` is set, the loader
    marks the hook ready as soon as `initialize` returns. A hook that needs to
    finish background work first sets `deferred_ready = True` and calls
    `mark_ready()` itself.

    `depends_on` lists identities whose readiness this hook needs before its
    own `initialize` may start. `routes` maps a route to one of this hook's
    middleware names and is bound unless the settings rebind the route.
    """

    identity: Optional[str] = None
    depends_on: Sequence[str] = ()
    deferred_ready: bool = False
    routes: Mapping[str, str] = MappingProxyType({})

    def __init__(self, identity: Optional[str] = None, config: Optional[Dict[str, Any]] = None):
        if identity is not None:
            self.identity = identity
        self.config: Dict[str, Any] = dict(config or {})
        self.context: Optional[HookContext] = None
        self.middleware: Dict[str, Middleware] = dict(self.build_middleware() or {})
        self._ready_event = asyncio.Event()
        self._ready_callbacks: List[Callable[[Hook], None]] = []

    def build_middleware(self) -> Dict[str, Middleware]:
        """Hooks override to declare handler name -> callable."""
        return {}

    async def initialize(self, context: HookContext) -> None:
        self.context = context

    @property
    def ready(self) -> bool:
        return self._ready_event.is_set()

    def mark_ready(self) -> None:
        if self._ready_event.is_set():
            return
        self._ready_event.set()
        logger.debug(f"Hook '{self.identity}' marked ready")
        for callback in list(self._ready_callbacks):
            callback(self)

    async def wait_ready(self) -> None:
        await self._ready_event.wait()

    def add_ready_callback(self, callback: Callable[[Hook], None]) -> None:
        self._ready_callbacks.append(callback)

    def reset(self) -> None:
        """Clear readiness so the hook can take part in a fresh load."""
        self._ready_event = asyncio.Event()
        self._ready_callbacks = []
        self.context = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} identity={self.identity!r} ready={self.ready}>"
