# hookloader/infrastructure/event_bus/memory_event_bus.py
from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, Dict, List, Optional, Sequence, Set

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any | Coroutine]


@dataclass(slots=True)
class _RecordedEvent:
    ts: float
    signal_name: str
    payload: Any


class MemoryEventBus:
    """
    In-process publish/subscribe channel shared by the loader and its hooks.

    Plain handlers run inline during publish(); coroutine handlers are
    scheduled on the running loop. Hooks that need to wait for another hook's
    signal use wait_for(), which also sees signals published before the call.
    """

    def __init__(self, component_id: str = "event_bus_memory", max_history: int = 1000) -> None:
        self.component_id = component_id
        self._subs: Dict[str, List[Handler]] = defaultdict(list)
        self._max_history = max_history
        self._history: List[_RecordedEvent] = []
        self._pending: Set[asyncio.Task] = set()
        logger.debug("[%s] constructed (max_history=%s)", self.component_id, self._max_history)

    def subscribe(self, signal_name: str, handler: Handler) -> None:
        self._subs[signal_name].append(handler)
        logger.debug(
            "[%s] subscribed to %s (%d handler(s))",
            self.component_id,
            signal_name,
            len(self._subs[signal_name]),
        )

    def unsubscribe(self, signal_name: str, handler: Handler) -> None:
        handlers = self._subs.get(signal_name)
        if handlers and handler in handlers:
            handlers.remove(handler)
            logger.debug("[%s] unsubscribed %s -> %s", self.component_id, signal_name, handler)

    def publish(self, signal_name: str, payload: Any | None = None) -> None:
        self._record(signal_name, payload)
        handlers = tuple(self._subs.get(signal_name, ()))
        logger.debug(
            "[%s] publish %s -> %d handler(s)",
            self.component_id,
            signal_name,
            len(handlers),
        )
        if handlers:
            self._dispatch(signal_name, payload, handlers)

    def _dispatch(self, signal_name: str, payload: Any, handlers: Sequence[Handler]) -> None:
        for i, handler in enumerate(handlers):
            try:
                logger.debug(f"[{self.component_id}] Dispatching '{signal_name}' to handler #{i+1} ({getattr(handler, '__qualname__', str(handler))})")
                if inspect.iscoroutinefunction(handler):
                    task = asyncio.get_running_loop().create_task(handler(payload))
                    self._pending.add(task)
                    task.add_done_callback(self._handler_done)
                else:
                    handler(payload)
            except Exception as exc:
                logger.exception("[%s] Error in handler for signal %s: %s", self.component_id, signal_name, exc)

    def _handler_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("[%s] Async handler failed: %s", self.component_id, task.exception())

    async def wait_for(self, signal_name: str, timeout: Optional[float] = None, include_history: bool = True) -> Any:
        """
        Suspend until `signal_name` is published and return its payload.

        With include_history, a signal that was already published returns its
        most recent payload immediately.
        """
        if include_history:
            for event in reversed(self._history):
                if event.signal_name == signal_name:
                    return event.payload

        future: asyncio.Future = asyncio.get_running_loop().create_future()

        def _resolve(payload: Any) -> None:
            if not future.done():
                future.set_result(payload)

        self.subscribe(signal_name, _resolve)
        try:
            return await asyncio.wait_for(future, timeout)
        finally:
            self.unsubscribe(signal_name, _resolve)

    def _record(self, signal_name: str, payload: Any) -> None:
        self._history.append(_RecordedEvent(time.time(), signal_name, payload))
        if len(self._history) > self._max_history:
            self._history.pop(0)

    def history(self) -> List[_RecordedEvent]:
        return list(self._history)

    def published(self, signal_name: str) -> bool:
        return any(event.signal_name == signal_name for event in self._history)

    def get_stats(self) -> Dict[str, Any]:
        return {
            'subscribers': {k: len(v) for k, v in self._subs.items()},
            'history_size': len(self._history),
            'pending_async_handlers': len(self._pending),
        }
