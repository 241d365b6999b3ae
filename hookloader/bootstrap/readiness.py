from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, List, Mapping, Tuple

from hookloader.bootstrap.exceptions import ReadinessTimeoutError
from hookloader.core.hook import Hook
from hookloader.core.module_state import ModuleSet

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 150
DEFAULT_TIMEOUT_MS = 10_000


def is_ready(hook: Any) -> bool:
    """Hooks that expose no `ready` attribute count as ready."""
    return bool(getattr(hook, 'ready', True))


class ReadinessBarrier:
    """
    Second gate after initialization: waits until every active hook is ready.

    Hook subclasses are awaited on their ready latch, so the barrier opens the
    moment the last one flips. Other objects only expose a `ready` attribute
    and are polled every `poll_interval_ms`. The whole wait is bounded by
    `timeout_ms`; when it elapses, ReadinessTimeoutError names the stragglers.
    """

    def __init__(self, poll_interval_ms: float = DEFAULT_POLL_INTERVAL_MS, timeout_ms: float = DEFAULT_TIMEOUT_MS):
        self.poll_interval_ms = poll_interval_ms
        self.timeout_ms = timeout_ms

    async def wait_all_ready(self, module_set: ModuleSet) -> None:
        await self.wait_ready(list(module_set.iter_active()))

    async def wait_ready(self, hooks: Iterable[Tuple[str, Any]], phase: str = 'registry') -> None:
        hooks = list(hooks)
        waiting = [(identity, hook) for identity, hook in hooks if not is_ready(hook)]
        if not waiting:
            logger.debug('All hooks already ready')
            return

        logger.info(f"Waiting for {len(waiting)} hook(s) to declare that they're ready...")
        waiters = [self._wait_one(hook) for _, hook in waiting]
        try:
            await asyncio.wait_for(asyncio.gather(*waiters), timeout=self.timeout_ms / 1000)
        except asyncio.TimeoutError:
            stalled = [identity for identity, hook in waiting if not is_ready(hook)]
            message = (
                f'Hooks are taking way too long to get ready ({self.timeout_ms:g}ms). '
                "Make sure each hook's initialize() completes and, for deferred hooks, that mark_ready() is called."
            )
            logger.error(f"{message} Stalled: {', '.join(sorted(stalled))}")
            raise ReadinessTimeoutError(message, stalled=stalled, timeout_ms=self.timeout_ms, phase=phase) from None

        logger.info(f'✓ All {len(hooks)} hooks are ready')

    async def _wait_one(self, hook: Any) -> None:
        if isinstance(hook, Hook):
            await hook.wait_ready()
            return
        while not is_ready(hook):
            await asyncio.sleep(self.poll_interval_ms / 1000)

    @classmethod
    def from_settings(cls, readiness: Any) -> ReadinessBarrier:
        return cls(poll_interval_ms=readiness.poll_interval_ms, timeout_ms=readiness.timeout_ms)


def readiness_report(module_set: Mapping[str, Any]) -> List[Tuple[str, bool]]:
    active = module_set.iter_active() if isinstance(module_set, ModuleSet) else module_set.items()
    return [(identity, is_ready(hook)) for identity, hook in active]
