from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Dict, Mapping, Optional, Set

from hookloader.bootstrap.context import LoadContext
from hookloader.bootstrap.exceptions import (
    BootstrapError,
    ConfigurationError,
    GraphError,
    ModuleInitializationError,
)
from hookloader.bootstrap.readiness import ReadinessBarrier
from hookloader.bootstrap.signals import HOOK_READY
from hookloader.bootstrap.task_graph import Task, TaskGraphRunner
from hookloader.core.hook import Hook
from hookloader.core.module_state import ModuleSet

logger = logging.getLogger(__name__)


def _depends_on(hook: Any) -> tuple:
    return tuple(getattr(hook, 'depends_on', None) or ())


def _log_late_outcome(identity: str, future: asyncio.Future) -> None:
    if future.cancelled():
        return
    if future.exception() is not None:
        logger.warning(f"Hook '{identity}' initialize() failed after its timeout: {future.exception()}")
    else:
        logger.info(f"Hook '{identity}' initialize() finished after its timeout")


class ModuleInitializer:
    """
    Starts initialize() on every active hook at once.

    Hooks that declare `depends_on` start only after the hooks they name are
    ready; everything else starts immediately. The first failure ends the
    call with that error. Hooks still initializing are neither cancelled nor
    awaited any further.
    """

    def __init__(self, context: LoadContext, barrier: Optional[ReadinessBarrier] = None):
        self.context = context
        self.barrier = barrier or ReadinessBarrier.from_settings(context.require_settings().readiness)
        self.initialize_timeout_ms = context.require_settings().readiness.initialize_timeout_ms
        self.initialized: list[str] = []

    async def initialize_all(self, module_set: ModuleSet) -> None:
        active = module_set.active()
        if not active:
            logger.info('No active hooks to initialize')
            return

        self._check_dependencies(module_set, active)
        awaited_by_others: Set[str] = {dep for hook in active.values() for dep in _depends_on(hook)}

        tasks: Dict[str, Task] = {}
        for identity, hook in active.items():
            tasks[identity] = Task(
                fn=self._make_task(identity, hook, identity in awaited_by_others),
                dependencies=_depends_on(hook),
            )

        logger.info(f'Initializing {len(active)} hooks concurrently: {list(active)}')
        runner = TaskGraphRunner(tasks, name='hooks', settle_on_failure=False)
        await runner.run()
        logger.info(f'✓ {len(active)} hooks initialized')

    def _make_task(self, identity: str, hook: Any, awaited_by_others: bool):
        async def _run(_results: Mapping[str, Any]) -> Any:
            await self._initialize_one(identity, hook)
            if awaited_by_others:
                await self.barrier.wait_ready([(identity, hook)], phase='modules')
            return hook
        return _run

    async def _initialize_one(self, identity: str, hook: Any) -> None:
        emitter = self.context.signal_emitter
        if isinstance(hook, Hook):
            hook.reset()
            hook.add_ready_callback(self._on_ready)

        hook_context = self.context.with_hook_scope(identity)
        emitter.emit_hook_started(identity)
        logger.debug(f'Initializing hook: {identity}')
        try:
            await self._call_initialize(identity, hook, hook_context)
        except BootstrapError as e:
            emitter.emit_hook_failed(identity, e)
            raise
        except Exception as e:
            emitter.emit_hook_failed(identity, e)
            logger.error(f"Hook '{identity}' failed to initialize: {e}")
            raise ModuleInitializationError(f"Hook '{identity}' failed to initialize: {e}", component_id=identity, original_error=e) from e

        if isinstance(hook, Hook) and not hook.deferred_ready:
            hook.mark_ready()
        self.initialized.append(identity)
        emitter.emit_hook_complete(identity)
        logger.debug(f'✓ Hook {identity} initialize() returned')

    async def _call_initialize(self, identity: str, hook: Any, hook_context: Any) -> None:
        outcome = hook.initialize(hook_context)
        if not inspect.isawaitable(outcome):
            return
        if self.initialize_timeout_ms is None:
            await outcome
            return
        future = asyncio.ensure_future(outcome)
        try:
            await asyncio.wait_for(asyncio.shield(future), timeout=self.initialize_timeout_ms / 1000)
        except asyncio.TimeoutError:
            future.add_done_callback(lambda f: _log_late_outcome(identity, f))
            raise GraphError(
                f"Hook '{identity}' did not finish initialize() within {self.initialize_timeout_ms:g}ms",
                component_id=identity, phase='modules',
            ) from None

    def _on_ready(self, hook: Hook) -> None:
        self.context.signal_emitter.emit_signal(HOOK_READY, {'component_id': hook.identity, 'message': f'Hook {hook.identity} is ready'})

    @staticmethod
    def _check_dependencies(module_set: ModuleSet, active: Dict[str, Any]) -> None:
        for identity, hook in active.items():
            for dep in _depends_on(hook):
                if dep in active:
                    continue
                state = 'disabled' if dep in module_set else 'unknown'
                raise ConfigurationError(
                    f"Hook '{identity}' depends on {state} hook '{dep}'",
                    component_id=identity, phase='modules',
                )
