"""
Loader - takes a runtime from no state to fully initialized.

The load is a fixed graph of phases (config -> modules -> registry ->
routing) run by TaskGraphRunner. Every call gets its own LoadContext, so
concurrent or repeated loads share nothing but the hook objects handed in.
"""
from __future__ import annotations

import asyncio
import itertools
import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from hookloader.bootstrap.context import LoadContext
from hookloader.bootstrap.exceptions import BootstrapError
from hookloader.bootstrap.phase_executor import PhaseExecutor
from hookloader.bootstrap.phases import BootstrapPhase, PhaseExecutionResult, default_phases
from hookloader.bootstrap.signals import BootstrapSignalEmitter
from hookloader.bootstrap.task_graph import Task, TaskGraphRunner
from hookloader.configs.config_loader import ConfigLoader
from hookloader.configs.config_utils import clone_config
from hookloader.configs.settings import LoaderSettings
from hookloader.core.module_state import ModuleSet
from hookloader.core.registry import HandlerRegistry
from hookloader.infrastructure.event_bus import MemoryEventBus
from hookloader.routing.router import RouteTable
from hookloader.runtime.globals import expose_globals

logger = logging.getLogger(__name__)

LoadCallback = Callable[[Optional[BaseException], Optional['LoadedInstance']], Any]

_run_counter = itertools.count(1)


def _generate_run_id() -> str:
    timestamp = datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')
    return f'load_run_{timestamp}_{os.getpid()}_{next(_run_counter)}'


@dataclass
class LoadedInstance:
    """Everything one successful load produced."""
    run_id: str
    settings: LoaderSettings
    module_set: ModuleSet
    registry: HandlerRegistry
    routes: RouteTable
    event_bus: MemoryEventBus
    phase_results: List[PhaseExecutionResult] = field(default_factory=list)

    @property
    def hooks(self) -> Dict[str, Any]:
        """Active hooks by identity."""
        return self.module_set.active()

    def get_hook(self, identity: str) -> Any:
        return self.module_set.get_hook(identity)

    def __repr__(self) -> str:
        return f'<LoadedInstance run_id={self.run_id!r} hooks={list(self.hooks)} routes={len(self.routes)}>'


class Loader:
    """
    Runs the load graph.

    `default_hooks` are the built-in definitions that user configuration
    overrides by identity. `event_bus` receives the lifecycle signals; a fresh
    MemoryEventBus is used when none is given.
    """

    def __init__(
        self,
        default_hooks: Optional[Mapping[str, Any]] = None,
        event_bus: Optional[MemoryEventBus] = None,
        config_loader: Optional[ConfigLoader] = None,
        phases: Optional[Sequence[BootstrapPhase]] = None,
    ):
        if default_hooks is None:
            from hookloader.hooks import DEFAULT_HOOKS
            default_hooks = DEFAULT_HOOKS
        self.default_hooks = dict(default_hooks)
        self.event_bus = event_bus
        self.config_loader = config_loader
        self.phases = list(phases) if phases is not None else None

    def build_graph(self, context: LoadContext, executor: PhaseExecutor) -> Dict[str, Task]:
        phases = self.phases if self.phases is not None else default_phases(self.config_loader)
        graph: Dict[str, Task] = {}
        for phase in phases:
            graph[phase.name] = Task(fn=self._phase_task(executor, phase), dependencies=tuple(phase.dependencies))
        return graph

    @staticmethod
    def _phase_task(executor: PhaseExecutor, phase: BootstrapPhase):
        async def _run(_results: Mapping[str, Any]) -> Dict[str, Any]:
            return await executor.execute_phase(phase)
        return _run

    async def load(
        self,
        config_override: Union[Mapping[str, Any], LoadCallback, None] = None,
        callback: Optional[LoadCallback] = None,
    ) -> Optional[LoadedInstance]:
        if callable(config_override) and callback is None:
            callback, config_override = config_override, None

        try:
            instance = await self._load(config_override)
        except Exception as e:
            if not isinstance(e, BootstrapError):
                logger.error(f'Unexpected error during load: {e}', exc_info=True)
            if callback is None:
                raise
            callback(e, None)
            return None

        if callback is not None:
            callback(None, instance)
        return instance

    async def _load(self, config_override: Optional[Mapping[str, Any]]) -> LoadedInstance:
        start = time.perf_counter()
        run_id = _generate_run_id()
        event_bus = self.event_bus if self.event_bus is not None else MemoryEventBus()
        emitter = BootstrapSignalEmitter(event_bus, run_id)
        context = LoadContext(
            run_id=run_id,
            config_override=clone_config(dict(config_override or {})),
            default_hooks=dict(self.default_hooks),
            event_bus=event_bus,
            signal_emitter=emitter,
        )
        executor = PhaseExecutor(context)

        logger.info(f'=== Load starting - run_id: {run_id} ===')
        emitter.emit_bootstrap_started()
        try:
            runner = TaskGraphRunner(self.build_graph(context, executor), name='load', settle_on_failure=True)
            await runner.run()
        except Exception as e:
            logger.error(f'Load failed: {e}')
            emitter.emit_error(type(e).__name__, getattr(e, 'component_id', None), str(e))
            executor.log_summary()
            raise

        instance = LoadedInstance(
            run_id=run_id,
            settings=context.settings,
            module_set=context.module_set,
            registry=context.registry,
            routes=context.routes,
            event_bus=event_bus,
            phase_results=list(context.phase_results),
        )
        expose_globals(instance, context.settings.globals)

        duration = time.perf_counter() - start
        executor.log_summary()
        emitter.emit_system_ready(len(instance.hooks), duration)
        logger.info(f'✓ Load complete in {duration:.2f}s - {len(instance.hooks)} hooks, {len(instance.routes)} routes')
        return instance


async def load(
    config_override: Union[Mapping[str, Any], LoadCallback, None] = None,
    callback: Optional[LoadCallback] = None,
    *,
    default_hooks: Optional[Mapping[str, Any]] = None,
    event_bus: Optional[MemoryEventBus] = None,
) -> Optional[LoadedInstance]:
    """
    Load the runtime.

    `config_override` is merged over the configuration files; pass a callable
    instead to use it as the callback. `callback(err, instance)` is called
    exactly once. Without a callback the instance is returned and errors are
    raised; with one, errors go to the callback and None is returned.
    """
    return await Loader(default_hooks=default_hooks, event_bus=event_bus).load(config_override, callback)


def load_sync(
    config_override: Union[Mapping[str, Any], LoadCallback, None] = None,
    callback: Optional[LoadCallback] = None,
    **kwargs: Any,
) -> Optional[LoadedInstance]:
    """Synchronous version of load(); must not be called from a running loop."""
    return asyncio.run(load(config_override, callback, **kwargs))
