from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from hookloader.configs.settings import LoaderSettings
from hookloader.core.module_state import ModuleSet
from hookloader.core.registry import HandlerRegistry
from hookloader.infrastructure.event_bus import MemoryEventBus
from hookloader.bootstrap.signals import BootstrapSignalEmitter


@dataclass
class HookContext:
    """What a hook receives in initialize(): its own scope of the current load."""
    identity: str
    run_id: str
    settings: LoaderSettings
    event_bus: MemoryEventBus
    logger: logging.LoggerAdapter
    module_set: ModuleSet

    def get_hook(self, identity: str) -> Any:
        return self.module_set.get_hook(identity)

    @property
    def hook_config(self) -> Dict[str, Any]:
        """The `<identity>` section of the settings, if any."""
        section = (self.settings.model_extra or {}).get(self.identity)
        return section if isinstance(section, dict) else {}


@dataclass
class LoadContext:
    """
    State owned by a single load() call.

    Created fresh per call and passed explicitly to every phase; nothing here
    outlives the call except through the LoadedInstance handed to the caller.
    """
    run_id: str
    config_override: Dict[str, Any]
    default_hooks: Dict[str, Any]
    event_bus: MemoryEventBus
    signal_emitter: BootstrapSignalEmitter
    settings: Optional[LoaderSettings] = None
    module_set: Optional[ModuleSet] = None
    registry: Optional[HandlerRegistry] = None
    routes: Optional[Any] = None
    phase_results: List[Any] = field(default_factory=list)

    def require_settings(self) -> LoaderSettings:
        if self.settings is None:
            raise RuntimeError('settings requested before the config phase completed')
        return self.settings

    def with_hook_scope(self, identity: str) -> HookContext:
        return HookContext(
            identity=identity,
            run_id=self.run_id,
            settings=self.require_settings(),
            event_bus=self.event_bus,
            logger=logging.LoggerAdapter(logging.getLogger(f'hookloader.hooks.{identity}'), {'hook': identity}),
            module_set=self.module_set if self.module_set is not None else ModuleSet(),
        )
