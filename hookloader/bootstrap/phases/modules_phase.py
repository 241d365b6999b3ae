from __future__ import annotations

from typing import Any, Dict, Optional

from hookloader.bootstrap.context import LoadContext
from hookloader.bootstrap.module_initializer import ModuleInitializer
from hookloader.bootstrap.module_resolver import ModuleSetResolver
from hookloader.bootstrap.phases.base_phase import BootstrapPhase
from hookloader.core.module_state import ModuleSet


class ModulesPhase(BootstrapPhase):
    """Resolves the hook set, then initializes every active hook concurrently."""

    name = 'modules'
    dependencies = ('config',)

    def __init__(self, resolver: Optional[ModuleSetResolver] = None):
        super().__init__()
        self.resolver = resolver or ModuleSetResolver()

    async def execute(self, context: LoadContext) -> Dict[str, Any]:
        settings = context.require_settings()
        if not settings.hooks_enabled:
            self.logger.info('Hook loading disabled (hooks: false)')
            context.module_set = ModuleSet()
            context.signal_emitter.emit_hooks_builtin_ready(0)
            return {'active': [], 'disabled': [], 'hooks_enabled': False}

        module_set = self.resolver.resolve(context.default_hooks, settings.hook_overrides, settings.load_hooks)
        context.module_set = module_set
        for identity in module_set.unknown:
            context.signal_emitter.emit_warning('UnknownHook', identity, f"load_hooks names '{identity}', which is not a known hook")

        await ModuleInitializer(context).initialize_all(module_set)

        active = list(module_set.active())
        context.signal_emitter.emit_hooks_builtin_ready(len(active))
        return {'active': active, 'disabled': module_set.disabled(), 'unknown': module_set.unknown}
