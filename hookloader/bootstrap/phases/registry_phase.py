from __future__ import annotations

from typing import Any, Dict, Optional

from hookloader.bootstrap.context import LoadContext
from hookloader.bootstrap.phases.base_phase import BootstrapPhase
from hookloader.bootstrap.readiness import ReadinessBarrier
from hookloader.bootstrap.registry_builder import RegistryBuilder


class RegistryPhase(BootstrapPhase):
    """
    Builds the handler registry, then holds the load until every active hook
    is ready. With no active hooks the barrier is not consulted at all.
    """

    name = 'registry'
    dependencies = ('modules',)

    def __init__(self, builder: Optional[RegistryBuilder] = None, barrier: Optional[ReadinessBarrier] = None):
        super().__init__()
        self.builder = builder or RegistryBuilder()
        self.barrier = barrier

    async def execute(self, context: LoadContext) -> Dict[str, Any]:
        module_set = context.module_set
        registry = self.builder.build(module_set)
        context.registry = registry
        context.signal_emitter.emit_registry_populated(list(registry))

        waited = False
        if any(True for _ in module_set.iter_active()):
            barrier = self.barrier or ReadinessBarrier.from_settings(context.require_settings().readiness)
            await barrier.wait_all_ready(module_set)
            waited = True
        self.logger.info(f'✓ Registry ready with {len(registry)} namespaces')
        return {'namespaces': list(registry), 'barrier': waited}
