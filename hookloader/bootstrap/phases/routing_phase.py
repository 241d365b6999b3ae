from __future__ import annotations

from typing import Any, Dict

from hookloader.bootstrap.context import LoadContext
from hookloader.bootstrap.phases.base_phase import BootstrapPhase
from hookloader.routing.router import Router


class RoutingPhase(BootstrapPhase):
    name = 'routing'
    dependencies = ('registry',)

    async def execute(self, context: LoadContext) -> Dict[str, Any]:
        router = Router(context.registry, context.require_settings().routes, module_set=context.module_set)
        context.routes = router.load()
        context.signal_emitter.emit_routes_bound(len(context.routes))
        return {'routes': list(context.routes)}
