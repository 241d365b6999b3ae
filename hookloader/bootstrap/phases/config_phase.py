from __future__ import annotations

from typing import Any, Dict, Optional

from hookloader.bootstrap.context import LoadContext
from hookloader.bootstrap.phases.base_phase import BootstrapPhase
from hookloader.configs.config_loader import ConfigLoader


class ConfigPhase(BootstrapPhase):
    name = 'config'

    def __init__(self, config_loader: Optional[ConfigLoader] = None):
        super().__init__()
        self.config_loader = config_loader or ConfigLoader()

    async def execute(self, context: LoadContext) -> Dict[str, Any]:
        settings = await self.config_loader.load_global_config(context.config_override)
        context.settings = settings
        keys = sorted(set(type(settings).model_fields) | set(settings.model_extra or {}))
        context.signal_emitter.emit_configuration_loaded(keys)
        self.logger.info(f'✓ Configuration loaded (env={settings.env})')
        return {'env': settings.env, 'explicit_host': settings.explicit_host}
