from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from hookloader.bootstrap.readiness import readiness_report
from hookloader.core.hook import Hook


class HealthHook(Hook):
    """Reports whether the loaded hooks are ready. Bound to GET /health by default."""

    identity = 'health'
    routes = {'GET /health': 'status'}

    def build_middleware(self):
        return {'status': self.status}

    def status(self, *args: Any, **kwargs: Any) -> Dict[str, Any]:
        if self.context is None:
            return {'status': 'unavailable', 'hooks': {}}
        hooks = dict(readiness_report(self.context.module_set))
        return {
            'status': 'ok' if all(hooks.values()) else 'starting',
            'run_id': self.context.run_id,
            'hooks': hooks,
            'timestamp': datetime.now(timezone.utc).isoformat(),
        }
