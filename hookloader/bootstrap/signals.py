# hookloader/bootstrap/signals.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

SYSTEM_INITIALIZATION_STARTED = 'SYSTEM_INITIALIZATION_STARTED'
CONFIGURATION_LOADED = 'CONFIGURATION_LOADED'
HOOK_INITIALIZATION_STARTED = 'HOOK_INITIALIZATION_STARTED'
HOOK_INITIALIZATION_COMPLETE = 'HOOK_INITIALIZATION_COMPLETE'
HOOK_INITIALIZATION_FAILED = 'HOOK_INITIALIZATION_FAILED'
HOOK_READY = 'HOOK_READY'
HOOKS_BUILTIN_READY = 'HOOKS_BUILTIN_READY'
REGISTRY_POPULATED = 'REGISTRY_POPULATED'
ROUTES_BOUND = 'ROUTES_BOUND'
SYSTEM_READY = 'SYSTEM_READY'
BOOTSTRAP_ERROR_OCCURRED = 'BOOTSTRAP_ERROR_OCCURRED'
BOOTSTRAP_WARNING_ISSUED = 'BOOTSTRAP_WARNING_ISSUED'

SYSTEM_LIFECYCLE_SIGNALS = {SYSTEM_INITIALIZATION_STARTED, CONFIGURATION_LOADED, SYSTEM_READY}
HOOK_LIFECYCLE_SIGNALS = {HOOK_INITIALIZATION_STARTED, HOOK_INITIALIZATION_COMPLETE, HOOK_READY}
PHASE_COMPLETION_SIGNALS = {HOOKS_BUILTIN_READY, REGISTRY_POPULATED, ROUTES_BOUND}
ERROR_SIGNALS = {BOOTSTRAP_ERROR_OCCURRED, BOOTSTRAP_WARNING_ISSUED, HOOK_INITIALIZATION_FAILED}
ALL_BOOTSTRAP_SIGNALS = SYSTEM_LIFECYCLE_SIGNALS | HOOK_LIFECYCLE_SIGNALS | PHASE_COMPLETION_SIGNALS | ERROR_SIGNALS


def is_error_signal(signal_type: str) -> bool:
    return signal_type in ERROR_SIGNALS


def get_signal_category(signal_type: str) -> str:
    if signal_type in SYSTEM_LIFECYCLE_SIGNALS:
        return 'system_lifecycle'
    elif signal_type in HOOK_LIFECYCLE_SIGNALS:
        return 'hook_lifecycle'
    elif signal_type in PHASE_COMPLETION_SIGNALS:
        return 'phase_completion'
    elif signal_type in ERROR_SIGNALS:
        return 'error'
    else:
        return 'unknown'


def validate_signal_type(signal_type: str) -> bool:
    return signal_type in ALL_BOOTSTRAP_SIGNALS


class BootstrapSignalEmitter:
    """Publishes loader lifecycle signals on the event bus, stamped with the run id."""

    def __init__(self, event_bus: Optional[Any], run_id: str):
        self.event_bus = event_bus
        self.run_id = run_id
        self.signal_count = 0
        if not event_bus:
            logger.warning('No event bus provided to BootstrapSignalEmitter - signals will be logged only')
        logger.debug(f'BootstrapSignalEmitter initialized for run_id: {run_id}')

    def emit_signal(self, signal_type: str, payload: Dict[str, Any]) -> None:
        self.signal_count += 1
        if not validate_signal_type(signal_type):
            logger.warning(f'Unknown signal type: {signal_type}')
        enhanced_payload = {
            'signal_type': signal_type,
            'run_id': self.run_id,
            'signal_sequence': self.signal_count,
            'category': get_signal_category(signal_type),
            'timestamp': datetime.now(timezone.utc).isoformat(),
            **payload,
        }
        log_level = logging.ERROR if is_error_signal(signal_type) else logging.DEBUG
        logger.log(log_level, f"Bootstrap signal [{signal_type}]: {payload.get('message', '')}")
        if self.event_bus:
            self.event_bus.publish(signal_type, enhanced_payload)

    def emit_bootstrap_started(self) -> None:
        self.emit_signal(SYSTEM_INITIALIZATION_STARTED, {'message': f'Load started for run_id: {self.run_id}'})

    def emit_configuration_loaded(self, keys: list) -> None:
        self.emit_signal(CONFIGURATION_LOADED, {'keys': keys, 'message': f'Configuration loaded ({len(keys)} keys)'})

    def emit_hook_started(self, identity: str) -> None:
        self.emit_signal(HOOK_INITIALIZATION_STARTED, {'component_id': identity, 'message': f'Hook {identity} initializing'})

    def emit_hook_complete(self, identity: str) -> None:
        self.emit_signal(HOOK_INITIALIZATION_COMPLETE, {'component_id': identity, 'message': f'Hook {identity} initialized'})

    def emit_hook_failed(self, identity: str, error: BaseException) -> None:
        self.emit_signal(HOOK_INITIALIZATION_FAILED, {'component_id': identity, 'error_message': str(error), 'message': f'Hook {identity} failed: {error}'})

    def emit_hooks_builtin_ready(self, hook_count: int) -> None:
        self.emit_signal(HOOKS_BUILTIN_READY, {'hook_count': hook_count, 'message': f'{hook_count} hooks finished initializing'})

    def emit_registry_populated(self, identities: list) -> None:
        self.emit_signal(REGISTRY_POPULATED, {'identities': identities, 'message': f'Registry populated with {len(identities)} namespaces'})

    def emit_routes_bound(self, route_count: int) -> None:
        self.emit_signal(ROUTES_BOUND, {'route_count': route_count, 'message': f'{route_count} routes bound'})

    def emit_system_ready(self, hook_count: int, duration_seconds: float) -> None:
        self.emit_signal(SYSTEM_READY, {
            'hook_count': hook_count,
            'duration_seconds': duration_seconds,
            'message': f'Load completed with {hook_count} hooks in {duration_seconds:.2f}s',
        })

    def emit_error(self, error_type: str, component_id: Optional[str], error_message: str) -> None:
        self.emit_signal(BOOTSTRAP_ERROR_OCCURRED, {
            'error_type': error_type,
            'component_id': component_id,
            'error_message': error_message,
            'message': f'Bootstrap error: {error_message}',
        })

    def emit_warning(self, warning_type: str, component_id: Optional[str], warning_message: str) -> None:
        self.emit_signal(BOOTSTRAP_WARNING_ISSUED, {
            'warning_type': warning_type,
            'component_id': component_id,
            'warning_message': warning_message,
            'message': f'Bootstrap warning: {warning_message}',
        })

    def get_signal_stats(self) -> Dict[str, Any]:
        return {'total_signals_emitted': self.signal_count, 'run_id': self.run_id, 'event_bus_available': self.event_bus is not None}
