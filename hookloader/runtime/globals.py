"""
Optional exposure of the loaded instance on `builtins`.

Only names switched on under `globals` in the settings are published. The
names written are remembered so `clear_globals()` can take them back.
"""
from __future__ import annotations

import builtins
import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

_EXPOSABLE: Dict[str, Callable[[Any], Any]] = {
    'app': lambda instance: instance,
    'hooks': lambda instance: instance.hooks,
    'registry': lambda instance: instance.registry,
}

_exposed: List[str] = []


def expose_globals(instance: Any, globals_config: Dict[str, bool]) -> List[str]:
    """Publish the enabled names. Returns the names written."""
    written = []
    for name, enabled in (globals_config or {}).items():
        if not enabled:
            continue
        getter = _EXPOSABLE.get(name)
        if getter is None:
            logger.warning(f"Unknown global '{name}' ignored (choose from {sorted(_EXPOSABLE)})")
            continue
        setattr(builtins, name, getter(instance))
        if name not in _exposed:
            _exposed.append(name)
        written.append(name)
    if written:
        logger.info(f'Exposed globals: {written}')
    return written


def clear_globals() -> None:
    while _exposed:
        name = _exposed.pop()
        if hasattr(builtins, name):
            delattr(builtins, name)


def exposed_globals() -> List[str]:
    return list(_exposed)
