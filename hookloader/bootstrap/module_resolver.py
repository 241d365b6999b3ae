from __future__ import annotations

import inspect
import logging
from typing import Any, Dict, List, Mapping, Optional

from hookloader.bootstrap.exceptions import ConfigurationError
from hookloader.core.hook import Hook
from hookloader.core.module_state import Disabled, Enabled, ModuleSet, ModuleState
from hookloader.runtime.utils import import_by_path

logger = logging.getLogger(__name__)


class ModuleSetResolver:
    """
    Turns default hook definitions, user overrides and an optional allow-list
    into the ModuleSet for one load.

    A definition may be a Hook instance, a hook class, a dotted import path,
    a mapping with `class` (and optional `config`), or any object exposing an
    `initialize` callable. `False`/`None` disables the identity.
    """

    def resolve(
        self,
        defaults: Optional[Mapping[str, Any]],
        overrides: Optional[Mapping[str, Any]],
        allow_list: Optional[Any] = None,
    ) -> ModuleSet:
        merged: Dict[str, Any] = dict(defaults or {})
        for identity, definition in (overrides or {}).items():
            if identity in merged:
                logger.debug(f"Hook '{identity}' overridden by user configuration")
            merged[identity] = definition

        allowed = self._validate_allow_list(allow_list)

        states: Dict[str, ModuleState] = {}
        for identity, definition in merged.items():
            if definition is False or definition is None:
                default = (defaults or {}).get(identity)
                states[identity] = Disabled(default if default not in (False, None) else None, reason='disabled by configuration')
                logger.debug(f"Hook '{identity}' disabled by configuration")
                continue
            if allowed is not None and identity not in allowed:
                states[identity] = Disabled(definition, reason='not in load_hooks')
                continue
            states[identity] = Enabled(self._materialize(identity, definition))

        unknown: List[str] = []
        if allowed is not None:
            unknown = [identity for identity in allowed if identity not in merged]
            if unknown:
                logger.warning(f"load_hooks names unknown hooks (ignored): {', '.join(unknown)}")
            logger.info(f'Deliberate partial load - will only initialize hooks: {list(allowed)}')

        module_set = ModuleSet(states, unknown=unknown)
        logger.debug(f'Resolved {module_set!r}')
        return module_set

    @staticmethod
    def _validate_allow_list(allow_list: Any) -> Optional[List[str]]:
        if allow_list is None:
            return None
        if not isinstance(allow_list, (list, tuple)) or not all(isinstance(name, str) for name in allow_list):
            raise ConfigurationError(
                'Invalid `load_hooks` config. Please specify a list of string hook names. '
                f'You specified: {allow_list!r}',
                phase='modules',
            )
        return list(allow_list)

    def _materialize(self, identity: str, definition: Any) -> Any:
        config: Optional[Dict[str, Any]] = None
        if isinstance(definition, Mapping):
            if 'class' not in definition:
                raise ConfigurationError(
                    f"Hook definition mapping for '{identity}' needs a 'class' entry, got keys {sorted(definition)}",
                    component_id=identity, phase='modules',
                )
            config = dict(definition.get('config') or {})
            definition = definition['class']

        if isinstance(definition, str):
            try:
                definition = import_by_path(definition)
            except (ImportError, ValueError) as e:
                raise ConfigurationError(
                    f"Cannot import hook '{identity}' from {definition!r}: {e}",
                    component_id=identity, phase='modules',
                ) from e

        if inspect.isclass(definition):
            definition = self._instantiate(identity, definition, config)

        if isinstance(definition, Hook):
            if definition.identity is not None and definition.identity != identity:
                logger.warning(
                    f"Hook identity mismatch: instance has '{definition.identity}', "
                    f"configuration key is '{identity}'. Using the configuration key."
                )
            definition.identity = identity
            return definition

        if callable(getattr(definition, 'initialize', None)):
            return definition

        raise ConfigurationError(
            f"Hook '{identity}' must be a Hook, a hook class, an import path or an object with initialize(); "
            f"got {definition!r}",
            component_id=identity, phase='modules',
        )

    @staticmethod
    def _instantiate(identity: str, cls: type, config: Optional[Dict[str, Any]]) -> Any:
        try:
            if issubclass(cls, Hook):
                return cls(identity=identity, config=config)
            return cls(config) if config is not None else cls()
        except Exception as e:
            raise ConfigurationError(
                f"Could not instantiate hook '{identity}' ({cls.__name__}): {e}",
                component_id=identity, phase='modules',
            ) from e
