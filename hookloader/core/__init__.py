from .hook import Hook
from .module_state import Disabled, Enabled, ModuleSet, ModuleState
from .registry import HandlerRegistry, RegistryMissingError

__all__ = ['Hook', 'Enabled', 'Disabled', 'ModuleSet', 'ModuleState', 'HandlerRegistry', 'RegistryMissingError']
