from .health import HealthHook

# Hooks loaded unless the configuration disables them by identity.
DEFAULT_HOOKS = {'health': HealthHook}

__all__ = ['DEFAULT_HOOKS', 'HealthHook']
