# Kept import-light: config and routing modules import the exceptions from here.
from .exceptions import (
    BootstrapError,
    ConfigurationError,
    GraphError,
    ModuleInitializationError,
    ReadinessTimeoutError,
    RoutingError,
)

__all__ = [
    'BootstrapError',
    'ConfigurationError',
    'GraphError',
    'ModuleInitializationError',
    'ReadinessTimeoutError',
    'RoutingError',
]
