"""hookloader - concurrent, dependency-ordered loading of pluggable hooks."""

__version__ = '0.1.0'

from hookloader.bootstrap.exceptions import (
    BootstrapError,
    ConfigurationError,
    GraphError,
    ModuleInitializationError,
    ReadinessTimeoutError,
    RoutingError,
)
from hookloader.bootstrap.loader import LoadedInstance, Loader, load, load_sync
from hookloader.core.hook import Hook

__all__ = [
    '__version__',
    'BootstrapError',
    'ConfigurationError',
    'GraphError',
    'Hook',
    'LoadedInstance',
    'Loader',
    'ModuleInitializationError',
    'ReadinessTimeoutError',
    'RoutingError',
    'load',
    'load_sync',
]
