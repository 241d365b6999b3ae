from .config_loader import ConfigLoader
from .config_utils import ConfigMerger, clone_config
from .settings import LoaderSettings, ReadinessSettings

__all__ = ['ConfigLoader', 'ConfigMerger', 'clone_config', 'LoaderSettings', 'ReadinessSettings']
