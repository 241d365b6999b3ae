from .globals import clear_globals, expose_globals, exposed_globals
from .utils import import_by_path

__all__ = ['clear_globals', 'expose_globals', 'exposed_globals', 'import_by_path']
