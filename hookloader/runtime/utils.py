import importlib
import logging
from typing import Any

logger = logging.getLogger(__name__)


def import_by_path(path: str) -> Any:
    """Import `pkg.mod:Attr` or `pkg.mod.Attr` and return the attribute."""
    if not isinstance(path, str):
        raise TypeError(f'Import path must be a string, got {type(path)}')
    if ':' in path:
        module_name, attr_name = path.split(':', 1)
    elif '.' in path:
        module_name, attr_name = path.rsplit('.', 1)
    else:
        raise ValueError(f"Import path '{path}' is ambiguous. Use 'pkg.mod:Class' or 'pkg.mod.Class'.")

    if not module_name or not attr_name:
        raise ValueError(f'Invalid import path format: {path}. Could not determine module and attribute.')

    module = importlib.import_module(module_name)
    logger.debug(f'Successfully imported module: {module_name}')
    try:
        return getattr(module, attr_name)
    except AttributeError as e:
        raise ImportError(f"Module '{module_name}' has no attribute '{attr_name}'") from e
