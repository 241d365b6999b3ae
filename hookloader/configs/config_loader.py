from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Final, List, Optional, Sequence

import yaml
from pydantic import ValidationError

from hookloader.bootstrap.exceptions import ConfigurationError
from hookloader.configs.config_utils import ConfigMerger, clone_config
from hookloader.configs.settings import LoaderSettings

__all__: Sequence[str] = ('ConfigLoader', 'CONFIG_PATH_ENV_VAR')
logger = logging.getLogger(__name__)

_ENV_DEFAULT: Final[str] = 'default'
CONFIG_PATH_ENV_VAR: Final[str] = 'HOOKLOADER_CONFIG'
_RE_ENV_DEFAULT: Final[re.Pattern[str]] = re.compile('\\$\\{([A-Za-z_][A-Za-z0-9_]*):-(.*?)\\}')


def _interpolate_env(value: str) -> str:
    def _repl(match: re.Match[str]) -> str:
        var, default = (match.group(1), match.group(2))
        return os.getenv(var, default)

    before = value
    value = _RE_ENV_DEFAULT.sub(_repl, value)
    value = os.path.expandvars(value)

    if before != value:
        logger.debug("Env expand: '%s' -> '%s'", before, value)
    elif '${' in before:
        logger.warning("Unresolved env var in '%s'", before)

    return value


def _expand_tree(node: Any) -> Any:
    if isinstance(node, dict):
        return {k: _expand_tree(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_expand_tree(v) for v in node]
    if isinstance(node, str):
        return _interpolate_env(node)
    return node


def _load_yaml(path: Path, required: bool = True) -> Dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {path}", phase='config')
        logger.debug('No config file at %s', path)
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Error parsing YAML file '{path}': {exc}", phase='config') from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Top-level YAML object in '{path}' must be a mapping, got {type(data).__name__}", phase='config')
    return data


class ConfigLoader:
    """
    Builds the LoaderSettings for one load.

    Precedence (last wins): package defaults -> env-specific defaults ->
    files from `config_paths` / HOOKLOADER_CONFIG -> programmatic override.
    Strings in file layers go through ${VAR} / ${VAR:-default} expansion; the
    programmatic override is taken as given.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else Path(__file__).resolve().parent

    async def load_global_config(self, config_override: Optional[Dict[str, Any]] = None) -> LoaderSettings:
        override = clone_config(config_override or {})
        env = override.get('env') or os.getenv('HOOKLOADER_ENV') or _ENV_DEFAULT
        logger.info(f'Loading configuration for environment: {env}')

        config: Dict[str, Any] = {}
        for layer_name, layer in self._file_layers(env, override):
            config = ConfigMerger.merge(config, _expand_tree(layer), layer_name)
        config = ConfigMerger.merge(config, override, 'config_override')
        config['env'] = env
        config.pop('config_paths', None)

        # Host given explicitly: networking binds to it instead of all interfaces.
        if config.get('host'):
            config['explicit_host'] = config['host']

        try:
            settings = LoaderSettings.model_validate(config)
        except ValidationError as e:
            raise ConfigurationError(f'Invalid configuration: {e}', phase='config') from e

        self._apply_log_level(settings)
        logger.info(f"✓ Configuration loaded for env='{env}'")
        logger.debug(f'Config keys: {sorted(config.keys())}')
        return settings

    def _file_layers(self, env: str, override: Dict[str, Any]) -> List[tuple]:
        layers = [('package_defaults', _load_yaml(self.config_dir / 'default' / 'global_app_config.yaml', required=False))]
        if env != _ENV_DEFAULT:
            env_path = self.config_dir / env / 'global_app_config.yaml'
            layers.append((f'env_{env}', _load_yaml(env_path, required=False)))
        for path in self._explicit_paths(override):
            layers.append((f'file:{path.name}', _load_yaml(path)))
        return layers

    @staticmethod
    def _explicit_paths(override: Dict[str, Any]) -> List[Path]:
        paths = override.get('config_paths')
        if paths is None:
            from_env = os.getenv(CONFIG_PATH_ENV_VAR)
            paths = [p for p in from_env.split(os.pathsep) if p] if from_env else []
        if isinstance(paths, (str, Path)):
            paths = [paths]
        if not isinstance(paths, (list, tuple)):
            raise ConfigurationError(f'config_paths must be a path or a list of paths, got {paths!r}', phase='config')
        return [Path(p) for p in paths]

    @staticmethod
    def _apply_log_level(settings: LoaderSettings) -> None:
        if not settings.log_level:
            return
        level = logging.getLevelName(settings.log_level.upper())
        if not isinstance(level, int):
            raise ConfigurationError(f'Unknown log_level {settings.log_level!r}', phase='config')
        logging.getLogger('hookloader').setLevel(level)
