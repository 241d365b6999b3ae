import logging
import os

import pytest
import yaml

from hookloader.bootstrap.exceptions import ConfigurationError
from hookloader.configs.config_loader import CONFIG_PATH_ENV_VAR, ConfigLoader
from hookloader.configs.config_utils import ConfigMerger, clone_config
from sample_hooks import RecordingHook


def _write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


@pytest.mark.asyncio
async def test_package_defaults():
    settings = await ConfigLoader().load_global_config({})

    assert settings.env == 'default'
    assert settings.port == 1337
    assert settings.readiness.poll_interval_ms == 150
    assert settings.readiness.timeout_ms == 10000
    assert settings.explicit_host is None
    assert settings.hooks_enabled


@pytest.mark.asyncio
async def test_host_sets_explicit_host():
    settings = await ConfigLoader().load_global_config({'host': 'example.com'})
    assert settings.host == 'example.com'
    assert settings.explicit_host == 'example.com'


@pytest.mark.asyncio
async def test_camel_case_allow_list_alias():
    settings = await ConfigLoader().load_global_config({'loadHooks': ['a']})
    assert settings.load_hooks == ['a']


@pytest.mark.asyncio
async def test_hooks_false_disables_hook_loading():
    settings = await ConfigLoader().load_global_config({'hooks': False})
    assert not settings.hooks_enabled
    assert settings.hook_overrides == {}


@pytest.mark.asyncio
async def test_hook_objects_are_kept_by_reference():
    hook = RecordingHook()
    override = {'hooks': {'rec': hook}}
    settings = await ConfigLoader().load_global_config(override)
    assert settings.hooks['rec'] is hook


@pytest.mark.asyncio
async def test_override_is_not_mutated():
    override = {'host': 'example.com', 'readiness': {'timeout_ms': 50}}
    await ConfigLoader().load_global_config(override)
    assert override == {'host': 'example.com', 'readiness': {'timeout_ms': 50}}


@pytest.mark.asyncio
async def test_layer_precedence(tmp_path, monkeypatch):
    config_dir = tmp_path / 'configs'
    (config_dir / 'default').mkdir(parents=True)
    (config_dir / 'staging').mkdir()
    _write_yaml(config_dir / 'default' / 'global_app_config.yaml', {'port': 1, 'routes': {'GET /a': 'a.x'}})
    _write_yaml(config_dir / 'staging' / 'global_app_config.yaml', {'port': 2, 'routes': {'GET /b': 'b.x'}})
    extra = _write_yaml(tmp_path / 'extra.yaml', {'port': 3, 'readiness': {'timeout_ms': 77}})
    monkeypatch.setenv('HOOKLOADER_ENV', 'staging')

    settings = await ConfigLoader(config_dir).load_global_config({'config_paths': [str(extra)], 'log_level': 'debug'})

    assert settings.env == 'staging'
    assert settings.port == 3
    assert settings.routes == {'GET /a': 'a.x', 'GET /b': 'b.x'}
    assert settings.readiness.timeout_ms == 77
    assert logging.getLogger('hookloader').level == logging.DEBUG

    settings = await ConfigLoader(config_dir).load_global_config({'config_paths': [str(extra)], 'port': 4})
    assert settings.port == 4


@pytest.mark.asyncio
async def test_config_paths_from_environment(tmp_path, monkeypatch):
    first = _write_yaml(tmp_path / 'first.yaml', {'port': 10})
    second = _write_yaml(tmp_path / 'second.yaml', {'port': 20, 'service': {'name': 'api'}})
    monkeypatch.setenv(CONFIG_PATH_ENV_VAR, f'{first}{os.pathsep}{second}')

    settings = await ConfigLoader().load_global_config({})

    assert settings.port == 20
    assert settings.model_extra['service'] == {'name': 'api'}


@pytest.mark.asyncio
async def test_environment_variables_are_expanded(tmp_path, monkeypatch):
    path = _write_yaml(tmp_path / 'c.yaml', {'host': '${API_HOST}', 'region': '${REGION:-eu-west-1}'})
    monkeypatch.setenv('API_HOST', 'api.internal')
    monkeypatch.delenv('REGION', raising=False)

    settings = await ConfigLoader().load_global_config({'config_paths': [str(path)]})

    assert settings.explicit_host == 'api.internal'
    assert settings.model_extra['region'] == 'eu-west-1'


@pytest.mark.asyncio
async def test_missing_explicit_file_is_a_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError, match='missing.yaml'):
        await ConfigLoader().load_global_config({'config_paths': [str(tmp_path / 'missing.yaml')]})


@pytest.mark.asyncio
async def test_non_mapping_yaml_is_rejected(tmp_path):
    path = tmp_path / 'list.yaml'
    path.write_text('- just\n- a list\n')
    with pytest.raises(ConfigurationError):
        await ConfigLoader().load_global_config({'config_paths': [str(path)]})


@pytest.mark.asyncio
@pytest.mark.parametrize('override', [{'port': 'not-a-port'}, {'readiness': {'timeout_ms': -1}}, {'log_level': 'LOUD'}])
async def test_invalid_values_are_configuration_errors(override):
    with pytest.raises(ConfigurationError) as excinfo:
        await ConfigLoader().load_global_config(override)
    assert excinfo.value.phase == 'config'


def test_merger_merges_nested_dicts_without_mutating_inputs():
    base = {'a': {'x': 1, 'y': 2}, 'b': [1]}
    override = {'a': {'y': 3}, 'c': True}

    merged = ConfigMerger.merge(base, override)

    assert merged == {'a': {'x': 1, 'y': 3}, 'b': [1], 'c': True}
    assert base == {'a': {'x': 1, 'y': 2}, 'b': [1]}


def test_merger_strict_keys():
    with pytest.raises(ValueError, match='Strict mode'):
        ConfigMerger.merge({'a': 1}, {'b': 2}, strict_keys=True)


def test_clone_config_copies_containers_and_shares_objects():
    hook = RecordingHook()
    original = {'hooks': {'rec': hook}, 'names': ['a']}
    cloned = clone_config(original)

    assert cloned == original
    assert cloned['hooks'] is not original['hooks']
    assert cloned['names'] is not original['names']
    assert cloned['hooks']['rec'] is hook
