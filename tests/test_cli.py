import argparse
from unittest.mock import AsyncMock, patch

import pytest

import hookloader.__main__ as cli
from hookloader.bootstrap.exceptions import ConfigurationError


def test_build_override_from_arguments(tmp_path):
    config = tmp_path / 'c.yaml'
    args = cli.build_parser().parse_args([
        'load', '--config', str(config), '--env', 'staging',
        '--hook', 'p=sample_hooks:PathHook', '--only', 'p, health', '--timeout-ms', '250',
    ])

    override = cli.build_override(args)

    assert override == {
        'config_paths': [str(config)],
        'env': 'staging',
        'hooks': {'p': 'sample_hooks:PathHook'},
        'load_hooks': ['p', 'health'],
        'readiness': {'timeout_ms': 250.0},
    }


def test_bad_hook_argument_is_rejected():
    with pytest.raises(argparse.ArgumentTypeError):
        cli._parse_hook('no-equals-sign')


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(['--version'])
    assert excinfo.value.code == 0
    assert cli.__version__ in capsys.readouterr().out


def test_load_prints_summary(capsys):
    exit_code = cli.main(['load', '--hook', 'p=sample_hooks:PathHook'])

    out = capsys.readouterr().out
    assert exit_code == cli.EXIT_OK
    assert 'Load Summary' in out
    assert '✓ p' in out
    assert '✓ health' in out
    assert 'GET /health -> health.status' in out


def test_load_failure_exit_code(capsys):
    exit_code = cli.main(['load', '--hook', 'x=sample_hooks:Nope'])
    assert exit_code == cli.EXIT_FAILED
    assert 'Load failed' in capsys.readouterr().out


def test_interrupt_exit_code():
    with patch.object(cli, 'load', AsyncMock(side_effect=KeyboardInterrupt)):
        assert cli.main(['load']) == cli.EXIT_INTERRUPTED


def test_bootstrap_error_exit_code():
    with patch.object(cli, 'load', AsyncMock(side_effect=ConfigurationError('bad'))):
        assert cli.main(['load']) == cli.EXIT_FAILED


def test_no_command_prints_help(capsys):
    assert cli.main([]) == cli.EXIT_FAILED
    assert 'usage' in capsys.readouterr().out.lower()
