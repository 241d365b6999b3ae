import builtins
import logging
from types import SimpleNamespace

from hookloader.runtime.globals import clear_globals, expose_globals, exposed_globals


def _instance():
    return SimpleNamespace(hooks={'a': object()}, registry={'a': {}})


def test_only_enabled_names_are_exposed():
    instance = _instance()

    written = expose_globals(instance, {'app': True, 'hooks': False, 'registry': True})

    assert written == ['app', 'registry']
    assert builtins.app is instance
    assert builtins.registry is instance.registry
    assert not hasattr(builtins, 'hooks')


def test_clear_globals_removes_what_was_written():
    expose_globals(_instance(), {'hooks': True})
    assert exposed_globals() == ['hooks']

    clear_globals()

    assert not hasattr(builtins, 'hooks')
    assert exposed_globals() == []


def test_unknown_names_are_ignored_with_a_warning(caplog):
    with caplog.at_level(logging.WARNING):
        written = expose_globals(_instance(), {'everything': True})
    assert written == []
    assert "Unknown global 'everything'" in caplog.text
