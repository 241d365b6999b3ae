import logging

import pytest

from hookloader.runtime.globals import clear_globals


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """No config from the developer's shell, and no globals leaking between tests."""
    monkeypatch.delenv('HOOKLOADER_CONFIG', raising=False)
    monkeypatch.delenv('HOOKLOADER_ENV', raising=False)
    yield
    clear_globals()
    logging.getLogger('hookloader').setLevel(logging.NOTSET)


@pytest.fixture
def init_log():
    return []


@pytest.fixture
def make_context():
    """Build a LoadContext as the config phase would leave it."""
    from hookloader.bootstrap.context import LoadContext
    from hookloader.bootstrap.signals import BootstrapSignalEmitter
    from hookloader.configs.settings import LoaderSettings
    from hookloader.infrastructure.event_bus import MemoryEventBus

    def _make(module_set=None, **settings):
        bus = MemoryEventBus()
        return LoadContext(
            run_id='test_run',
            config_override={},
            default_hooks={},
            event_bus=bus,
            signal_emitter=BootstrapSignalEmitter(bus, 'test_run'),
            settings=LoaderSettings(**settings),
            module_set=module_set,
        )
    return _make
