import pytest

from hookloader.bootstrap.registry_builder import RegistryBuilder
from hookloader.core.module_state import Disabled, Enabled, ModuleSet
from hookloader.core.registry import HandlerRegistry, RegistryMissingError
from sample_hooks import RecordingHook


def status():
    return 'ok'


def test_one_namespace_per_active_hook():
    module_set = ModuleSet({
        'health': Enabled(RecordingHook(middleware={'status': status})),
        'bare': Enabled(object()),
        'off': Disabled(RecordingHook(middleware={'x': status})),
    })

    registry = RegistryBuilder().build(module_set)

    assert list(registry) == ['health', 'bare']
    assert registry['health'] == {'status': status}
    assert registry['bare'] == {}


def test_aggregation_is_deterministic():
    pairs = [(name, RecordingHook(middleware={'h': status})) for name in ('c', 'a', 'b')]
    first = RegistryBuilder.aggregate(pairs)
    second = RegistryBuilder.aggregate(pairs)
    assert list(first) == list(second) == ['c', 'a', 'b']


def test_duplicate_identity_last_write_wins():
    first = RecordingHook(middleware={'status': lambda: 'first'})
    second = RecordingHook(middleware={'status': lambda: 'second'})

    registry = RegistryBuilder.aggregate([('dup', first), ('dup', second)])

    assert len(registry) == 1
    assert registry.resolve('dup.status')() == 'second'


def test_registry_shares_each_hooks_middleware_mapping():
    hook = RecordingHook()
    registry = RegistryBuilder.aggregate([('h', hook)])

    assert registry['h'] is hook.middleware
    hook.middleware['late'] = status
    assert registry.resolve('h.late') is status


def test_missing_or_none_middleware_becomes_empty_namespace():
    class NoneMiddleware:
        middleware = None

    registry = RegistryBuilder.aggregate([('none', NoneMiddleware()), ('bare', object())])
    assert registry['none'] == {}
    assert registry['bare'] == {}


def test_missing_namespace_lists_available():
    registry = HandlerRegistry({'health': {'status': status}})
    with pytest.raises(RegistryMissingError) as excinfo:
        registry['nope']
    assert 'health' in str(excinfo.value)


@pytest.mark.parametrize('target', ['health', 'health.', '.status', 'health.missing', 'ghost.status'])
def test_resolve_rejects_bad_targets(target):
    registry = HandlerRegistry({'health': {'status': status}})
    with pytest.raises(RegistryMissingError):
        registry.resolve(target)
