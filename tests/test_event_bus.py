import asyncio
import logging

import pytest

from hookloader.bootstrap.signals import (
    BOOTSTRAP_ERROR_OCCURRED,
    HOOKS_BUILTIN_READY,
    BootstrapSignalEmitter,
    get_signal_category,
    is_error_signal,
)
from hookloader.infrastructure.event_bus import MemoryEventBus


def test_sync_subscribers_receive_payload():
    bus = MemoryEventBus()
    received = []
    bus.subscribe('PING', received.append)

    bus.publish('PING', {'n': 1})

    assert received == [{'n': 1}]
    assert bus.published('PING')
    assert not bus.published('PONG')


def test_unsubscribe_stops_delivery():
    bus = MemoryEventBus()
    received = []
    bus.subscribe('PING', received.append)
    bus.unsubscribe('PING', received.append)
    bus.publish('PING', 1)
    assert received == []


def test_failing_subscriber_is_logged_and_others_still_run(caplog):
    bus = MemoryEventBus()
    received = []

    def broken(payload):
        raise RuntimeError('subscriber broke')

    bus.subscribe('PING', broken)
    bus.subscribe('PING', received.append)
    with caplog.at_level(logging.ERROR):
        bus.publish('PING', 'x')

    assert received == ['x']
    assert 'subscriber broke' in caplog.text


@pytest.mark.asyncio
async def test_async_subscribers_are_scheduled():
    bus = MemoryEventBus()
    received = []

    async def handler(payload):
        received.append(payload)

    bus.subscribe('PING', handler)
    bus.publish('PING', 'x')
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert received == ['x']


@pytest.mark.asyncio
async def test_wait_for_future_and_past_signals():
    bus = MemoryEventBus()
    asyncio.get_running_loop().call_later(0.01, bus.publish, 'LATER', 'payload')

    assert await bus.wait_for('LATER', timeout=1) == 'payload'
    # Already in history: returns at once.
    assert await bus.wait_for('LATER', timeout=0.01) == 'payload'


def test_history_is_bounded():
    bus = MemoryEventBus(max_history=3)
    for i in range(5):
        bus.publish('N', i)
    assert [event.payload for event in bus.history()] == [2, 3, 4]
    assert bus.get_stats()['history_size'] == 3


def test_emitter_stamps_payloads():
    bus = MemoryEventBus()
    emitter = BootstrapSignalEmitter(bus, 'run_1')

    emitter.emit_hooks_builtin_ready(2)
    emitter.emit_error('ValueError', 'db', 'boom')

    first, second = [event.payload for event in bus.history()]
    assert first['signal_type'] == HOOKS_BUILTIN_READY
    assert first['run_id'] == 'run_1'
    assert first['hook_count'] == 2
    assert (first['signal_sequence'], second['signal_sequence']) == (1, 2)
    assert second['signal_type'] == BOOTSTRAP_ERROR_OCCURRED
    assert second['component_id'] == 'db'
    assert emitter.get_signal_stats()['total_signals_emitted'] == 2


def test_emitter_without_bus_only_logs(caplog):
    with caplog.at_level(logging.WARNING):
        emitter = BootstrapSignalEmitter(None, 'run_2')
    emitter.emit_bootstrap_started()
    assert 'signals will be logged only' in caplog.text
    assert emitter.signal_count == 1


def test_signal_categories():
    assert is_error_signal(BOOTSTRAP_ERROR_OCCURRED)
    assert not is_error_signal(HOOKS_BUILTIN_READY)
    assert get_signal_category(HOOKS_BUILTIN_READY) == 'phase_completion'
