"""Hooks used across the tests, some of them referenced by import path."""
import asyncio

from hookloader.core.hook import Hook


class RecordingHook(Hook):
    """Records the order initialize() is entered and left."""

    def __init__(self, identity=None, config=None, log=None, delay=0.0, middleware=None):
        self._extra_middleware = dict(middleware or {})
        super().__init__(identity=identity, config=config)
        self.log = log if log is not None else []
        self.delay = delay
        self.initialize_calls = 0

    def build_middleware(self):
        return dict(self._extra_middleware)

    async def initialize(self, context):
        await super().initialize(context)
        self.initialize_calls += 1
        self.log.append(('start', self.identity))
        if self.delay:
            await asyncio.sleep(self.delay)
        self.log.append(('end', self.identity))


class SlowReadyHook(Hook):
    """Becomes ready `ready_after` seconds after initialize() returns."""

    deferred_ready = True

    def __init__(self, identity=None, config=None, ready_after=0.05):
        super().__init__(identity=identity, config=config)
        self.ready_after = ready_after
        self._task = None

    async def initialize(self, context):
        await super().initialize(context)
        self._task = asyncio.ensure_future(self._become_ready())

    async def _become_ready(self):
        await asyncio.sleep(self.ready_after)
        self.mark_ready()


class NeverReadyHook(Hook):
    deferred_ready = True


class FailingHook(Hook):
    async def initialize(self, context):
        await super().initialize(context)
        raise ValueError('database unreachable')


class PathHook(Hook):
    def build_middleware(self):
        return {'ping': lambda: 'pong'}


class DuckHook:
    """Not a Hook subclass: exposes initialize() and a plain ready flag."""

    def __init__(self, config=None):
        self.config = config or {}
        self.ready = False
        self.middleware = {'echo': lambda value: value}

    def initialize(self, context):
        self.ready = True


class LateHandlersHook(Hook):
    """Adds a handler while it finishes getting ready, then marks itself ready."""

    deferred_ready = True

    async def initialize(self, context):
        await super().initialize(context)
        self._task = asyncio.ensure_future(self._finish())

    async def _finish(self):
        await asyncio.sleep(0.02)
        self.middleware['late'] = lambda: 'late handler'
        self.mark_ready()


class SubscriberHook(Hook):
    """Finishes initialize() only once the database hook has announced itself."""

    async def initialize(self, context):
        await super().initialize(context)
        self.db_payload = await context.event_bus.wait_for('db:ready', timeout=1)


class PublisherHook(Hook):
    async def initialize(self, context):
        await super().initialize(context)
        await asyncio.sleep(0.02)
        context.event_bus.publish('db:ready', {'dsn': 'memory://'})
