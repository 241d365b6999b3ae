"""
Dependency-ordered execution of named async tasks.

A task starts once every task it depends on has completed successfully.
Tasks whose dependencies are all met run concurrently on the current event
loop. The first failure stops new tasks from being scheduled; what happens to
tasks already in flight depends on `settle_on_failure`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence, Set

from hookloader.bootstrap.exceptions import GraphError

logger = logging.getLogger(__name__)

TaskFn = Callable[[Mapping[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class Task:
    fn: TaskFn
    dependencies: Sequence[str] = field(default_factory=tuple)


class TaskGraphRunner:
    """
    Runs a graph of named tasks once.

    Each task function receives a read-only view of the results gathered so
    far and returns its own result. `run()` returns all results keyed by task
    name, or raises the first error unchanged.

    With `settle_on_failure=True` the runner waits for tasks already running
    before raising. With `settle_on_failure=False` it raises at once and
    leaves them running; their outcome is logged and otherwise ignored.
    """

    def __init__(self, tasks: Mapping[str, Task], name: str = 'graph', settle_on_failure: bool = True):
        self.tasks = dict(tasks)
        self.name = name
        self.settle_on_failure = settle_on_failure
        self.started_order: list[str] = []
        self.completed_order: list[str] = []
        self._validate()

    def _validate(self) -> None:
        for task_name, task in self.tasks.items():
            missing = [dep for dep in task.dependencies if dep not in self.tasks]
            if missing:
                raise GraphError(
                    f"[{self.name}] Task '{task_name}' depends on undeclared task(s): {', '.join(missing)}",
                    component_id=task_name,
                )

    async def run(self) -> Dict[str, Any]:
        results: Dict[str, Any] = {}
        pending: Dict[str, Task] = dict(self.tasks)
        running: Dict[asyncio.Task, str] = {}
        first_error: Optional[BaseException] = None

        while pending or running:
            if first_error is None:
                for task_name in self._startable(pending, results):
                    task = pending.pop(task_name)
                    logger.debug(f'[{self.name}] starting task {task_name}')
                    self.started_order.append(task_name)
                    running[asyncio.ensure_future(task.fn(_ResultsView(results)))] = task_name

            if not running:
                if first_error is not None:
                    break
                stalled = sorted(pending)
                raise GraphError(
                    f"[{self.name}] No task can start; dependency cycle among: {', '.join(stalled)}"
                )

            done, _ = await asyncio.wait(running.keys(), return_when=asyncio.FIRST_COMPLETED)
            for finished in done:
                task_name = running.pop(finished)
                if finished.cancelled():
                    error: Optional[BaseException] = asyncio.CancelledError(f'task {task_name} was cancelled')
                else:
                    error = finished.exception()
                if error is None:
                    results[task_name] = finished.result()
                    self.completed_order.append(task_name)
                    logger.debug(f'[{self.name}] ✓ task {task_name} completed')
                elif first_error is None:
                    first_error = error
                    logger.debug(f'[{self.name}] ✗ task {task_name} failed: {error}')
                else:
                    logger.debug(f'[{self.name}] task {task_name} also failed after first error: {error}')

            if first_error is not None and not self.settle_on_failure:
                _abandon(running, self.name)
                break

        if first_error is not None:
            skipped = sorted(pending)
            if skipped:
                logger.debug(f"[{self.name}] not started after failure: {', '.join(skipped)}")
            raise first_error
        return results

    @staticmethod
    def _startable(pending: Mapping[str, Task], results: Mapping[str, Any]) -> list[str]:
        return [
            task_name for task_name, task in pending.items()
            if all(dep in results for dep in task.dependencies)
        ]


class _ResultsView(Mapping):
    def __init__(self, results: Dict[str, Any]):
        self._results = results

    def __getitem__(self, key: str) -> Any:
        return self._results[key]

    def __iter__(self):
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)


_ABANDONED: Set[asyncio.Future] = set()


def _abandon(running: Dict[asyncio.Future, str], graph_name: str) -> None:
    """Keep abandoned tasks alive and log how they end."""
    for future, task_name in running.items():
        _ABANDONED.add(future)

        def _log_outcome(fut: asyncio.Future, task_name: str = task_name) -> None:
            _ABANDONED.discard(fut)
            if fut.cancelled():
                return
            error = fut.exception()
            if error is not None:
                logger.warning(f'[{graph_name}] abandoned task {task_name} failed later: {error}')
            else:
                logger.debug(f'[{graph_name}] abandoned task {task_name} completed later')

        future.add_done_callback(_log_outcome)
