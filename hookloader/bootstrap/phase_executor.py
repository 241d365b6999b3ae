"""
Phase Executor - runs load phases with uniform timing and logging.

Errors are recorded against the phase and re-raised as they are; the
executor never wraps or retries.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict

from hookloader.bootstrap.context import LoadContext
from hookloader.bootstrap.phases.base_phase import BootstrapPhase, PhaseExecutionResult, PhaseExecutionSummary

logger = logging.getLogger(__name__)


class PhaseExecutor:
    def __init__(self, context: LoadContext):
        self.context = context

    async def execute_phase(self, phase: BootstrapPhase) -> Dict[str, Any]:
        logger.info(f'Executing phase: {phase.name}')
        start = time.perf_counter()
        try:
            metadata = await phase.execute(self.context) or {}
        except BaseException as e:
            duration = time.perf_counter() - start
            self.context.phase_results.append(
                PhaseExecutionResult(phase_name=phase.name, success=False, duration_seconds=duration, exception=e)
            )
            logger.error(f'✗ Phase {phase.name} failed after {duration:.3f}s: {e}')
            raise
        duration = time.perf_counter() - start
        self.context.phase_results.append(
            PhaseExecutionResult(phase_name=phase.name, success=True, duration_seconds=duration, metadata=metadata)
        )
        logger.info(f'✓ Phase {phase.name} completed in {duration:.3f}s')
        return metadata

    def summary(self) -> PhaseExecutionSummary:
        return PhaseExecutionSummary.from_results(self.context.phase_results)

    def log_summary(self) -> None:
        summary = self.summary()
        logger.info('=== Load Phase Summary ===')
        logger.info(
            f'Phases: {summary.successful_phases}/{summary.total_phases} succeeded '
            f'({summary.success_rate:.0f}%) in {summary.total_duration:.3f}s'
        )
        for result in summary.results:
            marker = '✓' if result.success else '✗'
            logger.info(f'  {marker} {result.phase_name}: {result.duration_seconds:.3f}s')
