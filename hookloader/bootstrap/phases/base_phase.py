"""
Base Phase - common contract for the load phases.

Each phase reads what earlier phases left on the LoadContext and stores its
own output there. Phases raise on failure; the executor records timings and
lets the error travel on unchanged.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from hookloader.bootstrap.context import LoadContext

logger = logging.getLogger(__name__)


@dataclass
class PhaseExecutionResult:
    """Outcome of one phase within a load."""
    phase_name: str
    success: bool
    duration_seconds: float
    metadata: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[BaseException] = None


@dataclass
class PhaseExecutionSummary:
    total_phases: int
    successful_phases: int
    failed_phases: int
    total_duration: float
    results: List[PhaseExecutionResult] = field(default_factory=list)

    @classmethod
    def from_results(cls, results: List[PhaseExecutionResult]) -> PhaseExecutionSummary:
        successful = sum(1 for r in results if r.success)
        return cls(
            total_phases=len(results),
            successful_phases=successful,
            failed_phases=len(results) - successful,
            total_duration=sum(r.duration_seconds for r in results),
            results=list(results),
        )

    @property
    def success_rate(self) -> float:
        if self.total_phases == 0:
            return 100.0
        return (self.successful_phases / self.total_phases) * 100.0


class BootstrapPhase(ABC):
    """A named step of the fixed load graph."""

    name: str = 'phase'
    dependencies: tuple = ()

    def __init__(self):
        self.logger = logging.getLogger(f'hookloader.bootstrap.phases.{self.name}')

    @abstractmethod
    async def execute(self, context: LoadContext) -> Dict[str, Any]:
        """Run the phase. Returns metadata for the phase summary."""

    def __repr__(self) -> str:
        return f'<{type(self).__name__} name={self.name!r} after={list(self.dependencies)}>'
