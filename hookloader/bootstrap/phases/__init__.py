from .base_phase import BootstrapPhase, PhaseExecutionResult, PhaseExecutionSummary
from .config_phase import ConfigPhase
from .modules_phase import ModulesPhase
from .registry_phase import RegistryPhase
from .routing_phase import RoutingPhase

__all__ = [
    'BootstrapPhase',
    'PhaseExecutionResult',
    'PhaseExecutionSummary',
    'ConfigPhase',
    'ModulesPhase',
    'RegistryPhase',
    'RoutingPhase',
]


def default_phases(config_loader=None):
    """The fixed load graph, in dependency order."""
    return [ConfigPhase(config_loader), ModulesPhase(), RegistryPhase(), RoutingPhase()]
