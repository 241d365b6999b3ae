"""
Exception classes for the hookloader bootstrap system.

Every error raised while loading derives from BootstrapError so callers can
catch the whole family at once. Errors travel up through the task graph
unchanged; nothing here is retried.
"""

from typing import List, Optional, Sequence


class BootstrapError(RuntimeError):
    """
    Base exception for all bootstrap-related errors.

    Carries optional phase and hook identity so log lines and callback
    consumers can tell where a load went wrong.
    """

    def __init__(self, message: str, component_id: Optional[str] = None, phase: Optional[str] = None):
        super().__init__(message)
        self.component_id = component_id
        self.phase = phase

    def __str__(self) -> str:
        base_msg = super().__str__()

        context_parts = []
        if self.phase:
            context_parts.append(f"phase={self.phase}")
        if self.component_id:
            context_parts.append(f"component={self.component_id}")

        if context_parts:
            return f"{base_msg} ({', '.join(context_parts)})"
        return base_msg


class ConfigurationError(BootstrapError):
    """
    Raised when configuration is malformed.

    This includes an invalid `load_hooks` allow-list, a hook definition that
    cannot be turned into a hook, settings that fail validation, or a hook
    dependency on a hook that is unknown or disabled.
    """
    pass


class ModuleInitializationError(BootstrapError):
    """
    Raised when a hook's initialize() fails.

    The original exception is chained as __cause__ and kept on
    `original_error`.
    """

    def __init__(self, message: str, component_id: str, original_error: Optional[BaseException] = None):
        super().__init__(message, component_id=component_id, phase='modules')
        self.original_error = original_error


class ReadinessTimeoutError(BootstrapError):
    """
    Raised when the readiness watchdog fires before every hook is ready.

    `stalled` lists the identities that never signalled readiness.
    """

    def __init__(self, message: str, stalled: Sequence[str], timeout_ms: Optional[float] = None, phase: Optional[str] = None):
        super().__init__(message, phase=phase)
        self.stalled: List[str] = sorted(stalled)
        self.timeout_ms = timeout_ms

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.stalled:
            return f"{base_msg}\nHooks that never became ready:\n  - " + "\n  - ".join(self.stalled)
        return base_msg


class GraphError(BootstrapError):
    """
    Raised when a task graph cannot make progress.

    Covers dependencies on undeclared tasks, dependency cycles and hooks whose
    initialize() exceeds the configured initialize timeout.
    """
    pass


class RoutingError(BootstrapError):
    """Raised when a route target cannot be resolved against the registry."""

    def __init__(self, message: str, route: Optional[str] = None, target: Optional[str] = None):
        super().__init__(message, phase='routing')
        self.route = route
        self.target = target


__all__ = [
    'BootstrapError', 'ConfigurationError', 'ModuleInitializationError',
    'ReadinessTimeoutError', 'GraphError', 'RoutingError',
]
