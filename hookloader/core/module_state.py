# hookloader/core/module_state.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Enabled:
    definition: Any

    @property
    def active(self) -> bool:
        return True


@dataclass(frozen=True)
class Disabled:
    """A hook that was deliberately excluded. The definition is kept for diagnostics."""
    definition: Optional[Any] = None
    reason: str = 'disabled'

    @property
    def active(self) -> bool:
        return False


ModuleState = Union[Enabled, Disabled]


class ModuleSet(Mapping):
    """
    Resolved hooks for one load, keyed by identity.

    Iteration follows resolution order: defaults first, then overrides that
    introduced new identities.
    """

    def __init__(self, states: Optional[Dict[str, ModuleState]] = None, unknown: Optional[List[str]] = None):
        self._states: Dict[str, ModuleState] = dict(states or {})
        self._unknown: List[str] = list(unknown or [])

    def __getitem__(self, identity: str) -> ModuleState:
        return self._states[identity]

    def __iter__(self) -> Iterator[str]:
        return iter(self._states)

    def __len__(self) -> int:
        return len(self._states)

    @property
    def unknown(self) -> List[str]:
        """Allow-list names that matched no known hook."""
        return list(self._unknown)

    def is_active(self, identity: str) -> bool:
        state = self._states.get(identity)
        return state is not None and state.active

    def iter_active(self) -> Iterator[Tuple[str, Any]]:
        for identity, state in self._states.items():
            if isinstance(state, Enabled):
                yield identity, state.definition

    def active(self) -> Dict[str, Any]:
        return dict(self.iter_active())

    def disabled(self) -> List[str]:
        return [identity for identity, state in self._states.items() if isinstance(state, Disabled)]

    def get_hook(self, identity: str) -> Any:
        state = self._states.get(identity)
        if not isinstance(state, Enabled):
            raise KeyError(f"Hook '{identity}' is not active (known: {sorted(self._states)})")
        return state.definition

    def __repr__(self) -> str:
        return f"ModuleSet(active={list(self.active())}, disabled={self.disabled()})"
