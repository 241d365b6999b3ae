import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


class RegistryMissingError(KeyError):
    def __init__(self, key: str, message: Optional[str] = None, available: Optional[List[str]] = None):
        default_message = f"'{key}' not found in the handler registry."
        if available:
            sorted_keys = sorted(available)
            default_message += f" Available namespaces ({len(sorted_keys)} total): {', '.join(sorted_keys)}"
        super().__init__(message if message is not None else default_message)
        self.key = key
        self.available = available or []


class HandlerRegistry(Mapping):
    """
    Handlers exposed by hooks, namespaced by hook identity.

    `registry['health']['status']` and `registry.resolve('health.status')`
    return the same callable.
    """

    def __init__(self, namespaces: Optional[Dict[str, Dict[str, Callable[..., Any]]]] = None):
        self._namespaces: Dict[str, Dict[str, Callable[..., Any]]] = dict(namespaces or {})

    def __getitem__(self, identity: str) -> Dict[str, Callable[..., Any]]:
        if identity not in self._namespaces:
            raise RegistryMissingError(identity, available=list(self._namespaces))
        return self._namespaces[identity]

    def __iter__(self) -> Iterator[str]:
        return iter(self._namespaces)

    def __len__(self) -> int:
        return len(self._namespaces)

    def register(self, identity: str, middleware: Dict[str, Callable[..., Any]]) -> None:
        if identity in self._namespaces:
            logger.debug(f"Registry namespace '{identity}' overwritten (last write wins)")
        self._namespaces[identity] = middleware

    def resolve(self, target: str) -> Callable[..., Any]:
        """Look up a handler by its dotted `identity.handler` target."""
        identity, sep, handler_name = target.partition('.')
        if not sep or not identity or not handler_name:
            raise RegistryMissingError(target, message=f"Handler target '{target}' must look like 'identity.handler'")
        namespace = self[identity]
        if handler_name not in namespace:
            raise RegistryMissingError(
                target,
                message=f"Hook '{identity}' exposes no handler '{handler_name}' (has: {', '.join(sorted(namespace)) or 'none'})",
            )
        return namespace[handler_name]

    def as_dict(self) -> Dict[str, Dict[str, Callable[..., Any]]]:
        return {identity: dict(handlers) for identity, handlers in self._namespaces.items()}

    def __repr__(self) -> str:
        summary = {identity: sorted(handlers) for identity, handlers in self._namespaces.items()}
        return f"HandlerRegistry({summary})"
