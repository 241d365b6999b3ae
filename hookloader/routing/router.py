from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional

from hookloader.bootstrap.exceptions import RoutingError
from hookloader.core.module_state import ModuleSet
from hookloader.core.registry import HandlerRegistry, RegistryMissingError

logger = logging.getLogger(__name__)


def normalize_route(route: str) -> str:
    """'get   /health' -> 'GET /health'; a bare path stays as is."""
    parts = route.split()
    if len(parts) == 2:
        return f'{parts[0].upper()} {parts[1]}'
    return ' '.join(parts)


@dataclass(frozen=True)
class BoundRoute:
    route: str
    target: str
    handler: Callable[..., Any]
    source: str


class RouteTable(Mapping):
    def __init__(self, routes: Optional[Dict[str, BoundRoute]] = None):
        self._routes: Dict[str, BoundRoute] = dict(routes or {})

    def __getitem__(self, route: str) -> BoundRoute:
        return self._routes[normalize_route(route)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def dispatch(self, route: str, *args: Any, **kwargs: Any) -> Any:
        """Call the handler bound to `route`. Awaitable results are returned as is."""
        try:
            bound = self[route]
        except KeyError:
            raise RoutingError(f"No route bound for '{route}'", route=route) from None
        return bound.handler(*args, **kwargs)


class Router:
    """
    Binds the routes table against the handler registry.

    Active hooks may contribute default routes through a `routes` attribute
    (route -> handler name in their own namespace). Routes from settings are
    applied afterwards and win on conflict.
    """

    def __init__(self, registry: HandlerRegistry, routes: Optional[Dict[str, str]] = None, module_set: Optional[ModuleSet] = None):
        self.registry = registry
        self.routes = dict(routes or {})
        self.module_set = module_set

    def load(self) -> RouteTable:
        bound: Dict[str, BoundRoute] = {}
        for route, target, source in self._iter_declared():
            key = normalize_route(route)
            try:
                handler = self.registry.resolve(target)
            except RegistryMissingError as e:
                raise RoutingError(f"Route '{key}' points at '{target}', which does not resolve: {e.args[0]}", route=key, target=target) from e
            if key in bound:
                logger.debug(f"Route '{key}' rebound from {bound[key].target} to {target}")
            bound[key] = BoundRoute(route=key, target=target, handler=handler, source=source)
        logger.info(f'✓ Bound {len(bound)} routes')
        return RouteTable(bound)

    def _iter_declared(self):
        if self.module_set is not None:
            for identity, hook in self.module_set.iter_active():
                for route, handler_name in (getattr(hook, 'routes', None) or {}).items():
                    yield route, f'{identity}.{handler_name}', identity
        for route, target in self.routes.items():
            yield route, target, 'config'
