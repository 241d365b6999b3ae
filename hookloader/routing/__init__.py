from .router import BoundRoute, RouteTable, Router, normalize_route

__all__ = ['BoundRoute', 'RouteTable', 'Router', 'normalize_route']
