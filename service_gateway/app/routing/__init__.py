"""
Routing for the Gateway Service.

Maps inbound paths to a façade endpoint or to one of the proxied backends.
"""

from .router import PathRouter, RouteTarget, build_route_table

__all__ = [
    "PathRouter",
    "RouteTarget",
    "build_route_table",
]
