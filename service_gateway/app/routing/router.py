"""
Path router for the gateway.

Requests are classified by path prefix, first match wins:

====================  ===========  ====================================
prefix                backend      upstream path
====================  ===========  ====================================
``/api/gw/v1/``       backend API  façade, else ``/api/v1`` + remainder
``/rest/``            PostgREST    prefix ``/rest`` removed
``/api/``             backend API  prefix ``/api`` removed
``/mcp/health``       MCP          ``/health``
``/mcp/``             MCP          full path kept
``/worker/``          worker       prefix ``/worker`` removed
anything else         PostgREST    full path kept
====================  ===========  ====================================

The inbound query string is re-attached verbatim to every upstream URL.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Sequence

from fastapi import Response

from shared.config import GatewayConfig
from shared.logging import get_logger

from ..adapters.backend_forwarder import BackendForwarder
from ..domain.pipeline import RequestContext
from ..facade import BACKEND_API_VERSION_PREFIX, FACADE_PREFIX, FacadeTransformer


def strip_prefix(prefix: str) -> Callable[[str], str]:
    return lambda path: path[len(prefix):]


def keep_path(path: str) -> str:
    return path


def replace_with(target: str) -> Callable[[str], str]:
    return lambda path: target


@dataclass(frozen=True)
class RouteTarget:
    """One proxy route: a path prefix and where it is sent."""

    name: str
    prefix: str
    backend: str
    base_url: str
    rewrite: Callable[[str], str] = keep_path
    exact: bool = False

    def matches(self, path: str) -> bool:
        if self.exact:
            return path == self.prefix
        return path.startswith(self.prefix)

    def build_url(self, path: str, query: str = "") -> str:
        url = self.base_url + self.rewrite(path)
        if query:
            url = f"{url}?{query}"
        return url


def build_route_table(config: GatewayConfig) -> Sequence[RouteTarget]:
    """Proxy routes in match order; the façade prefix is handled first."""
    return (
        RouteTarget(
            name="backend_api_facade",
            prefix=FACADE_PREFIX,
            backend="backend_api",
            base_url=config.backend_api_url,
            rewrite=lambda path: BACKEND_API_VERSION_PREFIX + path[len("/api/gw/v1"):],
        ),
        RouteTarget(
            name="postgrest",
            prefix="/rest/",
            backend="postgrest",
            base_url=config.postgrest_url,
            rewrite=strip_prefix("/rest"),
        ),
        RouteTarget(
            name="backend_api",
            prefix="/api/",
            backend="backend_api",
            base_url=config.backend_api_url,
            rewrite=strip_prefix("/api"),
        ),
        RouteTarget(
            name="mcp_health",
            prefix="/mcp/health",
            backend="mcp",
            base_url=config.mcp_service_url,
            rewrite=replace_with("/health"),
            exact=True,
        ),
        RouteTarget(
            name="mcp",
            prefix="/mcp/",
            backend="mcp",
            base_url=config.mcp_service_url,
        ),
        RouteTarget(
            name="worker",
            prefix="/worker/",
            backend="worker",
            base_url=config.worker_service_url,
            rewrite=strip_prefix("/worker"),
        ),
    )


class PathRouter:
    """Terminal handler of the middleware chain."""

    def __init__(self, config: GatewayConfig, forwarder: BackendForwarder,
                 facade: FacadeTransformer):
        self.forwarder = forwarder
        self.facade = facade
        self.routes = build_route_table(config)
        self.default_route = RouteTarget(
            name="postgrest_default",
            prefix="/",
            backend="postgrest",
            base_url=config.postgrest_url,
        )
        self.logger = get_logger("gateway.router")

    def resolve(self, path: str) -> RouteTarget:
        for route in self.routes:
            if route.matches(path):
                return route
        return self.default_route

    async def route(self, ctx: RequestContext) -> Response:
        self.logger.debug("Gateway received", method=ctx.method, path=ctx.path)

        if ctx.path.startswith(FACADE_PREFIX):
            endpoint = self.facade.match(ctx.method, ctx.path)
            if endpoint is not None:
                ctx.route_name = f"facade.{endpoint.name}"
                return await self.facade.handle(ctx, endpoint)

        target = self.resolve(ctx.path)
        ctx.route_name = f"proxy.{target.name}"
        url = target.build_url(ctx.path, ctx.query_string)
        self.logger.debug("Proxying request", route=target.name, url=url)
        return await self.forwarder.proxy(ctx, url, target.backend)

    def describe(self) -> Dict[str, str]:
        """Routing summary for the startup log."""
        summary = {route.name: route.base_url for route in self.routes if route.name != "mcp_health"}
        summary["default"] = self.default_route.base_url
        return summary
