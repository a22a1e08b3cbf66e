"""
API Gateway service for the Storefront.
"""

import sys
import os
from typing import Optional

import httpx
from fastapi import Request

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.base_service import BaseService
from shared.config import GatewayConfig
from service_gateway.app.adapters import BackendForwarder
from service_gateway.app.domain import (
    AuthMiddleware,
    CorsStage,
    MiddlewareChain,
    RequestLoggingStage,
)
from service_gateway.app.facade import FacadeTransformer
from service_gateway.app.routing import PathRouter

PROXIED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class GatewayService(BaseService):
    """API Gateway service implementation."""

    def __init__(self, config: Optional[GatewayConfig] = None,
                 http_client: Optional[httpx.AsyncClient] = None):
        super().__init__("gateway", config)

        # One pooled client for every backend; backend redirects are followed
        self.http_client = http_client or httpx.AsyncClient(
            timeout=self.config.backend_timeout_seconds,
            follow_redirects=True,
        )
        self.forwarder = BackendForwarder(self.http_client, self.metrics)
        self.facade = FacadeTransformer(self.forwarder, self.config.backend_api_url)
        self.router = PathRouter(self.config, self.forwarder, self.facade)
        self.pipeline = MiddlewareChain(
            [
                CorsStage(),
                RequestLoggingStage(self.metrics),
                AuthMiddleware(self.config.api_key),
            ],
            self.router.route,
        )

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.http_client.aclose()

        self._setup_gateway_routes()
        self._log_startup()

        # Expose service instance via app state for introspection/testing
        self.app.state.gateway_service = self

    def _setup_gateway_routes(self):
        """Send every path and method through the middleware chain."""

        @self.app.api_route("/{full_path:path}", methods=PROXIED_METHODS, include_in_schema=False)
        async def gateway(request: Request, full_path: str):
            return await self.pipeline.dispatch(request)

    def _log_startup(self):
        self.logger.info(
            "Gateway configured",
            port=self.config.port,
            routes=self.router.describe(),
            metrics_port=self.config.metrics_port,
        )
        if not self.config.auth_enabled:
            self.logger.warning("API_KEY not set, authentication disabled")


def create_app(config: Optional[GatewayConfig] = None):
    """Create FastAPI application."""
    service = GatewayService(config)
    return service.app


def main():
    service = GatewayService()
    service.run()


if __name__ == "__main__":
    main()
