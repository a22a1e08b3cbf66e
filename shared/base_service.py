"""
Base service class for Storefront Gateway services.
"""

from fastapi import FastAPI
from typing import Optional

from shared.config import GatewayConfig, get_config
from shared.logging import configure_logging, get_logger
from shared.metrics import get_metrics_collector


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, service_name: str, config: Optional[GatewayConfig] = None):
        self.service_name = service_name
        self.config = config if config is not None else get_config()

        # Configure logging
        configure_logging(service_name, self.config.log_level)
        self.logger = get_logger(service_name)
        self.metrics = get_metrics_collector(service_name)

        # Create FastAPI app
        self.app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application.

        Documentation routes are disabled: every path belongs to the
        services behind the gateway.
        """
        return FastAPI(
            title=f"{self.service_name.title()} Service",
            description=f"Storefront Gateway - {self.service_name.title()} Service",
            version="1.0.0",
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
        )

    def run(self):
        """Run the service."""
        import uvicorn

        if self.config.metrics_port:
            self.metrics.start_metrics_server(self.config.metrics_port)
            self.logger.info("Metrics exporter started", port=self.config.metrics_port)

        uvicorn.run(
            self.app,
            host="0.0.0.0",
            port=self.config.port,
            log_level=self.config.log_level.lower()
        )
