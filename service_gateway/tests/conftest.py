"""
Shared fixtures for Gateway tests.
"""

import pytest
from typing import Dict, Optional
from fastapi import Request

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.config import GatewayConfig
from shared.metrics import MetricsCollector
from service_gateway.app.domain.pipeline import RequestContext


POSTGREST_URL = "http://postgrest.test"
BACKEND_API_URL = "http://backend.test"
MCP_URL = "http://mcp.test"
WORKER_URL = "http://worker.test"


@pytest.fixture
def gateway_config():
    """Gateway configuration with authentication disabled."""
    return GatewayConfig(
        postgrest_url=POSTGREST_URL,
        backend_api_url=BACKEND_API_URL,
        mcp_service_url=MCP_URL,
        worker_service_url=WORKER_URL,
        api_key=None,
        metrics_port=None,
    )


@pytest.fixture
def secured_config(gateway_config):
    """Gateway configuration requiring an API key."""
    return gateway_config.model_copy(update={"api_key": "secret-key-123"})


@pytest.fixture
def metrics():
    """Metrics collector on its own registry."""
    return MetricsCollector("gateway")


@pytest.fixture
def make_request():
    """Factory for ASGI requests built without a server."""

    def _make_request(
        method: str = "GET",
        path: str = "/",
        query_string: str = "",
        headers: Optional[Dict[str, str]] = None,
        body: bytes = b"",
        client=("127.0.0.1", 50000),
    ) -> Request:
        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "path": path,
            "raw_path": path.encode(),
            "root_path": "",
            "query_string": query_string.encode(),
            "headers": [
                (key.lower().encode("latin-1"), value.encode("latin-1"))
                for key, value in (headers or {}).items()
            ],
            "client": client,
            "server": ("gateway.test", 80),
        }

        async def receive():
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make_request


@pytest.fixture
def make_context(make_request):
    """Factory for request contexts with the body already buffered."""

    def _make_context(method: str = "GET", path: str = "/", query_string: str = "",
                      headers: Optional[Dict[str, str]] = None, body: bytes = b"") -> RequestContext:
        request = make_request(method, path, query_string, headers, body)
        return RequestContext(request=request, body=body)

    return _make_context
