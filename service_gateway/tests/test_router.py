"""
Tests for the path router.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_gateway.app.facade import FacadeTransformer
from service_gateway.app.routing import PathRouter


class TestPathRouter:
    """Test cases for PathRouter."""

    @pytest.fixture
    def forwarder(self):
        forwarder = MagicMock()
        forwarder.proxy = AsyncMock(return_value="proxied")
        return forwarder

    @pytest.fixture
    def facade(self, forwarder, gateway_config):
        facade = FacadeTransformer(forwarder, gateway_config.backend_api_url)
        facade.handle = AsyncMock(return_value="facade")
        return facade

    @pytest.fixture
    def router(self, gateway_config, forwarder, facade):
        return PathRouter(gateway_config, forwarder, facade)

    @pytest.mark.parametrize("path,query,expected_url,backend", [
        ("/rest/products", "select=*", "http://postgrest.test/products?select=*", "postgrest"),
        ("/api/v1/cart/items", "", "http://backend.test/v1/cart/items", "backend_api"),
        ("/mcp/health", "", "http://mcp.test/health", "mcp"),
        ("/mcp/tools/list", "", "http://mcp.test/mcp/tools/list", "mcp"),
        ("/mcp/health/deep", "", "http://mcp.test/mcp/health/deep", "mcp"),
        ("/worker/jobs/7", "", "http://worker.test/jobs/7", "worker"),
        ("/products", "id=eq.1", "http://postgrest.test/products?id=eq.1", "postgrest"),
        ("/", "", "http://postgrest.test/", "postgrest"),
        ("/restaurants", "", "http://postgrest.test/restaurants", "postgrest"),
        ("/api/gw/v1/unknown/thing", "a=b", "http://backend.test/api/v1/unknown/thing?a=b", "backend_api"),
    ])
    @pytest.mark.asyncio
    async def test_proxy_targets(self, router, forwarder, make_context, path, query, expected_url, backend):
        """Each prefix is forwarded to its backend with the right path."""
        ctx = make_context(path=path, query_string=query)

        result = await router.route(ctx)

        assert result == "proxied"
        forwarder.proxy.assert_awaited_once_with(ctx, expected_url, backend)

    @pytest.mark.asyncio
    async def test_facade_endpoint_handled_by_facade(self, router, facade, forwarder, make_context):
        """Known façade endpoints never reach the proxy."""
        ctx = make_context(method="POST", path="/api/gw/v1/cart/items")

        result = await router.route(ctx)

        assert result == "facade"
        assert ctx.route_name == "facade.cart_add_item"
        forwarder.proxy.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_facade_method_mismatch_falls_through(self, router, forwarder, make_context):
        """Unclaimed methods on façade paths go to the backend API."""
        ctx = make_context(method="PATCH", path="/api/gw/v1/cart/items", query_string="x=1")

        await router.route(ctx)

        forwarder.proxy.assert_awaited_once_with(
            ctx, "http://backend.test/api/v1/cart/items?x=1", "backend_api",
        )
        assert ctx.route_name == "proxy.backend_api_facade"

    @pytest.mark.asyncio
    async def test_get_cart_items_is_not_get_cart(self, router, forwarder, make_context):
        """GET on the cart items path is proxied, not treated as get-cart."""
        ctx = make_context(method="GET", path="/api/gw/v1/cart/items")

        await router.route(ctx)

        forwarder.proxy.assert_awaited_once()

    def test_resolve_default(self, router):
        """Unknown prefixes resolve to PostgREST."""
        assert router.resolve("/anything").backend == "postgrest"
        assert router.resolve("/anything").name == "postgrest_default"

    def test_describe(self, router):
        """Startup summary names every backend."""
        summary = router.describe()

        assert summary["postgrest"] == "http://postgrest.test"
        assert summary["mcp"] == "http://mcp.test"
        assert summary["worker"] == "http://worker.test"
        assert summary["default"] == "http://postgrest.test"
