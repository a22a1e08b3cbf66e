"""
Tests for the middleware chain.
"""

import json
import pytest
from fastapi import Response

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.errors import BackendError
from service_gateway.app.domain.pipeline import MiddlewareChain, PipelineStage


class RecordingStage(PipelineStage):
    """Stage that records the order of its hooks."""

    def __init__(self, name, calls, short_circuit=None):
        self.name = name
        self.calls = calls
        self.short_circuit = short_circuit

    async def on_request(self, ctx):
        self.calls.append(f"{self.name}:request")
        return self.short_circuit

    async def on_response(self, ctx, response):
        self.calls.append(f"{self.name}:response")
        response.headers[f"X-Seen-{self.name}"] = "1"
        return response


class TestMiddlewareChain:
    """Test cases for MiddlewareChain."""

    @pytest.fixture
    def calls(self):
        return []

    @pytest.mark.asyncio
    async def test_stages_wrap_handler_in_order(self, calls, make_request):
        """Before-hooks run in order, after-hooks in reverse."""

        async def handler(ctx):
            calls.append("handler")
            return Response("ok")

        chain = MiddlewareChain(
            [RecordingStage("a", calls), RecordingStage("b", calls), RecordingStage("c", calls)],
            handler,
        )

        response = await chain.dispatch(make_request())

        assert calls == [
            "a:request", "b:request", "c:request",
            "handler",
            "c:response", "b:response", "a:response",
        ]
        assert response.body == b"ok"

    @pytest.mark.asyncio
    async def test_short_circuit_skips_inner_stages(self, calls, make_request):
        """Entered stages still see the short-circuit response."""

        async def handler(ctx):
            calls.append("handler")
            return Response("ok")

        chain = MiddlewareChain(
            [
                RecordingStage("outer", calls),
                RecordingStage("gate", calls, short_circuit=Response("denied", status_code=401)),
                RecordingStage("inner", calls),
            ],
            handler,
        )

        response = await chain.dispatch(make_request())

        assert response.status_code == 401
        assert calls == ["outer:request", "gate:request", "gate:response", "outer:response"]
        assert response.headers["X-Seen-outer"] == "1"
        assert "X-Seen-inner" not in response.headers

    @pytest.mark.asyncio
    async def test_gateway_exception_becomes_envelope(self, calls, make_request):
        """Handler errors are rendered as error envelopes."""

        async def handler(ctx):
            raise BackendError("Cart not found", code="NOT_FOUND", status_code=404)

        chain = MiddlewareChain([RecordingStage("a", calls)], handler)

        response = await chain.dispatch(make_request())

        assert response.status_code == 404
        assert json.loads(response.body) == {
            "data": None,
            "error": {"code": "NOT_FOUND", "message": "Cart not found"},
        }
        assert calls == ["a:request", "a:response"]

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_internal_error(self, make_request):
        """Unknown failures do not leak their message."""

        async def handler(ctx):
            raise RuntimeError("database password is hunter2")

        chain = MiddlewareChain([], handler)

        response = await chain.dispatch(make_request())

        assert response.status_code == 500
        assert json.loads(response.body)["error"] == {
            "code": "INTERNAL_ERROR",
            "message": "Internal server error",
        }
