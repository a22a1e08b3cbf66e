"""
Backend forwarder for Gateway.

Two modes share one pooled ``httpx.AsyncClient``:

- ``proxy``: transparent pass-through. Inbound headers (minus ``Host`` and
  framing headers) and the buffered body go out unchanged; the upstream
  status, headers (minus the CORS and hop-by-hop sets) and raw body bytes
  are streamed back.
- ``call_json``: a façade call. A JSON body goes out, the reply is decoded
  as JSON for reshaping. Undecodable replies yield ``None`` rather than an
  error.
"""

import time
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import httpx
from starlette.background import BackgroundTask
from starlette.responses import StreamingResponse

from shared.errors import BackendError
from shared.logging import get_logger
from shared.metrics import MetricsCollector

from ..domain.cors import BACKEND_CORS_HEADERS
from ..domain.pipeline import RequestContext

# The server re-frames the body itself.
HOP_BY_HOP_HEADERS = frozenset({"transfer-encoding", "connection", "keep-alive"})

EXCLUDED_REQUEST_HEADERS = frozenset({"host"}) | HOP_BY_HOP_HEADERS
EXCLUDED_RESPONSE_HEADERS = BACKEND_CORS_HEADERS | HOP_BY_HOP_HEADERS


@dataclass
class BackendReply:
    """Decoded reply from a façade backend call."""

    status_code: int
    body: Any = None

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400


def filter_request_headers(raw_headers: List[Tuple[bytes, bytes]]) -> List[Tuple[bytes, bytes]]:
    """Copy inbound headers except ``Host`` and framing headers, keeping repeated headers."""
    return [
        (key, value)
        for key, value in raw_headers
        if key.decode("latin-1").lower() not in EXCLUDED_REQUEST_HEADERS
    ]


def filter_response_headers(raw_headers: List[Tuple[bytes, bytes]]) -> List[Tuple[bytes, bytes]]:
    """Copy upstream headers except the CORS and hop-by-hop sets."""
    return [
        (key.lower(), value)
        for key, value in raw_headers
        if key.decode("latin-1").lower() not in EXCLUDED_RESPONSE_HEADERS
    ]


class BackendForwarder:
    """Issues outbound calls to the backends."""

    def __init__(self, client: httpx.AsyncClient, metrics: MetricsCollector):
        self.client = client
        self.metrics = metrics
        self.logger = get_logger("gateway.backend_forwarder")

    async def proxy(self, ctx: RequestContext, target_url: str, backend: str) -> StreamingResponse:
        """Forward the inbound request as-is and stream the reply back."""
        outbound = self.client.build_request(
            ctx.method,
            target_url,
            headers=filter_request_headers(ctx.request.headers.raw),
            content=ctx.body or None,
        )

        started = time.perf_counter()
        try:
            upstream = await self.client.send(outbound, stream=True)
        except httpx.HTTPError as exc:
            self.metrics.record_backend_request(backend, "error", time.perf_counter() - started)
            self.metrics.record_error("backend_unreachable")
            self.logger.error("Error forwarding request", backend=backend, url=target_url, error=str(exc))
            raise BackendError(f"Error forwarding request: {exc}")

        self.metrics.record_backend_request(backend, upstream.status_code, time.perf_counter() - started)
        self.logger.debug(
            "Backend responded",
            backend=backend,
            url=target_url,
            status_code=upstream.status_code,
        )

        response = StreamingResponse(
            upstream.aiter_raw(),
            status_code=upstream.status_code,
            background=BackgroundTask(upstream.aclose),
        )
        response.raw_headers.extend(filter_response_headers(upstream.headers.raw))
        return response

    async def call_json(self, method: str, url: str, payload: Optional[Any] = None,
                        backend: str = "backend_api") -> BackendReply:
        """Send a JSON request and decode the JSON reply."""
        request_kwargs = {}
        if payload is not None:
            request_kwargs["json"] = payload

        started = time.perf_counter()
        try:
            response = await self.client.request(method, url, **request_kwargs)
        except httpx.HTTPError as exc:
            self.metrics.record_backend_request(backend, "error", time.perf_counter() - started)
            self.metrics.record_error("backend_unreachable")
            self.logger.error("Backend API error", method=method, url=url, error=str(exc))
            raise BackendError("Failed to connect to backend API")

        self.metrics.record_backend_request(backend, response.status_code, time.perf_counter() - started)
        self.logger.debug("Backend API response", method=method, url=url, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError:
            body = None
        return BackendReply(status_code=response.status_code, body=body)
