"""
Access logging stage for the gateway.
"""

import time
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from fastapi import Response
from starlette.responses import StreamingResponse

from shared.logging import clear_context, get_logger, set_request_id
from shared.metrics import MetricsCollector

from .pipeline import PipelineStage, RequestContext
from .request_metadata import RequestLogEntry, get_client_ip


class RequestLoggingStage(PipelineStage):
    """Buffers the request body, times the request and emits one access log line.

    For streamed responses the record is written once the last chunk has been
    sent, so ``response_size`` is the number of bytes actually written.
    """

    name = "logging"

    def __init__(self, metrics: MetricsCollector):
        self.metrics = metrics
        self.logger = get_logger("gateway.access")

    async def on_request(self, ctx: RequestContext) -> Optional[Response]:
        ctx.started_at = time.perf_counter()
        ctx.started_at_iso = datetime.now(timezone.utc).isoformat(timespec="seconds")
        ctx.request_id = set_request_id(ctx.request.headers.get("X-Request-ID"))
        # Starlette caches the body on the request, so later reads see the same bytes.
        ctx.body = await ctx.request.body()
        return None

    async def on_response(self, ctx: RequestContext, response: Response) -> Response:
        if ctx.request_id:
            response.headers["X-Request-ID"] = ctx.request_id

        if isinstance(response, StreamingResponse):
            response.body_iterator = self._count_streamed(ctx, response.status_code, response.body_iterator)
        else:
            self._emit(ctx, response.status_code, len(response.body or b""))
        return response

    async def _count_streamed(self, ctx: RequestContext, status_code: int,
                              iterator: AsyncIterator) -> AsyncIterator:
        written = 0
        try:
            async for chunk in iterator:
                written += len(chunk)
                yield chunk
        finally:
            self._emit(ctx, status_code, written)

    def _emit(self, ctx: RequestContext, status_code: int, response_size: int) -> None:
        duration = time.perf_counter() - ctx.started_at
        entry = RequestLogEntry(
            timestamp=ctx.started_at_iso,
            method=ctx.method,
            path=ctx.path,
            status=status_code,
            ip=get_client_ip(ctx.request),
            duration_ms=round(duration * 1000, 2),
            request_id=ctx.request_id,
            user_agent=ctx.request.headers.get("User-Agent"),
            request_size=len(ctx.body),
            response_size=response_size,
        )
        self.metrics.record_http_request(ctx.method, ctx.route_name, status_code, duration)
        try:
            self.logger.info("HTTP request", **entry.as_log_fields())
        except (TypeError, ValueError):
            # Unencodable log fields never affect the response.
            pass
        finally:
            clear_context()
