"""
Ordered middleware chain for the gateway.

Each stage sees the request on the way in and the response on the way out.
A stage short-circuits by returning a response from ``on_request``; the
remaining stages and the handler are then skipped, while the stages already
entered still get their ``on_response`` hook, innermost first.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from fastapi import Request, Response

from shared.errors import ErrorInfo, GatewayException
from shared.logging import get_logger

from .envelope import envelope_response, error_response


@dataclass
class RequestContext:
    """Per-request state shared by the stages and the handler."""

    request: Request
    body: bytes = b""
    request_id: Optional[str] = None
    started_at: float = 0.0
    started_at_iso: str = ""
    route_name: str = "unmatched"
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.url.path

    @property
    def query_string(self) -> str:
        return self.request.url.query


Handler = Callable[[RequestContext], Awaitable[Response]]


class PipelineStage:
    """Base class for middleware stages."""

    name = "stage"

    async def on_request(self, ctx: RequestContext) -> Optional[Response]:
        """Return a response to stop the chain, or ``None`` to continue."""
        return None

    async def on_response(self, ctx: RequestContext, response: Response) -> Response:
        return response


class MiddlewareChain:
    """Runs the stages in order around a terminal handler."""

    def __init__(self, stages: Sequence[PipelineStage], handler: Handler):
        self.stages: List[PipelineStage] = list(stages)
        self.handler = handler
        self.logger = get_logger("gateway.pipeline")

    async def dispatch(self, request: Request) -> Response:
        ctx = RequestContext(request=request)
        entered: List[PipelineStage] = []
        response: Optional[Response] = None

        for stage in self.stages:
            entered.append(stage)
            response = await stage.on_request(ctx)
            if response is not None:
                self.logger.debug("Request short-circuited", stage=stage.name, path=ctx.path)
                break

        if response is None:
            response = await self._run_handler(ctx)

        for stage in reversed(entered):
            response = await stage.on_response(ctx, response)
        return response

    async def _run_handler(self, ctx: RequestContext) -> Response:
        try:
            return await self.handler(ctx)
        except GatewayException as exc:
            self.logger.warning(
                "Request failed",
                code=exc.code,
                message=exc.message,
                status_code=exc.status_code,
                path=ctx.path,
            )
            return error_response(exc)
        except Exception as exc:
            self.logger.error("Unhandled exception", error=str(exc), path=ctx.path, exc_info=True)
            return envelope_response(
                500,
                error=ErrorInfo(code="INTERNAL_ERROR", message="Internal server error"),
            )
