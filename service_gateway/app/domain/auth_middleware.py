"""
Authentication stage for Gateway.
"""

import hmac
from typing import Optional

from fastapi import Response
from fastapi.responses import JSONResponse

from shared.logging import get_logger

from .pipeline import PipelineStage, RequestContext

UNAUTHORIZED_MESSAGE = "Unauthorized: Invalid or missing API key"


class AuthMiddleware(PipelineStage):
    """API key authentication.

    With no key configured every request passes (fail-open). The rejection
    body is a bare ``{"error": ...}`` object, not the response envelope;
    existing clients rely on that shape.
    """

    name = "auth"

    def __init__(self, api_key: Optional[str]):
        self.api_key = api_key
        self.logger = get_logger("gateway.auth_middleware")

    async def on_request(self, ctx: RequestContext) -> Optional[Response]:
        if not self.api_key:
            return None

        provided_key = self.extract_api_key(ctx)
        if provided_key and self._matches(provided_key):
            return None

        self.logger.warning(
            "API key authentication failed",
            path=ctx.path,
            api_key=provided_key[:8] + "..." if provided_key else None,
        )
        return JSONResponse(status_code=401, content={"error": UNAUTHORIZED_MESSAGE})

    @staticmethod
    def extract_api_key(ctx: RequestContext) -> Optional[str]:
        """Header first, then the ``api_key`` query parameter."""
        return ctx.request.headers.get("X-API-Key") or ctx.request.query_params.get("api_key")

    def _matches(self, provided_key: str) -> bool:
        return hmac.compare_digest(provided_key.encode("utf-8"), self.api_key.encode("utf-8"))
