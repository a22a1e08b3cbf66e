"""
CORS stage for the gateway.
"""

from typing import Optional

from fastapi import Response

from .pipeline import PipelineStage, RequestContext


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, PATCH, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-API-Key, Prefer",
    "Access-Control-Expose-Headers": "Content-Range, Content-Encoding, Content-Length",
}

# Backend CORS headers are dropped so they never contradict the ones above.
BACKEND_CORS_HEADERS = frozenset({
    "access-control-allow-origin",
    "access-control-allow-methods",
    "access-control-allow-headers",
    "access-control-expose-headers",
    "access-control-allow-credentials",
    "access-control-max-age",
})


class CorsStage(PipelineStage):
    """Applies the permissive CORS policy and answers pre-flight requests."""

    name = "cors"

    async def on_request(self, ctx: RequestContext) -> Optional[Response]:
        if ctx.method == "OPTIONS":
            return Response(status_code=200)
        return None

    async def on_response(self, ctx: RequestContext, response: Response) -> Response:
        for header, value in CORS_HEADERS.items():
            response.headers[header] = value
        return response
