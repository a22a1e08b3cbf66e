"""
Generic façade transformer.

Runs one descriptor in three phases: validate the inbound request, call the
backend API, shape the reply into the success envelope. Backend error
replies are turned into error envelopes carrying the backend status.
"""

from typing import Optional, Sequence

from fastapi import Response

from shared.logging import get_logger

from ..adapters.backend_forwarder import BackendForwarder
from ..domain.envelope import envelope_response
from ..domain.pipeline import RequestContext
from .descriptors import FACADE_ENDPOINTS, FacadeEndpoint, FacadeRequest, match_endpoint
from .shaping import backend_error
from .validators import decode_json_object

BACKEND_API_VERSION_PREFIX = "/api/v1"


class FacadeTransformer:
    """Serves the façade endpoints on top of the backend API."""

    def __init__(self, forwarder: BackendForwarder, backend_api_url: str,
                 endpoints: Sequence[FacadeEndpoint] = FACADE_ENDPOINTS):
        self.forwarder = forwarder
        self.backend_api_url = backend_api_url
        self.endpoints = tuple(endpoints)
        self.logger = get_logger("gateway.facade")

    def match(self, method: str, path: str) -> Optional[FacadeEndpoint]:
        return match_endpoint(method, path, self.endpoints)

    async def handle(self, ctx: RequestContext, endpoint: FacadeEndpoint) -> Response:
        request = FacadeRequest(
            method=ctx.method,
            path=ctx.path,
            query=dict(ctx.request.query_params),
        )
        if endpoint.reads_body:
            request.body = decode_json_object(ctx.body)
        if endpoint.validate is not None:
            endpoint.validate(request)

        url = self.backend_api_url + BACKEND_API_VERSION_PREFIX + endpoint.backend_path(request)
        reply = await self.forwarder.call_json(
            endpoint.outbound_method(request),
            url,
            payload=request.body,
        )

        if reply.is_error:
            self.logger.info(
                "Backend API returned error",
                endpoint=endpoint.name,
                status_code=reply.status_code,
            )
            raise backend_error(reply.status_code, reply.body)

        return envelope_response(200, data=endpoint.shape(request, reply.body))
