"""
Response envelope codec.

Every façade and gateway-generated response uses ``{"data": ..., "error": ...}``
with both keys always present.
"""

from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shared.errors import ErrorInfo, GatewayException


class ResponseEnvelope(BaseModel):
    """Uniform response wrapper."""

    data: Any = None
    error: Optional[ErrorInfo] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "data": self.data,
            "error": self.error.to_payload() if self.error is not None else None,
        }


def envelope_response(
    status_code: int,
    data: Any = None,
    error: Optional[ErrorInfo] = None,
) -> JSONResponse:
    """Render an envelope as a JSON response."""
    envelope = ResponseEnvelope(data=data, error=error)
    return JSONResponse(status_code=status_code, content=envelope.to_payload())


def error_response(exc: GatewayException) -> JSONResponse:
    """Render a gateway exception as an error envelope."""
    return envelope_response(exc.status_code, error=exc.to_error_info())
