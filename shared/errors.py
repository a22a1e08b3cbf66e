"""
Shared error handling for the Storefront Gateway.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel


class ErrorInfo(BaseModel):
    """Error block carried in the response envelope."""

    code: str
    message: str
    details: Optional[Any] = None

    def to_payload(self) -> Dict[str, Any]:
        """Serialise, leaving ``details`` out when there are none."""
        return self.model_dump(exclude_none=True)


class GatewayException(Exception):
    """Base exception for gateway request handling."""

    default_code = "INTERNAL_ERROR"
    default_status_code = 500

    def __init__(
        self,
        message: str,
        details: Optional[Any] = None,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.code = code or self.default_code
        self.message = message
        self.details = details
        self.status_code = status_code or self.default_status_code
        super().__init__(message)

    def to_error_info(self) -> ErrorInfo:
        """Convert to the envelope error block."""
        return ErrorInfo(code=self.code, message=self.message, details=self.details)


class ValidationError(GatewayException):
    """Request rejected locally before any backend call."""

    default_code = "VALIDATION_ERROR"
    default_status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Any] = None):
        super().__init__(message, details)


class BackendError(GatewayException):
    """Backend unreachable, or backend answered with an error status.

    ``code`` and ``status_code`` may carry the backend's own values; the
    gateway does not own that namespace.
    """

    default_code = "BACKEND_ERROR"
    default_status_code = 502

    def __init__(
        self,
        message: str = "Failed to connect to backend API",
        details: Optional[Any] = None,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, details, code=code, status_code=status_code)
