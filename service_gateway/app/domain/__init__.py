"""
Domain utilities for the Gateway Service.

Includes the middleware chain and its stages, the response envelope codec
and request metadata helpers that do not belong to adapters or routing.
"""

from .pipeline import MiddlewareChain, PipelineStage, RequestContext
from .cors import CorsStage
from .request_logging import RequestLoggingStage
from .auth_middleware import AuthMiddleware

__all__ = [
    "AuthMiddleware",
    "CorsStage",
    "MiddlewareChain",
    "PipelineStage",
    "RequestContext",
    "RequestLoggingStage",
]
