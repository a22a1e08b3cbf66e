"""
Façade endpoints for the Gateway Service.

Cart, checkout, deposit-session, deposit-plan and order-status operations
are served here on top of the backend API, with validated input and
enveloped, normalised output.
"""

from .descriptors import FACADE_ENDPOINTS, FACADE_PREFIX, FacadeEndpoint, FacadeRequest
from .transformer import BACKEND_API_VERSION_PREFIX, FacadeTransformer

__all__ = [
    "BACKEND_API_VERSION_PREFIX",
    "FACADE_ENDPOINTS",
    "FACADE_PREFIX",
    "FacadeEndpoint",
    "FacadeRequest",
    "FacadeTransformer",
]
