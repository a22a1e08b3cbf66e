"""
Adapters package for the Gateway Service.

Contains the HTTP forwarder used for every outbound backend call. The
adapter encapsulates:

- Header filtering in both directions
- The shared, pooled outbound client and its timeout
- Mapping transport failures to shared errors

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .backend_forwarder import BackendForwarder, BackendReply

__all__ = [
    "BackendForwarder",
    "BackendReply",
]
