"""
Request metadata helpers used by the access log.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from fastapi import Request


def get_client_ip(request: Request) -> str:
    """Extract the caller IP from standard headers."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()
    if request.client:
        return request.client.host
    return "unknown"


@dataclass
class RequestLogEntry:
    """One access log record, emitted once per request."""

    timestamp: str
    method: str
    path: str
    status: int
    ip: str
    duration_ms: float
    request_id: Optional[str] = None
    user_agent: Optional[str] = None
    request_size: int = 0
    response_size: int = 0

    def as_log_fields(self) -> Dict[str, Any]:
        fields = asdict(self)
        if not fields["user_agent"]:
            fields.pop("user_agent")
        return fields
