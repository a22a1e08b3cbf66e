"""
Declarative table of façade endpoints.

Each entry says which inbound requests it claims, how to validate them,
where the backend call goes and how the reply is shaped. Entries are
matched in table order; the first claim wins.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple
from urllib.parse import quote

from shared.errors import ValidationError

from . import shaping, validators

FACADE_PREFIX = "/api/gw/v1/"


@dataclass
class FacadeRequest:
    """Inbound façade call after decoding."""

    method: str
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    body: Optional[Dict[str, Any]] = None

    @property
    def segments(self) -> List[str]:
        return self.path[len(FACADE_PREFIX):].split("/")

    def path_id(self, name: str) -> str:
        """Percent-encoded identifier following the resource segment."""
        segments = self.segments
        if len(segments) < 2 or not segments[1]:
            raise ValidationError(f"{name} is required")
        return quote(segments[1], safe="")


@dataclass(frozen=True)
class FacadeEndpoint:
    """One façade operation."""

    name: str
    methods: FrozenSet[str]
    prefix: str
    backend_path: Callable[[FacadeRequest], str]
    shape: Callable[[FacadeRequest, Any], Any] = shaping.passthrough
    validate: Optional[Callable[[FacadeRequest], None]] = None
    reads_body: bool = False
    backend_method: Optional[str] = None
    path_contains: Optional[str] = None
    excluded_prefixes: Tuple[str, ...] = ()

    def matches(self, method: str, path: str) -> bool:
        if method not in self.methods:
            return False
        relative = path[len(FACADE_PREFIX):] if path.startswith(FACADE_PREFIX) else None
        if relative is None:
            return False
        if not relative.startswith(self.prefix):
            return False
        if any(relative.startswith(excluded) for excluded in self.excluded_prefixes):
            return False
        if self.path_contains is not None and self.path_contains not in path:
            return False
        return True

    def outbound_method(self, request: FacadeRequest) -> str:
        return self.backend_method or request.method


def _static(path: str) -> Callable[[FacadeRequest], str]:
    return lambda request: path


FACADE_ENDPOINTS: Tuple[FacadeEndpoint, ...] = (
    FacadeEndpoint(
        name="cart_add_item",
        methods=frozenset({"POST"}),
        prefix="cart/items",
        backend_path=_static("/cart/items"),
        shape=shaping.cart_from_backend,
        validate=validators.validate_cart_item,
        reads_body=True,
    ),
    FacadeEndpoint(
        name="cart_update_item",
        methods=frozenset({"PUT"}),
        prefix="cart/items",
        backend_path=_static("/cart/items"),
        shape=shaping.cart_from_request_body,
        validate=validators.validate_cart_line,
        reads_body=True,
    ),
    FacadeEndpoint(
        name="cart_remove_item",
        methods=frozenset({"DELETE"}),
        prefix="cart/items",
        backend_path=_static("/cart/items"),
        shape=shaping.cart_from_request_body,
        validate=validators.validate_cart_line,
        reads_body=True,
    ),
    FacadeEndpoint(
        name="cart_get",
        methods=frozenset({"GET"}),
        prefix="cart",
        backend_path=lambda request: "/cart/" + quote(request.query["cartId"], safe=""),
        shape=shaping.cart_from_query,
        validate=validators.validate_cart_query,
        excluded_prefixes=("cart/items",),
    ),
    FacadeEndpoint(
        name="cart_checkout",
        methods=frozenset({"POST"}),
        prefix="cart/checkout",
        backend_path=_static("/cart/checkout"),
        validate=validators.validate_cart_id,
        reads_body=True,
    ),
    FacadeEndpoint(
        name="deposit_session_create_from_cart",
        methods=frozenset({"POST"}),
        prefix="deposit-sessions/create-from-cart",
        backend_path=_static("/deposit-sessions"),
        shape=shaping.deposit_session_created,
        validate=validators.validate_cart_id,
        reads_body=True,
    ),
    FacadeEndpoint(
        name="deposit_session_checkout",
        methods=frozenset({"POST"}),
        prefix="deposit-sessions/",
        path_contains="/checkout",
        backend_path=lambda request: (
            "/deposit-sessions/" + request.path_id("sessionId") + "/checkout"
        ),
        backend_method="POST",
    ),
    FacadeEndpoint(
        name="deposit_session_get",
        methods=frozenset({"GET"}),
        prefix="deposit-sessions/",
        backend_path=lambda request: "/deposit-sessions/" + request.path_id("sessionId"),
        shape=shaping.wrap_session,
    ),
    FacadeEndpoint(
        name="deposit_plan_default",
        methods=frozenset({"GET"}),
        prefix="deposit-plans/default",
        backend_path=_static("/deposit-plans/default"),
    ),
    FacadeEndpoint(
        name="deposit_plan_get",
        methods=frozenset({"GET"}),
        prefix="deposit-plans/",
        backend_path=lambda request: "/deposit-plans/" + request.path_id("planId"),
    ),
    FacadeEndpoint(
        name="deposit_plan_list",
        methods=frozenset({"GET"}),
        prefix="deposit-plans",
        backend_path=_static("/deposit-plans"),
    ),
    FacadeEndpoint(
        name="order_status",
        methods=frozenset({"GET"}),
        prefix="orders/",
        backend_path=lambda request: "/orders/" + request.path_id("orderId"),
    ),
)


def match_endpoint(method: str, path: str,
                   endpoints: Tuple[FacadeEndpoint, ...] = FACADE_ENDPOINTS) -> Optional[FacadeEndpoint]:
    """First endpoint claiming ``method`` and ``path``, or ``None``."""
    for endpoint in endpoints:
        if endpoint.matches(method, path):
            return endpoint
    return None
