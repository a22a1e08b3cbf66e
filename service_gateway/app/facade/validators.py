"""
Input validation for façade endpoints.

Validators raise ``ValidationError``; nothing invalid reaches a backend.
"""

import json
from typing import Any, Dict

from shared.errors import ValidationError

CART_ITEM_SOURCES = ("shopify", "external")


def decode_json_object(raw: bytes) -> Dict[str, Any]:
    """Decode a request body that must be a JSON object."""
    try:
        body = json.loads(raw)
    except ValueError:
        raise ValidationError("Invalid request body")
    if not isinstance(body, dict):
        raise ValidationError("Invalid request body")
    return body


def require_string(body: Dict[str, Any], field: str) -> str:
    value = body.get(field)
    if not isinstance(value, str):
        raise ValidationError(f"{field} is required")
    return value


def validate_cart_item(request) -> None:
    """``source`` decides which identifier the item needs."""
    body = request.body
    source = body.get("source")
    if not isinstance(source, str) or source not in CART_ITEM_SOURCES:
        raise ValidationError("source must be 'shopify' or 'external'")

    if source == "external":
        if not isinstance(body.get("externalId"), str):
            raise ValidationError("externalId is required for external items")
    elif not isinstance(body.get("variantId"), str):
        raise ValidationError("variantId is required for shopify items")


def validate_cart_line(request) -> None:
    require_string(request.body, "cartId")
    require_string(request.body, "lineId")


def validate_cart_id(request) -> None:
    require_string(request.body, "cartId")


def validate_cart_query(request) -> None:
    if not request.query.get("cartId"):
        raise ValidationError("cartId query parameter is required")
