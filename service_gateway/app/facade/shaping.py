"""
Response shaping for façade endpoints.

Each shaper takes the façade request and the decoded backend body and
returns the ``data`` member of the success envelope.
"""

from typing import Any, Dict, Mapping

from shared.errors import BackendError

from .normalization import DEPOSIT_SESSION_ALIASES, reconcile_fields

MISSING_ERROR_MESSAGE = "An error occurred"
DEPOSIT_SESSION_PAGE_PREFIX = "/deposit-session/"


def _as_mapping(body: Any) -> Mapping[str, Any]:
    return body if isinstance(body, dict) else {}


def backend_error(status_code: int, body: Any) -> BackendError:
    """Translate an error reply into a ``BackendError`` keeping the backend status."""
    payload = _as_mapping(body)

    code = payload.get("code")
    if not isinstance(code, str):
        code = None

    message = payload.get("message")
    if not isinstance(message, str):
        fallback = payload.get("error")
        if isinstance(fallback, str):
            message = fallback
        elif message is not None:
            message = str(message)
        else:
            message = MISSING_ERROR_MESSAGE

    return BackendError(
        message=message,
        details=payload.get("details"),
        code=code,
        status_code=status_code,
    )


def passthrough(request, body: Any) -> Any:
    return body


def cart_from_backend(request, body: Any) -> Dict[str, Any]:
    payload = _as_mapping(body)
    return {"cartId": payload.get("cartId"), "cart": payload.get("cart")}


def cart_from_request_body(request, body: Any) -> Dict[str, Any]:
    return {"cartId": request.body["cartId"], "cart": body}


def cart_from_query(request, body: Any) -> Dict[str, Any]:
    return {"cartId": request.query["cartId"], "cart": body}


def wrap_session(request, body: Any) -> Dict[str, Any]:
    return {"session": body}


def deposit_session_created(request, body: Any) -> Any:
    """Give a created deposit session a stable snake_case shape.

    Replies without a string ``session_id`` are returned untouched.
    """
    payload = _as_mapping(body)
    session_id = payload.get("session_id")
    if not isinstance(session_id, str):
        return body

    shaped = {
        "deposit_session_url": DEPOSIT_SESSION_PAGE_PREFIX + session_id,
        "session_id": session_id,
    }
    shaped.update(reconcile_fields(payload, DEPOSIT_SESSION_ALIASES))
    return shaped
