"""
Field-name reconciliation for backend payloads.

The backend API is inconsistent about snake_case versus camelCase keys. Each
alias rule names the stable snake_case key the façade exposes, the backend
keys to try in order, and the type the value must have to be accepted.
Should the upstream contract settle on one spelling, the alias tables are
the only place to change.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Sequence, Tuple


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def is_list(value: Any) -> bool:
    return isinstance(value, list)


@dataclass(frozen=True)
class FieldAlias:
    """One exposed field and the backend spellings it may arrive under."""

    target: str
    sources: Tuple[str, ...]
    accepts: Callable[[Any], bool] = is_string


DEPOSIT_SESSION_ALIASES: Sequence[FieldAlias] = (
    FieldAlias("checkout_url", ("checkout_url", "checkoutUrl"), is_non_empty_string),
    FieldAlias("draft_order_ids", ("draft_order_ids", "draftOrderIds"), is_list),
    FieldAlias("first_draft_order_id", ("first_draft_order_id", "firstDraftOrderId"), is_string),
    FieldAlias("payment_amounts", ("payment_amounts", "paymentAmounts"), is_list),
)


def reconcile_fields(payload: Mapping[str, Any], aliases: Sequence[FieldAlias]) -> Dict[str, Any]:
    """Pick the first acceptable spelling of each aliased field.

    Fields with no acceptable spelling are left out of the result.
    """
    reconciled: Dict[str, Any] = {}
    for alias in aliases:
        for source in alias.sources:
            value = payload.get(source)
            if alias.accepts(value):
                reconciled[alias.target] = value
                break
    return reconciled
