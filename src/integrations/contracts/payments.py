from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from .interfaces import IntentStatus

"""
Payment contracts.

Defines the expected request/response structures for the checkout's payment
operations:
- opening a payment session with the storefront backend
- reading the status the card gateway reports after confirmation

These contracts must be used by both:
- clients/mocks/* (fake responses for development/testing)
- clients/real_http/* (real API calls)
"""

# ---------------------------------------------------------------------------
# Session-open request
# ---------------------------------------------------------------------------


@dataclass
class PaymentIntentRequest:
    amount: str                          # decimal string, e.g. "25.00"
    currency: str
    restaurant_id: str

    def to_payload(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "currency": self.currency,
            "restaurant_id": self.restaurant_id,
        }


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def validate_payment_intent_request(request: PaymentIntentRequest) -> List[str]:
    """
    Return a list of validation errors.
    Empty list means the request is valid.
    """
    errors: List[str] = []

    try:
        amount = parse_amount(request.amount)
    except ValueError:
        errors.append(f"amount '{request.amount}' is not a decimal number")
    else:
        if amount < 0:
            errors.append("amount must not be negative")
    if not request.currency:
        errors.append("currency is required")
    if not request.restaurant_id:
        errors.append("restaurant_id is required")

    return errors


def parse_amount(value: Any) -> Decimal:
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


def is_terminal_status(status: str) -> bool:
    """Return True if the gateway reports the charge as completed."""
    return status == IntentStatus.SUCCEEDED.value
