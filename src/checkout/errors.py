"""
Checkout error taxonomy.

Every failure the checkout reports to an embedder is one of these. They are
recorded as inline error state and forwarded once to the failure callback.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CheckoutError(Exception):
    code = "checkout_error"
    retryable = False

    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.payload = payload or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "retryable": self.retryable}


class ConfigurationError(CheckoutError):
    """Missing publishable key. Fatal to the whole flow."""
    code = "configuration_error"


class NetworkError(CheckoutError):
    """SDK script or backend call failed. Recoverable by remounting."""
    code = "network_error"
    retryable = True


class ValidationError(CheckoutError):
    """Backend answered without a usable secret or special-order marker."""
    code = "validation_error"


class PaymentDeclinedError(CheckoutError):
    """The gateway rejected the submission. The user may try again."""
    code = "payment_declined"
    retryable = True


class UnknownStatusError(CheckoutError):
    """The gateway reported a status other than succeeded."""
    code = "unknown_status"
    retryable = True

    def __init__(self, message: str, *, status: Optional[str] = None, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, payload=payload)
        self.status = status
