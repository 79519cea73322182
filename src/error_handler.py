"""Error handling helpers for the checkout: inline error payloads."""
from typing import Any, Dict
import logging

from src.checkout.errors import CheckoutError

logger = logging.getLogger(__name__)

SUPPORT_HINT = "Please try another payment method or contact support."


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        if isinstance(exc, CheckoutError):
            logger.info("Checkout error (%s): %s", exc.code, exc.message)
            return {
                "message": exc.message,
                "code": exc.code,
                "retryable": exc.retryable,
                "hint": SUPPORT_HINT,
                "fallback": False,
                "metadata": {"payload": exc.payload, "context": context or {}},
            }

        logger.error("Unhandled exception in checkout: %s", exc, exc_info=True)
        return {
            "message": "An internal error occurred while processing your payment. Please try again later.",
            "code": "internal_error",
            "retryable": False,
            "hint": SUPPORT_HINT,
            "fallback": True,
            "metadata": {"error": str(exc), "context": context or {}},
        }
