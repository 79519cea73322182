"""
Integrations layer.
This package contains all code used to communicate with external systems such as:
- the storefront backend (payment session creation, per restaurant)
- the card gateway (surfaces, elements, payment confirmation)
- the hosting environment the gateway SDK script is loaded into

Key rule:
- Checkout components MUST NOT call external APIs directly.
- They call integration clients (under src/integrations/clients) through the
  contracts in src/integrations/contracts.
- We use MOCK clients during development and swap to REAL_HTTP clients when APIs are available.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (src/checkout/factory.py).
"""

from .contracts.interfaces import (
    ConfirmParams,
    ConfirmResult,
    ElementAnchor,
    ElementOptions,
    GatewayError,
    GatewayIntent,
    IntentStatus,
    PaymentElement,
    PaymentGateway,
    PaymentResult,
    PaymentSession,
    PaymentSurface,
    ScriptEnvironment,
    ScriptHandle,
    SessionClassification,
    SurfaceOptions,
)
from .contracts.payments import (
    PaymentIntentRequest,
    is_terminal_status,
    parse_amount,
    validate_payment_intent_request,
)

__all__ = [
    # interfaces
    "ConfirmParams", "ConfirmResult", "ElementAnchor", "ElementOptions",
    "GatewayError", "GatewayIntent", "IntentStatus", "PaymentElement",
    "PaymentGateway", "PaymentResult", "PaymentSession", "PaymentSurface",
    "ScriptEnvironment", "ScriptHandle", "SessionClassification", "SurfaceOptions",
    # payments
    "PaymentIntentRequest", "is_terminal_status", "parse_amount",
    "validate_payment_intent_request",
]
