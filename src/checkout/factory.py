"""
Builds StripeCheckout instances with mock or real integrations.

The selection of mock vs real clients happens here only.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from src.checkout.stripe_checkout import ErrorCallback, StripeCheckout, SuccessCallback
from src.integrations.clients.mocks.environment import InMemoryScriptEnvironment
from src.integrations.clients.mocks.payments import MockPaymentIntentClient
from src.integrations.clients.mocks.stripe import MockStripeGateway
from src.integrations.clients.real_http.payments import PaymentIntentClient
from src.integrations.clients.real_http.script_environment import HttpScriptEnvironment
from src.utils.checkout_config_loader import CheckoutConfig

logger = logging.getLogger(__name__)


def should_use_real_integrations() -> bool:
    mode = os.getenv("INTEGRATIONS_MODE", "").strip().lower()
    if mode in {"real", "live"}:
        return True
    if mode in {"mock", "test"}:
        return False
    return bool(os.getenv("CHECKOUT_API_URL"))


def build_backend(config: CheckoutConfig, real: bool):
    if real:
        return PaymentIntentClient(
            base_url=config.backend.base_url,
            api_key=config.backend.api_key or None,
            create_intent_path=config.backend.create_intent_path,
            timeout_seconds=config.backend.timeout_seconds,
        )
    return MockPaymentIntentClient(minimum_charge=config.checkout.small_order_decimal)


def build_environment(config: CheckoutConfig, real: bool, backend=None):
    if real:
        return HttpScriptEnvironment(api_base=config.gateway.api_base)
    # mock confirmations report the amount the mock backend recorded for the intent
    amount_lookup = backend.intent_amount if isinstance(backend, MockPaymentIntentClient) else None
    return InMemoryScriptEnvironment(client_factory=lambda key: MockStripeGateway(amount_lookup=amount_lookup))


def build_checkout(
    config: CheckoutConfig,
    amount: str,
    on_payment_success: SuccessCallback,
    on_payment_error: ErrorCallback,
    *,
    currency: Optional[str] = None,
    restaurant_id: Optional[str] = None,
    real: Optional[bool] = None,
) -> StripeCheckout:
    if real is None:
        real = should_use_real_integrations()
    logger.info("Building checkout with %s integrations", "real" if real else "mock")
    backend = build_backend(config, real)

    return StripeCheckout(
        amount=amount,
        publishable_key=config.gateway.publishable_key,
        on_payment_success=on_payment_success,
        on_payment_error=on_payment_error,
        environment=build_environment(config, real, backend),
        backend=backend,
        currency=currency or config.checkout.currency,
        test_mode=config.checkout.test_mode,
        restaurant_id=restaurant_id,
        config=config,
    )
