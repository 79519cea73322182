"""Pytest fixtures for checkout tests."""

import asyncio

import pytest

from src.checkout.stripe_checkout import StripeCheckout
from src.integrations.clients.mocks.environment import InMemoryScriptEnvironment
from src.integrations.clients.mocks.stripe import MockAnchor, MockStripeGateway
from src.integrations.policy.response_wrappers import normalize_payment_intent_response
from src.utils.checkout_config_loader import CheckoutConfig, CheckoutSettings


class FakeBackend:
    """Stands in for the storefront backend's create_intent endpoint."""

    def __init__(self, response=None, error=None, delay=0.0):
        self.response = response if response is not None else {"success": True, "client_secret": "secret_abc"}
        self.error = error
        self.delay = delay
        self.requests = []

    async def create_intent(self, request):
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return normalize_payment_intent_response(self.response)


class CallbackRecorder:
    def __init__(self):
        self.successes = []
        self.errors = []

    def on_success(self, result):
        self.successes.append(result)

    def on_error(self, error):
        self.errors.append(error)


@pytest.fixture
def config():
    """Checkout config with simulated delays switched off."""
    return CheckoutConfig(checkout=CheckoutSettings(test_mode_delay=0, special_order_delay=0))


@pytest.fixture
def fake_backend():
    return FakeBackend


@pytest.fixture
def gateway():
    return MockStripeGateway()


@pytest.fixture
def environment(gateway):
    return InMemoryScriptEnvironment(client_factory=lambda key: gateway)


@pytest.fixture
def anchor():
    return MockAnchor()


@pytest.fixture
def recorder():
    return CallbackRecorder()


@pytest.fixture
def make_checkout(config, environment, recorder):
    def _make(backend, **kwargs):
        kwargs.setdefault("amount", "25.00")
        kwargs.setdefault("publishable_key", "pk_test_123")
        kwargs.setdefault("environment", environment)
        kwargs.setdefault("config", config)
        return StripeCheckout(
            on_payment_success=recorder.on_success,
            on_payment_error=recorder.on_error,
            backend=backend,
            **kwargs,
        )

    return _make
