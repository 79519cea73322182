import pytest

from src.checkout.factory import build_checkout, should_use_real_integrations
from src.integrations.clients.mocks.environment import InMemoryScriptEnvironment
from src.integrations.clients.mocks.payments import MockPaymentIntentClient
from src.integrations.clients.mocks.stripe import MockAnchor
from src.integrations.clients.real_http.payments import PaymentIntentClient
from src.integrations.clients.real_http.script_environment import HttpScriptEnvironment
from src.utils.checkout_config_loader import CheckoutConfig, CheckoutSettings, GatewayConfig


@pytest.mark.parametrize(
    "mode, api_url, expected",
    [
        ("real", "", True),
        ("live", "", True),
        ("mock", "https://shop.example.com", False),
        ("", "https://shop.example.com", True),
        ("", "", False),
    ],
)
def test_should_use_real_integrations(monkeypatch, mode, api_url, expected):
    monkeypatch.setenv("INTEGRATIONS_MODE", mode)
    monkeypatch.setenv("CHECKOUT_API_URL", api_url)
    assert should_use_real_integrations() is expected


def test_real_checkout_uses_http_clients():
    config = CheckoutConfig(gateway=GatewayConfig(publishable_key="pk_test_1"))
    checkout = build_checkout(config, "25.00", lambda r: None, lambda e: None, real=True)

    assert isinstance(checkout.initializer.backend, PaymentIntentClient)
    assert isinstance(checkout.loader.environment, HttpScriptEnvironment)
    assert checkout.restaurant_id == "4"


@pytest.mark.asyncio
async def test_mock_checkout_completes_a_payment():
    config = CheckoutConfig(
        gateway=GatewayConfig(publishable_key="pk_test_mock"),
        checkout=CheckoutSettings(test_mode_delay=0, special_order_delay=0),
    )
    successes = []
    checkout = build_checkout(config, "10.00", successes.append, lambda e: None, restaurant_id="7", real=False)

    assert isinstance(checkout.initializer.backend, MockPaymentIntentClient)
    assert isinstance(checkout.loader.environment, InMemoryScriptEnvironment)

    await checkout.mount(MockAnchor())
    assert await checkout.process_payment() is True
    assert successes[0].amount == "10"
    assert checkout.initializer.backend.requests[0].restaurant_id == "7"
