from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.utils.checkout_config_loader import load_checkout_config

ENV_VARS = [
    "STRIPE_PUBLISHABLE_KEY",
    "CHECKOUT_API_URL",
    "CHECKOUT_API_KEY",
    "STOREFRONT_ORIGIN",
    "RESTAURANT_ID",
    "CHECKOUT_TEST_MODE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_yaml_values_are_loaded(tmp_path):
    path = tmp_path / "checkout.yml"
    path.write_text(
        "gateway:\n"
        "  publishable_key: pk_test_yaml\n"
        "  payment_method_types: [card]\n"
        "checkout:\n"
        "  currency: EUR\n"
        "  storefront_origin: https://shop.example.com/\n"
        "  small_order_amount: '0.75'\n",
        encoding="utf-8",
    )

    cfg = load_checkout_config(path, apply_env=False)

    assert cfg.gateway.publishable_key == "pk_test_yaml"
    assert cfg.gateway.payment_method_types == ["card"]
    assert cfg.checkout.currency == "EUR"
    assert cfg.checkout.return_url == "https://shop.example.com/order-confirmation"
    assert cfg.checkout.small_order_decimal == Decimal("0.75")
    assert cfg.gateway.appearance.as_options() == {"theme": "stripe", "variables": {"colorPrimary": "#E87230"}}


def test_missing_file_yields_defaults(tmp_path):
    cfg = load_checkout_config(tmp_path / "absent.yml", apply_env=False)
    assert cfg.checkout.default_restaurant_id == "4"
    assert cfg.gateway.payment_method_types == ["card", "apple_pay", "google_pay", "cashapp"]


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "checkout.yml"
    path.write_text("gateway:\n  publishable_key: pk_test_yaml\n", encoding="utf-8")
    monkeypatch.setenv("STRIPE_PUBLISHABLE_KEY", "pk_test_env")
    monkeypatch.setenv("RESTAURANT_ID", "9")
    monkeypatch.setenv("CHECKOUT_TEST_MODE", "true")

    cfg = load_checkout_config(path)

    assert cfg.gateway.publishable_key == "pk_test_env"
    assert cfg.checkout.default_restaurant_id == "9"
    assert cfg.checkout.test_mode is True


def test_invalid_config_raises(tmp_path):
    path = tmp_path / "checkout.yml"
    path.write_text("checkout:\n  test_mode_delay: -1\n", encoding="utf-8")
    with pytest.raises(ValidationError):
        load_checkout_config(path, apply_env=False)
