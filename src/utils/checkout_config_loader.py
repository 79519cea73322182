"""
Checkout configuration loader (backend, gateway, checkout behaviour).
"""

from __future__ import annotations

import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "checkout_config.yml"


class BackendConfig(BaseModel):
    base_url: str = "http://localhost:8000/api/v1/mock"
    create_intent_path: str = "/stripe/create_intent"
    api_key: str = ""
    timeout_seconds: float = Field(default=20.0, gt=0)


class AppearanceConfig(BaseModel):
    theme: str = "stripe"
    variables: Dict[str, str] = Field(default_factory=lambda: {"colorPrimary": "#E87230"})

    def as_options(self) -> Dict[str, Any]:
        return {"theme": self.theme, "variables": dict(self.variables)}


class GatewayConfig(BaseModel):
    publishable_key: str = ""
    script_url: str = "https://js.stripe.com/v3/"
    api_base: str = "https://api.stripe.com/v1"
    appearance: AppearanceConfig = Field(default_factory=AppearanceConfig)
    payment_method_types: List[str] = Field(default_factory=lambda: ["card", "apple_pay", "google_pay", "cashapp"])


class CheckoutSettings(BaseModel):
    currency: str = "USD"
    test_mode: bool = False
    default_restaurant_id: str = "4"
    storefront_origin: str = "http://localhost:3000"
    return_path: str = "/order-confirmation"
    test_mode_delay: float = Field(default=1.0, ge=0.0)
    special_order_delay: float = Field(default=0.5, ge=0.0)
    small_order_amount: str = "0.50"

    @property
    def return_url(self) -> str:
        return self.storefront_origin.rstrip("/") + self.return_path

    @property
    def small_order_decimal(self) -> Decimal:
        return Decimal(self.small_order_amount)


class CheckoutConfig(BaseModel):
    backend: BackendConfig = Field(default_factory=BackendConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    checkout: CheckoutSettings = Field(default_factory=CheckoutSettings)


def load_checkout_config(config_path: Optional[Path] = None, apply_env: bool = True) -> CheckoutConfig:
    """
    Load and validate checkout configuration from YAML file

    Args:
        config_path: Path to config file. Defaults to config/checkout_config.yml
        apply_env: Overlay values from the environment (and .env) on top of the file

    Returns:
        Validated CheckoutConfig object. A missing file yields the defaults.

    Raises:
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    data: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.warning("Checkout config file not found: %s (using defaults)", config_path)

    if apply_env:
        load_dotenv()
        _apply_env_overrides(data)

    try:
        cfg = CheckoutConfig(**data)
        logger.info("Successfully loaded checkout config from %s", config_path)
        return cfg
    except ValidationError as e:
        logger.error("Checkout config validation failed: %s", e)
        raise


def _apply_env_overrides(data: Dict[str, Any]) -> None:
    overrides = {
        ("gateway", "publishable_key"): os.getenv("STRIPE_PUBLISHABLE_KEY"),
        ("backend", "base_url"): os.getenv("CHECKOUT_API_URL"),
        ("backend", "api_key"): os.getenv("CHECKOUT_API_KEY"),
        ("checkout", "storefront_origin"): os.getenv("STOREFRONT_ORIGIN"),
        ("checkout", "default_restaurant_id"): os.getenv("RESTAURANT_ID"),
    }
    test_mode = os.getenv("CHECKOUT_TEST_MODE")
    if test_mode is not None and test_mode.strip():
        overrides[("checkout", "test_mode")] = test_mode.strip().lower() in ("1", "true", "yes")

    for (section, key), value in overrides.items():
        if value is None or value == "":
            continue
        section_data = data.get(section) or {}
        section_data[key] = value
        data[section] = section_data
