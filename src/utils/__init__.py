"""
Utility modules for the checkout
"""
from .checkout_config_loader import CheckoutConfig, load_checkout_config

__all__ = [
    'CheckoutConfig',
    'load_checkout_config',
]
