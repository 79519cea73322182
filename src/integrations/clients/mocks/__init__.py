"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- the storefront backend is not running locally
- we want to exercise the checkout end-to-end without a real card gateway

Important:
- Mock clients must follow the SAME interface as real HTTP clients.
- Mock clients should return data shaped according to src/integrations/contracts/*

Switching to real:
Set INTEGRATIONS_MODE=real (see src/checkout/factory.py) to use the
clients/real_http/* implementations instead.
"""
