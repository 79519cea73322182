"""
Real HTTP integration clients.

These clients communicate with real external systems via HTTP:
- the storefront backend (payment session creation)
- the card gateway API (payment confirmation)
- the SDK script host

Important:
- Must implement the same interfaces as the mock clients
- Must return data shaped according to src/integrations/contracts/*

Switching:
The selection of mock vs real clients happens in src/checkout/factory.py only.
"""
