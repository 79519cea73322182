"""
Contracts (data models).

This folder defines the request/response shapes for the checkout's external
integrations:
- the storefront backend's payment-session endpoint
- the card gateway (surfaces, elements, confirmation results)
- the hosting environment the gateway SDK is loaded into

Both mock and real HTTP clients should use these contracts.
"""
