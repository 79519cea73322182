"""
Checkout payment orchestration.

- sdk_loader: acquires the card gateway client
- session_initializer: opens and classifies the payment session
- elements_manager: builds and mounts the card-entry surface
- payment_executor: runs a payment attempt
- stripe_checkout: the embeddable facade wiring the above together

Build instances through src.checkout.factory.build_checkout so that mock vs
real integrations are selected in one place.
"""
