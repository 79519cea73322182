"""
Stripe gateway over HTTP.

Implements the PaymentGateway capability interface the same way the browser
SDK does: surfaces and elements are local objects, and confirmation is a
single form-encoded call authorised by the publishable key plus the
session's client secret.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from src.integrations.contracts.interfaces import (
    ConfirmParams,
    ConfirmResult,
    ElementAnchor,
    ElementOptions,
    PaymentElement,
    PaymentGateway,
    PaymentSurface,
    SurfaceOptions,
)
from src.integrations.policy.response_wrappers import IntegrationResponseError, normalize_confirm_response

logger = logging.getLogger(__name__)

STRIPE_API_BASE = "https://api.stripe.com/v1"


def intent_id_from_secret(client_secret: str) -> str:
    """pi_123_secret_abc -> pi_123"""
    intent_id, sep, _ = client_secret.partition("_secret_")
    if not sep or not intent_id:
        raise IntegrationResponseError("Client secret does not reference a payment intent.")
    return intent_id


class StripePaymentElement(PaymentElement):
    def __init__(self, kind: str, options: ElementOptions):
        self.kind = kind
        self.options = options
        self.anchor: Optional[ElementAnchor] = None
        self._destroyed = False

    @property
    def mounted(self) -> bool:
        return self.anchor is not None

    def mount(self, anchor: ElementAnchor) -> None:
        if self._destroyed:
            raise RuntimeError("Element has been destroyed")
        if self.anchor is not None:
            raise RuntimeError("Element is already mounted")
        anchor.attach(self)
        self.anchor = anchor

    def unmount(self) -> None:
        if self.anchor is None:
            raise RuntimeError("Element is not mounted")
        anchor, self.anchor = self.anchor, None
        anchor.detach(self)

    def destroy(self) -> None:
        self._destroyed = True
        self.anchor = None


class StripeElements(PaymentSurface):
    def __init__(self, client_secret: str, options: SurfaceOptions):
        self.client_secret = client_secret
        self.options = options
        self.elements: Dict[str, StripePaymentElement] = {}

    def create_element(self, kind: str, options: ElementOptions) -> StripePaymentElement:
        if kind in self.elements:
            raise RuntimeError(f"A {kind} element already exists for this surface")
        element = StripePaymentElement(kind, options)
        self.elements[kind] = element
        return element

    def mounted_element(self) -> Optional[StripePaymentElement]:
        for element in self.elements.values():
            if element.mounted:
                return element
        return None


class StripeHttpGateway(PaymentGateway):
    def __init__(
        self,
        publishable_key: str,
        api_base: str = STRIPE_API_BASE,
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.publishable_key = publishable_key
        self.api_base = api_base.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def create_surface(self, client_secret: str, options: SurfaceOptions) -> StripeElements:
        return StripeElements(client_secret, options)

    async def confirm(self, surface: PaymentSurface, params: ConfirmParams) -> ConfirmResult:
        intent_id = intent_id_from_secret(surface.client_secret)

        form: Dict[str, str] = {
            "key": self.publishable_key,
            "client_secret": surface.client_secret,
            "return_url": params.return_url,
        }
        element = surface.mounted_element() if isinstance(surface, StripeElements) else None
        if element is not None:
            form.update(element.anchor.payment_method_params())
            types = element.options.payment_method_types
            if types:
                form["payment_method_options[allowed_types]"] = ",".join(types)
        if params.redirect == "if_required":
            form["use_stripe_sdk"] = "true"

        url = f"{self.api_base}/payment_intents/{intent_id}/confirm"
        logger.info("[STRIPE] Confirming payment intent %s", intent_id)

        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            response = await client.post(url, data=form)

        # Card errors come back as 4xx with an error body; anything else is transport-level.
        if response.status_code >= 500:
            response.raise_for_status()
        data = response.json() if response.content else {}
        if response.is_error and not data.get("error"):
            response.raise_for_status()

        result = normalize_confirm_response(data)
        if result.error:
            logger.info("[STRIPE] Confirmation for %s returned error code=%s", intent_id, result.error.code)
        elif result.payment_intent:
            logger.info("[STRIPE] Payment intent %s status=%s", intent_id, result.payment_intent.status)
        return result
