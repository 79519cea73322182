"""
Card gateway - MOCK client.

⚠️  This is a mock implementation for development and testing.
    It never contacts the gateway. Confirmation outcomes are configurable
    via the MockStripeGateway constructor:

    - "succeeded"        intent succeeds with the configured amount
    - "declined"         gateway returns a card error
    - "requires_action"  intent needs further customer action
    - "empty"            neither an error nor an intent is returned
    - "raise"            confirmation raises
"""

import asyncio
import logging
import uuid
from typing import Callable, Dict, List, Optional

from src.integrations.contracts.interfaces import (
    ConfirmParams,
    ConfirmResult,
    ElementAnchor,
    ElementOptions,
    GatewayError,
    GatewayIntent,
    PaymentElement,
    PaymentGateway,
    PaymentSurface,
    SurfaceOptions,
)

logger = logging.getLogger(__name__)

OUTCOMES = {"succeeded", "declined", "requires_action", "empty", "raise"}


class MockAnchor(ElementAnchor):
    """In-memory anchor holding pre-filled payment method details."""

    def __init__(self, params: Optional[Dict[str, str]] = None):
        self.params = params if params is not None else {"payment_method": "pm_card_visa"}
        self.attached: List[PaymentElement] = []
        self.attach_count = 0

    def attach(self, element: PaymentElement) -> None:
        self.attach_count += 1
        self.attached.append(element)

    def detach(self, element: PaymentElement) -> None:
        self.attached = [e for e in self.attached if e is not element]

    def payment_method_params(self) -> Dict[str, str]:
        return dict(self.params)


class MockPaymentElement(PaymentElement):
    def __init__(self, kind: str, options: ElementOptions, raise_on_unmount: bool = False):
        self.kind = kind
        self.options = options
        self.anchor: Optional[ElementAnchor] = None
        self.mount_calls = 0
        self.unmount_calls = 0
        self._raise_on_unmount = raise_on_unmount

    @property
    def mounted(self) -> bool:
        return self.anchor is not None

    def mount(self, anchor: ElementAnchor) -> None:
        self.mount_calls += 1
        anchor.attach(self)
        self.anchor = anchor

    def unmount(self) -> None:
        self.unmount_calls += 1
        if self._raise_on_unmount:
            raise RuntimeError("element already destroyed")
        if self.anchor is not None:
            self.anchor.detach(self)
            self.anchor = None


class MockSurface(PaymentSurface):
    def __init__(self, client_secret: str, options: SurfaceOptions, raise_on_unmount: bool = False):
        self.client_secret = client_secret
        self.options = options
        self.elements: List[MockPaymentElement] = []
        self._raise_on_unmount = raise_on_unmount

    def create_element(self, kind: str, options: ElementOptions) -> MockPaymentElement:
        element = MockPaymentElement(kind, options, raise_on_unmount=self._raise_on_unmount)
        self.elements.append(element)
        return element


class MockStripeGateway(PaymentGateway):
    """
    Mock card gateway.

    Parameters
    ----------
    outcome : str
        Result of every confirmation (see module docstring). Default "succeeded".
    amount : int
        Minor-unit amount reported on the intent. Default 2500.
    decline_message : str
        Message carried by the card error when outcome is "declined".
    confirm_delay : float
        Seconds each confirmation suspends for. Default 0.
    raise_on_unmount : bool
        Elements raise when unmounted, as if already destroyed by the SDK.
    intent_id : str
        Id reported on the intent. Defaults to the id embedded in the client secret.
    amount_lookup : callable
        Resolves an intent id to its minor-unit amount (e.g. the mock backend's
        intent_amount). Falls back to ``amount`` when it returns None.
    """

    def __init__(
        self,
        outcome: str = "succeeded",
        amount: int = 2500,
        decline_message: Optional[str] = "card_declined",
        confirm_delay: float = 0.0,
        raise_on_unmount: bool = False,
        intent_id: Optional[str] = None,
        amount_lookup: Optional[Callable[[str], Optional[int]]] = None,
    ):
        if outcome not in OUTCOMES:
            raise ValueError(f"Unknown mock outcome '{outcome}'. Expected one of {sorted(OUTCOMES)}")
        self.outcome = outcome
        self.amount = amount
        self.intent_id = intent_id
        self.amount_lookup = amount_lookup
        self.decline_message = decline_message
        self.confirm_delay = confirm_delay
        self.raise_on_unmount = raise_on_unmount

        self.surfaces: List[MockSurface] = []
        self.confirm_calls: List[ConfirmParams] = []

        logger.info("[STRIPE MOCK] Gateway initialised (outcome=%s)", outcome)

    def create_surface(self, client_secret: str, options: SurfaceOptions) -> MockSurface:
        surface = MockSurface(client_secret, options, raise_on_unmount=self.raise_on_unmount)
        self.surfaces.append(surface)
        return surface

    async def confirm(self, surface: PaymentSurface, params: ConfirmParams) -> ConfirmResult:
        self.confirm_calls.append(params)
        if self.confirm_delay:
            await asyncio.sleep(self.confirm_delay)

        intent_id = self.intent_id
        if intent_id is None:
            prefix, sep, _ = surface.client_secret.partition("_secret_")
            intent_id = prefix if sep else f"pi_{uuid.uuid4().hex[:24]}"
        logger.info("[STRIPE MOCK] Confirming %s -> %s", intent_id, self.outcome)

        if self.outcome == "raise":
            raise RuntimeError("gateway unavailable")
        if self.outcome == "declined":
            return ConfirmResult(error=GatewayError(message=self.decline_message, code="card_declined", type="card_error"))
        if self.outcome == "empty":
            return ConfirmResult()
        status = "succeeded" if self.outcome == "succeeded" else "requires_action"
        return ConfirmResult(payment_intent=GatewayIntent(id=intent_id, status=status, amount=self._amount_for(intent_id)))

    def _amount_for(self, intent_id: str) -> int:
        if self.amount_lookup is not None:
            amount = self.amount_lookup(intent_id)
            if amount is not None:
                return amount
        return self.amount
