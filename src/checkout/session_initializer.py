"""
Session initializer - opens the payment session with the storefront backend
and classifies it as a normal, free or small-amount order.
"""

from __future__ import annotations

import logging
import uuid

import httpx

from src.checkout.errors import NetworkError, ValidationError
from src.checkout.stages import CheckoutState, Stage
from src.integrations.contracts.interfaces import PaymentSession, SessionClassification
from src.integrations.contracts.payments import PaymentIntentRequest
from src.integrations.policy.response_wrappers import IntegrationResponseError, PaymentIntentResponseModel

logger = logging.getLogger(__name__)

NO_SECRET_MESSAGE = "No client secret returned"
CREATE_FAILED_MESSAGE = "Failed to create payment intent"


def classify_response(response: PaymentIntentResponseModel) -> PaymentSession:
    """
    Turn a backend response into a session. Checked in order: free order,
    small order, client secret, then bare success (treated as small).

    Raises:
        ValidationError: the response carries none of the above
    """
    if response.free_order:
        return PaymentSession(SessionClassification.FREE, special_order_id=response.order_id or _special_id())
    if response.small_order:
        return PaymentSession(SessionClassification.SMALL_AMOUNT, special_order_id=response.order_id or _special_id())
    if response.client_secret:
        return PaymentSession(SessionClassification.NORMAL, client_secret=response.client_secret)
    if response.success:
        logger.warning("Backend reported success without a client secret; treating as small order")
        return PaymentSession(SessionClassification.SMALL_AMOUNT, special_order_id=_special_id())
    raise ValidationError(NO_SECRET_MESSAGE, payload={"errors": response.errors, "status": response.status})


def _special_id() -> str:
    return f"special_{uuid.uuid4().hex[:8]}"


class SessionInitializer:
    def __init__(self, state: CheckoutState, backend, amount: str, currency: str, restaurant_id: str):
        self.state = state
        self.backend = backend
        self.amount = amount
        self.currency = currency
        self.restaurant_id = restaurant_id

    async def open(self) -> None:
        """
        Open the session once the SDK stage has completed. Runs at most once.

        Raises:
            NetworkError: the backend call failed
            ValidationError: the backend response was unusable
        """
        stages = self.state.stages
        if not stages.begin(Stage.SESSION_OPENING):
            return

        if self.state.test_mode:
            self.state.session = PaymentSession(
                SessionClassification.NORMAL, client_secret=f"test_secret_{uuid.uuid4().hex[:13]}"
            )
            stages.complete(Stage.SESSION_OPENING)
            logger.info("Test mode session created locally")
            return

        request = PaymentIntentRequest(amount=self.amount, currency=self.currency, restaurant_id=self.restaurant_id)
        try:
            response = await self.backend.create_intent(request)
        except IntegrationResponseError as exc:
            if not self.state.alive:
                return
            raise ValidationError(str(exc), payload=exc.payload) from exc
        except (httpx.HTTPError, ValueError, OSError) as exc:
            if not self.state.alive:
                logger.debug("Session open failed after unmount; ignoring")
                return
            logger.error("Payment intent request failed: %s", exc)
            raise NetworkError(str(exc) or CREATE_FAILED_MESSAGE) from exc

        if not self.state.alive:
            logger.debug("Session opened after unmount; discarding")
            return

        session = classify_response(response)
        self.state.session = session
        stages.complete(Stage.SESSION_OPENING)
        logger.info("Payment session opened (classification=%s)", session.classification.value)
