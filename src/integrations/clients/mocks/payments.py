"""
Mock Payments Client.

Purpose:
- Provides a fake storefront backend used for development/testing
- Does NOT make any network calls
- Classifies orders the way the backend does

Behavior:
- amount <= 0                     -> free_order with a generated order_id
- 0 < amount < minimum_charge     -> small_order with a generated order_id
- otherwise                       -> client_secret for a new payment intent

Swap:
Replace this mock client with clients/real_http/payments.py when the
backend is reachable.
"""

import logging
import uuid
from decimal import Decimal
from typing import Dict, List, Optional

from src.integrations.contracts.payments import PaymentIntentRequest, parse_amount, validate_payment_intent_request
from src.integrations.policy.response_wrappers import PaymentIntentResponseModel, normalize_payment_intent_response

logger = logging.getLogger(__name__)

# Gateway minimum charge in major units (USD).
DEFAULT_MINIMUM_CHARGE = Decimal("0.50")


class MockPaymentIntentClient:
    def __init__(self, minimum_charge: Decimal = DEFAULT_MINIMUM_CHARGE):
        self.minimum_charge = minimum_charge
        self.requests: List[PaymentIntentRequest] = []
        self._intents: Dict[str, Dict[str, object]] = {}

    async def create_intent(self, request: PaymentIntentRequest) -> PaymentIntentResponseModel:
        self.requests.append(request)
        return normalize_payment_intent_response(self.build_response(request))

    def build_response(self, request: PaymentIntentRequest) -> Dict[str, object]:
        errors = validate_payment_intent_request(request)
        if errors:
            logger.info("[PAYMENTS MOCK] Rejecting intent request: %s", errors)
            return {"success": False, "errors": errors}

        amount = parse_amount(request.amount)
        if amount <= 0:
            order_id = self._new_order_id("free")
            logger.info("[PAYMENTS MOCK] Free order %s for restaurant %s", order_id, request.restaurant_id)
            return {"success": True, "free_order": True, "order_id": order_id}
        if amount < self.minimum_charge:
            order_id = self._new_order_id("small")
            logger.info("[PAYMENTS MOCK] Small order %s (%s %s)", order_id, request.amount, request.currency)
            return {"success": True, "small_order": True, "order_id": order_id}

        intent_id = f"pi_{uuid.uuid4().hex[:24]}"
        client_secret = f"{intent_id}_secret_{uuid.uuid4().hex[:24]}"
        self._intents[intent_id] = {
            "amount": int(amount * 100),
            "currency": request.currency.lower(),
            "restaurant_id": request.restaurant_id,
        }
        logger.info("[PAYMENTS MOCK] Created intent %s for %s %s", intent_id, request.amount, request.currency)
        return {"success": True, "client_secret": client_secret, "status": "requires_payment_method"}

    def intent_amount(self, intent_id: str) -> Optional[int]:
        intent = self._intents.get(intent_id)
        return int(intent["amount"]) if intent else None

    @staticmethod
    def _new_order_id(prefix: str) -> str:
        return f"{prefix}_{uuid.uuid4().hex[:10]}"
