"""
Mock storefront backend endpoints for local checkout development.
Remove or disable in production.
"""

from typing import Any, Dict, Union

from fastapi import APIRouter
from pydantic import BaseModel

from src.integrations.clients.mocks.payments import MockPaymentIntentClient
from src.integrations.contracts.payments import PaymentIntentRequest

router = APIRouter(prefix="/api/v1/mock", tags=["Mock Payments"])

mock_backend = MockPaymentIntentClient()


class CreateIntentRequest(BaseModel):
    amount: Union[str, float]
    currency: str = "USD"
    restaurant_id: Union[str, int] = "4"


@router.post("/stripe/create_intent")
async def create_intent(request: CreateIntentRequest) -> Dict[str, Any]:
    """
    Classify an order and open a mock payment session.

    Example payload:
    {
        "amount": "25.00",
        "currency": "USD",
        "restaurant_id": "4"
    }
    """
    intent_request = PaymentIntentRequest(
        amount=str(request.amount),
        currency=request.currency,
        restaurant_id=str(request.restaurant_id),
    )
    return mock_backend.build_response(intent_request)
