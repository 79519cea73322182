"""
Real Payments HTTP Client.

Opens payment sessions with the storefront backend.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import httpx

from src.integrations.contracts.payments import PaymentIntentRequest
from src.integrations.policy.response_wrappers import PaymentIntentResponseModel, normalize_payment_intent_response

logger = logging.getLogger(__name__)


class PaymentIntentClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        create_intent_path: Optional[str] = None,
        timeout_seconds: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("CHECKOUT_API_URL", "")).rstrip("/")
        self.api_key = api_key or os.getenv("CHECKOUT_API_KEY", "")
        self.create_intent_path = create_intent_path or os.getenv("CHECKOUT_CREATE_INTENT_PATH", "/stripe/create_intent")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def create_intent(self, request: PaymentIntentRequest) -> PaymentIntentResponseModel:
        if not self.base_url:
            raise ValueError("CHECKOUT_API_URL is not configured.")

        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        payload: Dict[str, Any] = request.to_payload()
        url = f"{self.base_url}{self.create_intent_path}"
        logger.info("Creating payment intent at %s for restaurant_id=%s", url, request.restaurant_id)
        logger.debug("Request payload: %s", payload)

        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json() if response.content else {}

        logger.info("Received payment intent response: status=%s", response.status_code)
        return normalize_payment_intent_response(data)
