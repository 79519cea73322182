"""
Payment executor - runs one payment attempt against the current session.

Test mode and special (free / small-amount) sessions succeed locally after a
short simulated delay; normal sessions are confirmed through the gateway.
Every attempt ends in exactly one Outcome and always releases the
processing flag.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

import httpx

from src.checkout.errors import CheckoutError, NetworkError, PaymentDeclinedError, UnknownStatusError
from src.checkout.outcome import BUSY, NOT_READY, UNMOUNTED, Err, Ok, Outcome, Skipped
from src.checkout.stages import CheckoutState
from src.integrations.contracts.interfaces import ConfirmParams, PaymentResult, SessionClassification
from src.integrations.contracts.payments import is_terminal_status

logger = logging.getLogger(__name__)

PAYMENT_FAILED_MESSAGE = "Payment failed"
UNKNOWN_ERROR_MESSAGE = "Payment failed with unknown error"
FREE_ORDER_AMOUNT = "0"


class PaymentExecutor:
    def __init__(
        self,
        state: CheckoutState,
        amount: str,
        return_url: str,
        test_mode_delay: float = 1.0,
        special_order_delay: float = 0.5,
        small_order_amount: str = "0.50",
    ):
        self.state = state
        self.amount = amount
        self.return_url = return_url
        self.test_mode_delay = test_mode_delay
        self.special_order_delay = special_order_delay
        self.small_order_amount = small_order_amount

    async def execute(self) -> Outcome:
        if not self.state.alive:
            return Skipped(UNMOUNTED)
        if self.state.processing:
            logger.info("Payment already processing; ignoring duplicate request")
            return Skipped(BUSY)

        self.state.processing = True
        try:
            outcome = await self._execute()
        finally:
            self.state.processing = False

        if not self.state.alive:
            logger.debug("Payment attempt settled after unmount; discarding")
            return Skipped(UNMOUNTED)

        if isinstance(outcome, Ok):
            self.state.succeeded = True
            logger.info("Payment succeeded (transaction_id=%s)", outcome.value.transaction_id)
        elif isinstance(outcome, Err):
            self.state.record_error(outcome.error)
            logger.warning("Payment failed: %s", outcome.error.message)
        return outcome

    async def _execute(self) -> Outcome:
        state = self.state
        if state.error is not None and not state.stages.failed:
            # previous attempt failed; this is a user-initiated retry
            state.error = None

        if state.stages.failed:
            logger.info("Payment requested after checkout initialization failed")
            return Skipped(NOT_READY)

        if state.test_mode:
            await asyncio.sleep(self.test_mode_delay)
            test_id = f"pi_test_{uuid.uuid4().hex[:13]}"
            return Ok(
                PaymentResult(
                    status="succeeded",
                    transaction_id=test_id,
                    payment_id=test_id,
                    payment_intent_id=test_id,
                    amount=self.amount,
                )
            )

        session = state.session
        if session is not None and session.is_special:
            await asyncio.sleep(self.special_order_delay)
            if session.classification == SessionClassification.FREE:
                amount = FREE_ORDER_AMOUNT
            else:
                amount = self.small_order_amount
            return Ok(
                PaymentResult(
                    status="succeeded",
                    transaction_id=session.special_order_id,
                    payment_id=session.special_order_id,
                    payment_intent_id=session.special_order_id,
                    amount=amount,
                )
            )

        if state.gateway is None or state.surface is None or session is None or not session.client_secret:
            logger.info("Payment requested before checkout is ready")
            return Skipped(NOT_READY)

        return await self._confirm()

    async def _confirm(self) -> Outcome:
        state = self.state
        try:
            result = await state.gateway.confirm(
                state.surface,
                ConfirmParams(return_url=self.return_url, redirect="if_required"),
            )
        except CheckoutError as exc:
            return Err(exc)
        except httpx.HTTPError as exc:
            logger.error("Transport error during confirmation: %s", exc)
            return Err(NetworkError(str(exc) or PAYMENT_FAILED_MESSAGE))
        except Exception as exc:
            logger.exception("Unexpected error during confirmation")
            return Err(CheckoutError(str(exc) or PAYMENT_FAILED_MESSAGE))

        if result.error is not None:
            message = result.error.message or PAYMENT_FAILED_MESSAGE
            return Err(PaymentDeclinedError(message, payload={"code": result.error.code, "type": result.error.type}))

        intent = result.payment_intent
        if intent is None:
            return Err(UnknownStatusError(UNKNOWN_ERROR_MESSAGE))

        if not is_terminal_status(intent.status):
            return Err(UnknownStatusError(f"Payment status: {intent.status}", status=intent.status, payload={"id": intent.id}))

        return Ok(
            PaymentResult(
                status=intent.status,
                transaction_id=intent.id,
                payment_id=intent.id,
                payment_intent_id=intent.id,
                amount=intent.major_amount,
            )
        )
