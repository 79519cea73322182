"""
StripeCheckout - the embeddable checkout.

Drives the staged initialization (SDK -> session -> surface -> element) on
mount and on every refresh, exposes process_payment() as the single
imperative operation, and adapts outcomes to the embedder's success and
failure callbacks.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from src.checkout.elements_manager import ElementsManager
from src.checkout.errors import CheckoutError
from src.checkout.outcome import Err, Ok
from src.checkout.payment_executor import PaymentExecutor
from src.checkout.sdk_loader import SdkLoader
from src.checkout.session_initializer import SessionInitializer
from src.checkout.stages import CheckoutState, Phase, Stage
from src.error_handler import ErrorHandler
from src.integrations.contracts.interfaces import ElementAnchor, PaymentResult, ScriptEnvironment, SessionClassification
from src.utils.checkout_config_loader import CheckoutConfig

logger = logging.getLogger(__name__)

SuccessCallback = Callable[[PaymentResult], Union[None, Awaitable[None]]]
ErrorCallback = Callable[[CheckoutError], Union[None, Awaitable[None]]]

TEST_CARD_FIELDS = [
    {"name": "card_number", "label": "Card Number", "default": "4111 1111 1111 1111"},
    {"name": "expiry", "label": "Expiration Date", "default": "12/25", "placeholder": "MM/YY"},
    {"name": "cvv", "label": "CVV", "default": "123"},
]


class StripeCheckout:
    def __init__(
        self,
        amount: str,
        publishable_key: str,
        on_payment_success: SuccessCallback,
        on_payment_error: ErrorCallback,
        *,
        environment: ScriptEnvironment,
        backend,
        currency: str = "USD",
        test_mode: bool = False,
        restaurant_id: Optional[str] = None,
        config: Optional[CheckoutConfig] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.config = config or CheckoutConfig()
        settings = self.config.checkout
        self.amount = amount
        self.currency = currency
        self.test_mode = test_mode
        self.restaurant_id = restaurant_id or settings.default_restaurant_id

        self.on_payment_success = on_payment_success
        self.on_payment_error = on_payment_error
        self.error_handler = error_handler or ErrorHandler()

        self.state = CheckoutState(test_mode=test_mode)
        self.loader = SdkLoader(self.state, environment, publishable_key, self.config.gateway.script_url)
        self.initializer = SessionInitializer(self.state, backend, amount, currency, self.restaurant_id)
        self.elements = ElementsManager(
            self.state,
            appearance=self.config.gateway.appearance.as_options(),
            payment_method_types=self.config.gateway.payment_method_types,
        )
        self.executor = PaymentExecutor(
            self.state,
            amount=amount,
            return_url=settings.return_url,
            test_mode_delay=settings.test_mode_delay,
            special_order_delay=settings.special_order_delay,
            small_order_amount=settings.small_order_amount,
        )
        self._anchor: Optional[ElementAnchor] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def error(self) -> Optional[CheckoutError]:
        return self.state.error

    async def mount(self, anchor: Optional[ElementAnchor] = None) -> None:
        if anchor is not None:
            self._anchor = anchor
        logger.info("Mounting checkout (amount=%s %s, test_mode=%s)", self.amount, self.currency, self.test_mode)
        await self.refresh()

    async def refresh(self) -> None:
        """Re-evaluate every stage. Completed or in-flight stages are left alone."""
        if not self.state.alive:
            return
        await self._run_stage(self.loader.load)
        await self._run_stage(self.initializer.open)
        await self._run_stage(self.elements.build)
        await self._run_stage(lambda: self.elements.mount(self._anchor))

    def unmount(self) -> None:
        if not self.state.alive:
            return
        self.state.alive = False
        self.elements.teardown()
        self.loader.teardown()
        logger.info("Checkout unmounted at stage %s", self.state.stages.stage.name)

    async def _run_stage(self, step: Callable[[], Any]) -> None:
        if self.state.stages.failed or not self.state.alive:
            return
        try:
            result = step()
            if inspect.isawaitable(result):
                await result
        except CheckoutError as exc:
            await self._fail(exc)
        except Exception as exc:
            logger.exception("Unexpected error during checkout initialization")
            await self._fail(CheckoutError(str(exc) or "Checkout initialization failed"))

    async def _fail(self, error: CheckoutError) -> None:
        if not self.state.alive:
            return
        self.state.stages.fail()
        self.state.record_error(error)
        logger.error("Checkout initialization failed at %s: %s", self.state.stages.stage.name, error.message)
        await self._notify(self.on_payment_error, error)

    # ------------------------------------------------------------------
    # Imperative handle
    # ------------------------------------------------------------------

    async def process_payment(self) -> bool:
        """Run one payment attempt. True iff the success callback was invoked."""
        outcome = await self.executor.execute()
        if isinstance(outcome, Ok):
            await self._notify(self.on_payment_success, outcome.value)
            return True
        if isinstance(outcome, Err):
            await self._notify(self.on_payment_error, outcome.error)
        return False

    async def _notify(self, callback: Callable[[Any], Any], argument: Any) -> None:
        try:
            result = callback(argument)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Payment callback %s raised", getattr(callback, "__name__", callback))

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def view(self) -> Dict[str, Any]:
        state = self.state
        classification = state.classification
        view: Dict[str, Any] = {"processing": state.processing, "phase": state.phase.value}

        if not state.stages.reached(Stage.SDK_LOADED) and not state.stages.failed and classification != SessionClassification.FREE:
            view.update(type="loading", message="Loading Stripe...")
        elif state.error is not None:
            payload = self.error_handler.handle_exception(state.error)
            view.update(type="error", message=f"Error: {payload['message']}", hint=payload["hint"], error=payload)
        elif classification == SessionClassification.FREE:
            view.update(
                type="free_order",
                title="FREE ORDER",
                message="No payment required. Click the button below to complete your order.",
            )
        elif classification == SessionClassification.SMALL_AMOUNT:
            view.update(
                type="small_order",
                title="SMALL ORDER",
                message="Small orders are processed without requiring card details. Click the button below to complete your order.",
            )
        elif self.test_mode:
            view.update(
                type="test_mode",
                title="TEST MODE",
                message="Payments will be simulated without processing real cards.",
                fields=[dict(field, read_only=state.processing) for field in TEST_CARD_FIELDS],
            )
        elif state.surface is None:
            view.update(type="preparing", message="Preparing checkout...")
        else:
            view.update(type="card_entry", message="Enter your card details", mounted=state.element is not None)
        return view
