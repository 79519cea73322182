"""Tests for payment session creation and classification."""

import asyncio

import httpx
import pytest

from src.checkout.errors import NetworkError, ValidationError
from src.checkout.session_initializer import SessionInitializer, classify_response
from src.checkout.stages import CheckoutState, Stage
from src.integrations.contracts.interfaces import SessionClassification
from src.integrations.policy.response_wrappers import IntegrationResponseError, normalize_payment_intent_response


def _sdk_ready_state(test_mode=False):
    state = CheckoutState(test_mode=test_mode)
    state.stages.begin(Stage.SDK_LOADING)
    state.stages.complete(Stage.SDK_LOADING)
    return state


def _classify(raw):
    return classify_response(normalize_payment_intent_response(raw))


def test_free_order_is_classified_first():
    session = _classify({"success": True, "free_order": True, "small_order": True, "client_secret": "s", "order_id": "ord_1"})
    assert session.classification == SessionClassification.FREE
    assert session.special_order_id == "ord_1"
    assert session.client_secret is None


def test_small_order_before_client_secret():
    session = _classify({"success": True, "small_order": True, "client_secret": "s", "order_id": "ord_2"})
    assert session.classification == SessionClassification.SMALL_AMOUNT
    assert session.special_order_id == "ord_2"


def test_client_secret_means_normal():
    session = _classify({"success": True, "client_secret": "secret_abc"})
    assert session.classification == SessionClassification.NORMAL
    assert session.client_secret == "secret_abc"
    assert session.special_order_id is None


def test_special_order_without_order_id_gets_generated_id():
    session = _classify({"success": True, "free_order": True})
    assert session.special_order_id.startswith("special_")


def test_success_without_secret_falls_back_to_small_order():
    session = _classify({"success": True})
    assert session.classification == SessionClassification.SMALL_AMOUNT
    assert session.special_order_id.startswith("special_")


@pytest.mark.parametrize("raw", [{}, {"success": False}, {"success": False, "errors": ["amount too large"]}])
def test_unusable_response_raises_validation_error(raw):
    with pytest.raises(ValidationError) as exc_info:
        _classify(raw)
    assert exc_info.value.message == "No client secret returned"


@pytest.mark.asyncio
async def test_open_sends_amount_currency_and_restaurant(fake_backend):
    backend = fake_backend()
    state = _sdk_ready_state()
    initializer = SessionInitializer(state, backend, "25.00", "USD", "7")

    await initializer.open()

    assert len(backend.requests) == 1
    assert backend.requests[0].to_payload() == {"amount": "25.00", "currency": "USD", "restaurant_id": "7"}
    assert state.stages.stage == Stage.SESSION_OPEN
    assert state.session.client_secret == "secret_abc"


@pytest.mark.asyncio
async def test_open_waits_for_sdk_stage(fake_backend):
    backend = fake_backend()
    state = CheckoutState()
    await SessionInitializer(state, backend, "25.00", "USD", "4").open()
    assert backend.requests == []
    assert state.session is None


@pytest.mark.asyncio
async def test_open_runs_at_most_once(fake_backend):
    backend = fake_backend(delay=0.01)
    state = _sdk_ready_state()
    initializer = SessionInitializer(state, backend, "25.00", "USD", "4")

    await asyncio.gather(initializer.open(), initializer.open())
    await initializer.open()

    assert len(backend.requests) == 1


@pytest.mark.asyncio
async def test_test_mode_session_is_local(fake_backend):
    backend = fake_backend()
    state = _sdk_ready_state(test_mode=True)

    await SessionInitializer(state, backend, "25.00", "USD", "4").open()

    assert backend.requests == []
    assert state.session.classification == SessionClassification.NORMAL
    assert state.session.client_secret.startswith("test_secret_")


@pytest.mark.asyncio
async def test_transport_failure_becomes_network_error(fake_backend):
    backend = fake_backend(error=httpx.ConnectError("connection refused"))
    state = _sdk_ready_state()

    with pytest.raises(NetworkError) as exc_info:
        await SessionInitializer(state, backend, "25.00", "USD", "4").open()
    assert "connection refused" in exc_info.value.message
    assert state.session is None


@pytest.mark.asyncio
async def test_malformed_payload_becomes_validation_error(fake_backend):
    backend = fake_backend(error=IntegrationResponseError("Payment intent response must be an object; got list."))
    state = _sdk_ready_state()

    with pytest.raises(ValidationError):
        await SessionInitializer(state, backend, "25.00", "USD", "4").open()


@pytest.mark.asyncio
async def test_result_after_unmount_is_discarded(fake_backend):
    backend = fake_backend(delay=0.01)
    state = _sdk_ready_state()
    task = asyncio.ensure_future(SessionInitializer(state, backend, "25.00", "USD", "4").open())
    await asyncio.sleep(0)
    state.alive = False
    await task

    assert state.session is None
    assert state.stages.stage == Stage.SESSION_OPENING


@pytest.mark.asyncio
async def test_failure_after_unmount_is_silent(fake_backend):
    backend = fake_backend(error=httpx.ReadTimeout("timed out"), delay=0.01)
    state = _sdk_ready_state()
    task = asyncio.ensure_future(SessionInitializer(state, backend, "25.00", "USD", "4").open())
    await asyncio.sleep(0)
    state.alive = False
    await task
    assert state.session is None
