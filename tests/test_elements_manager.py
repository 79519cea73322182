import pytest

from src.checkout.elements_manager import ElementsManager
from src.checkout.stages import CheckoutState, Stage
from src.integrations.clients.mocks.stripe import MockAnchor, MockStripeGateway
from src.integrations.contracts.interfaces import PaymentSession, SessionClassification

APPEARANCE = {"theme": "stripe", "variables": {"colorPrimary": "#E87230"}}
METHODS = ["card", "apple_pay", "google_pay", "cashapp"]


def _opened_state(session, gateway, test_mode=False):
    state = CheckoutState(test_mode=test_mode)
    for stage in (Stage.SDK_LOADING, Stage.SESSION_OPENING):
        state.stages.begin(stage)
        state.stages.complete(stage)
    state.gateway = gateway
    state.session = session
    return state


@pytest.fixture
def normal_session():
    return PaymentSession(SessionClassification.NORMAL, client_secret="pi_1_secret_abc")


def test_build_configures_surface(normal_session):
    gateway = MockStripeGateway()
    state = _opened_state(normal_session, gateway)
    manager = ElementsManager(state, APPEARANCE, METHODS)

    manager.build()
    manager.build()

    assert len(gateway.surfaces) == 1
    surface = state.surface
    assert surface.client_secret == "pi_1_secret_abc"
    assert surface.options.appearance == APPEARANCE
    assert surface.options.payment_method_creation == "manual"
    assert surface.options.billing_address_collection == "never"


@pytest.mark.parametrize(
    "session",
    [
        PaymentSession(SessionClassification.FREE, special_order_id="ord_1"),
        PaymentSession(SessionClassification.SMALL_AMOUNT, special_order_id="ord_2"),
    ],
)
def test_special_sessions_get_no_surface(session):
    gateway = MockStripeGateway()
    state = _opened_state(session, gateway)
    manager = ElementsManager(state, APPEARANCE, METHODS)

    manager.build()
    manager.mount(MockAnchor())

    assert gateway.surfaces == []
    assert state.element is None


def test_test_mode_gets_no_surface(normal_session):
    gateway = MockStripeGateway()
    state = _opened_state(normal_session, gateway, test_mode=True)
    ElementsManager(state, APPEARANCE, METHODS).build()
    assert gateway.surfaces == []


def test_mount_happens_once_with_allowed_methods(normal_session):
    gateway = MockStripeGateway()
    state = _opened_state(normal_session, gateway)
    manager = ElementsManager(state, APPEARANCE, METHODS)
    anchor = MockAnchor()

    manager.build()
    manager.mount(anchor)
    manager.mount(anchor)
    manager.mount(MockAnchor())

    elements = gateway.surfaces[0].elements
    assert len(elements) == 1
    assert elements[0].kind == "payment"
    assert elements[0].options.payment_method_types == METHODS
    assert elements[0].options.default_values == {"billingDetails": {"name": "", "email": "", "phone": ""}}
    assert anchor.attach_count == 1
    assert state.stages.stage == Stage.ELEMENT_MOUNTED


def test_mount_requires_anchor_and_surface(normal_session):
    gateway = MockStripeGateway()
    state = _opened_state(normal_session, gateway)
    manager = ElementsManager(state, APPEARANCE, METHODS)

    manager.mount(MockAnchor())          # no surface yet
    manager.build()
    manager.mount(None)                  # no anchor

    assert state.element is None
    assert state.stages.stage == Stage.SURFACE_BUILT


def test_teardown_unmounts_exactly_once(normal_session):
    gateway = MockStripeGateway()
    state = _opened_state(normal_session, gateway)
    manager = ElementsManager(state, APPEARANCE, METHODS)
    anchor = MockAnchor()
    manager.build()
    manager.mount(anchor)
    element = state.element

    manager.teardown()
    manager.teardown()

    assert element.unmount_calls == 1
    assert anchor.attached == []
    assert state.element is None


def test_teardown_swallows_unmount_failure(normal_session):
    gateway = MockStripeGateway(raise_on_unmount=True)
    state = _opened_state(normal_session, gateway)
    manager = ElementsManager(state, APPEARANCE, METHODS)
    manager.build()
    manager.mount(MockAnchor())

    manager.teardown()

    assert state.element is None
