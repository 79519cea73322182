import asyncio

import pytest

from src.checkout.errors import ConfigurationError, NetworkError
from src.checkout.sdk_loader import SdkLoader
from src.checkout.stages import CheckoutState, Stage
from src.integrations.clients.mocks.environment import InMemoryScriptEnvironment
from src.integrations.clients.mocks.stripe import MockStripeGateway

SCRIPT_URL = "https://js.stripe.com/v3/"


def _loader(environment, key="pk_test_123", test_mode=False):
    state = CheckoutState(test_mode=test_mode)
    return state, SdkLoader(state, environment, key, SCRIPT_URL)


@pytest.mark.asyncio
async def test_loads_script_once_and_builds_client(environment, gateway):
    state, loader = _loader(environment)

    await loader.load()
    await loader.load()

    assert environment.injected == [SCRIPT_URL]
    assert environment.created_clients == ["pk_test_123"]
    assert state.gateway is gateway
    assert state.stages.stage == Stage.SDK_LOADED


@pytest.mark.asyncio
async def test_concurrent_loads_inject_one_script(environment):
    _, loader = _loader(environment)
    await asyncio.gather(loader.load(), loader.load(), loader.load())
    assert len(environment.injected) == 1


@pytest.mark.asyncio
async def test_test_mode_skips_loading(environment):
    state, loader = _loader(environment, key="", test_mode=True)

    await loader.load()

    assert environment.injected == []
    assert state.gateway is None
    assert state.stages.stage == Stage.SDK_LOADED


@pytest.mark.asyncio
async def test_missing_key_is_a_configuration_error(environment):
    state, loader = _loader(environment, key="")

    with pytest.raises(ConfigurationError) as exc_info:
        await loader.load()

    assert exc_info.value.message == "Stripe publishable key is missing"
    assert environment.injected == []


@pytest.mark.asyncio
async def test_existing_client_is_reused():
    global_client = MockStripeGateway()
    environment = InMemoryScriptEnvironment(client_factory=lambda key: MockStripeGateway(), global_client=global_client)
    state, loader = _loader(environment)

    await loader.load()

    assert state.gateway is global_client
    assert environment.injected == []


@pytest.mark.asyncio
async def test_script_failure_is_a_network_error(gateway):
    environment = InMemoryScriptEnvironment(client_factory=lambda key: gateway, fail_load=True)
    state, loader = _loader(environment)

    with pytest.raises(NetworkError) as exc_info:
        await loader.load()

    assert exc_info.value.message == "Failed to load Stripe.js"
    assert state.gateway is None


@pytest.mark.asyncio
async def test_teardown_before_load_removes_script(gateway):
    environment = InMemoryScriptEnvironment(client_factory=lambda key: gateway, block_load=True)
    state, loader = _loader(environment)

    task = asyncio.ensure_future(loader.load())
    await asyncio.sleep(0)
    assert len(environment.scripts) == 1

    state.alive = False
    loader.teardown()
    assert environment.scripts == []
    assert environment.removed == [SCRIPT_URL]

    environment.release()
    await task
    assert state.gateway is None


@pytest.mark.asyncio
async def test_teardown_after_load_keeps_script(environment):
    _, loader = _loader(environment)
    await loader.load()

    loader.teardown()

    assert len(environment.scripts) == 1
    assert environment.removed == []
