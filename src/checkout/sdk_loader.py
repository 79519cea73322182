"""
SDK loader - acquires the card gateway client once per mounted checkout.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from src.checkout.errors import ConfigurationError, NetworkError
from src.checkout.stages import CheckoutState, Stage
from src.integrations.contracts.interfaces import ScriptEnvironment, ScriptHandle

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "Stripe publishable key is missing"
LOAD_FAILED_MESSAGE = "Failed to load Stripe.js"


class SdkLoader:
    def __init__(self, state: CheckoutState, environment: ScriptEnvironment, publishable_key: str, script_url: str):
        self.state = state
        self.environment = environment
        self.publishable_key = publishable_key
        self.script_url = script_url
        self._handle: Optional[ScriptHandle] = None

    async def load(self) -> None:
        """
        Resolve the gateway client handle.

        Test mode completes immediately without a client. A client already
        present in the environment is reused; otherwise the SDK script is
        injected and awaited exactly once.

        Raises:
            ConfigurationError: the publishable key is missing
            NetworkError: the SDK script could not be loaded
        """
        stages = self.state.stages
        if not stages.begin(Stage.SDK_LOADING):
            return

        if self.state.test_mode:
            logger.info("Test mode enabled; skipping SDK load")
            stages.complete(Stage.SDK_LOADING)
            return

        if not self.publishable_key:
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        existing = self.environment.find_client(self.publishable_key)
        if existing is not None:
            logger.info("Reusing gateway client already present in the environment")
            self.state.gateway = existing
            stages.complete(Stage.SDK_LOADING)
            return

        handle = self.environment.inject_script(self.script_url)
        self._handle = handle
        try:
            await self.environment.wait_loaded(handle)
        except (httpx.HTTPError, OSError) as exc:
            if not self.state.alive:
                logger.debug("SDK load failed after unmount; ignoring")
                return
            logger.error("SDK script %s failed to load: %s", self.script_url, exc)
            raise NetworkError(LOAD_FAILED_MESSAGE, payload={"src": self.script_url}) from exc

        if not self.state.alive:
            logger.debug("SDK loaded after unmount; discarding")
            return

        self.state.gateway = self.environment.create_client(self.publishable_key)
        stages.complete(Stage.SDK_LOADING)
        logger.info("SDK loaded from %s", self.script_url)

    def teardown(self) -> None:
        handle = self._handle
        if handle is None or handle.loaded:
            return
        if self.environment.contains(handle):
            self.environment.remove_script(handle)
            logger.info("Removed unfinished SDK script %s", handle.src)
