"""
In-memory script environment - MOCK.

Records every script injection instead of fetching anything. Loading can be
made to fail, or to block until release() is called, to exercise teardown
while a load is still outstanding.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from src.integrations.contracts.interfaces import PaymentGateway, ScriptEnvironment, ScriptHandle

logger = logging.getLogger(__name__)


class InMemoryScriptEnvironment(ScriptEnvironment):
    def __init__(
        self,
        client_factory: Callable[[str], PaymentGateway],
        fail_load: bool = False,
        block_load: bool = False,
        global_client: Optional[PaymentGateway] = None,
    ):
        self._client_factory = client_factory
        self._fail_load = fail_load
        self._global_client = global_client
        self._released = asyncio.Event()
        if not block_load:
            self._released.set()

        self.scripts: List[ScriptHandle] = []
        self.injected: List[str] = []
        self.removed: List[str] = []
        self.created_clients: List[str] = []

    def release(self) -> None:
        self._released.set()

    def find_client(self, publishable_key: str) -> Optional[PaymentGateway]:
        return self._global_client

    def inject_script(self, src: str) -> ScriptHandle:
        handle = ScriptHandle(src=src)
        self.scripts.append(handle)
        self.injected.append(src)
        logger.debug("[ENV MOCK] Injected script %s", src)
        return handle

    async def wait_loaded(self, handle: ScriptHandle) -> None:
        await self._released.wait()
        if self._fail_load:
            handle.failed = True
            raise ConnectionError(f"could not load {handle.src}")
        handle.loaded = True

    def contains(self, handle: ScriptHandle) -> bool:
        return any(script is handle for script in self.scripts)

    def remove_script(self, handle: ScriptHandle) -> None:
        self.scripts = [script for script in self.scripts if script is not handle]
        self.removed.append(handle.src)

    def create_client(self, publishable_key: str) -> PaymentGateway:
        self.created_clients.append(publishable_key)
        return self._client_factory(publishable_key)
