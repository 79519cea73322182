"""
HTTP-backed script environment.

Keeps track of the SDK script resources the checkout injects, fetches each
one over HTTP, and builds gateway handles once a script is available.
Clients registered up front act as globally injected handles and are reused
instead of loading the script.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import httpx

from src.integrations.clients.real_http.stripe_gateway import STRIPE_API_BASE, StripeHttpGateway
from src.integrations.contracts.interfaces import PaymentGateway, ScriptEnvironment, ScriptHandle

logger = logging.getLogger(__name__)


class HttpScriptEnvironment(ScriptEnvironment):
    def __init__(
        self,
        api_base: str = STRIPE_API_BASE,
        timeout_seconds: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_base = api_base
        self.timeout_seconds = timeout_seconds
        self.scripts: List[ScriptHandle] = []
        self._clients: Dict[str, PaymentGateway] = {}
        self._transport = transport

    def register_client(self, publishable_key: str, client: PaymentGateway) -> None:
        self._clients[publishable_key] = client

    def find_client(self, publishable_key: str) -> Optional[PaymentGateway]:
        return self._clients.get(publishable_key)

    def inject_script(self, src: str) -> ScriptHandle:
        handle = ScriptHandle(src=src)
        self.scripts.append(handle)
        return handle

    async def wait_loaded(self, handle: ScriptHandle) -> None:
        logger.info("Fetching SDK script %s", handle.src)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport, follow_redirects=True
            ) as client:
                response = await client.get(handle.src)
                response.raise_for_status()
        except httpx.HTTPError:
            handle.failed = True
            raise
        handle.loaded = True

    def contains(self, handle: ScriptHandle) -> bool:
        return any(script is handle for script in self.scripts)

    def remove_script(self, handle: ScriptHandle) -> None:
        self.scripts = [script for script in self.scripts if script is not handle]

    def create_client(self, publishable_key: str) -> StripeHttpGateway:
        return StripeHttpGateway(publishable_key, api_base=self.api_base, transport=self._transport)
