"""
Elements manager - builds the card-entry surface for normal sessions and
owns the mounted payment element until teardown.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from src.checkout.stages import CheckoutState, Stage
from src.integrations.contracts.interfaces import ElementAnchor, ElementOptions, SessionClassification, SurfaceOptions

logger = logging.getLogger(__name__)

PAYMENT_ELEMENT = "payment"


class ElementsManager:
    def __init__(self, state: CheckoutState, appearance: Dict[str, Any], payment_method_types: List[str]):
        self.state = state
        self.appearance = appearance
        self.payment_method_types = list(payment_method_types)

    @property
    def active(self) -> bool:
        return not self.state.test_mode and self.state.classification == SessionClassification.NORMAL

    def build(self) -> None:
        if not self.active or self.state.gateway is None:
            return
        if not self.state.stages.begin(Stage.SURFACE_BUILT):
            return

        options = SurfaceOptions(
            appearance=self.appearance,
            payment_method_creation="manual",
            billing_address_collection="never",
        )
        self.state.surface = self.state.gateway.create_surface(self.state.session.client_secret, options)
        logger.info("Card-entry surface built")

    def mount(self, anchor: Optional[ElementAnchor]) -> None:
        if anchor is None or not self.active:
            return
        if self.state.gateway is None or self.state.surface is None:
            return
        if not self.state.stages.begin(Stage.ELEMENT_MOUNTED):
            return

        element = self.state.surface.create_element(
            PAYMENT_ELEMENT,
            ElementOptions(
                payment_method_types=self.payment_method_types,
                default_values={"billingDetails": {"name": "", "email": "", "phone": ""}},
            ),
        )
        element.mount(anchor)
        self.state.element = element
        logger.info("Payment element mounted (methods=%s)", ",".join(self.payment_method_types))

    def teardown(self) -> None:
        element = self.state.element
        if element is None:
            return
        self.state.element = None
        try:
            element.unmount()
        except Exception as exc:
            # the SDK may have destroyed the element already
            logger.warning("Error unmounting payment element: %s", exc)
            return
        logger.info("Payment element unmounted")
