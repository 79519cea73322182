"""
Staged initialization state for one mounted checkout.

A single ordered stage field replaces per-operation guard flags: each
operation may begin only from the stage that completes its prerequisite,
so an operation that has begun can never run a second time and no
inconsistent combination of guards can exist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional

from src.checkout.errors import CheckoutError
from src.integrations.contracts.interfaces import (
    PaymentElement,
    PaymentGateway,
    PaymentSession,
    PaymentSurface,
    SessionClassification,
)

logger = logging.getLogger(__name__)


class Stage(IntEnum):
    IDLE = 0
    SDK_LOADING = 1
    SDK_LOADED = 2
    SESSION_OPENING = 3
    SESSION_OPEN = 4
    SURFACE_BUILT = 5
    ELEMENT_MOUNTED = 6


class Phase(str, Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    READY = "ready"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# stage -> stage the machine must sit on for it to begin
_PREREQUISITE = {
    Stage.SDK_LOADING: Stage.IDLE,
    Stage.SESSION_OPENING: Stage.SDK_LOADED,
    Stage.SURFACE_BUILT: Stage.SESSION_OPEN,
    Stage.ELEMENT_MOUNTED: Stage.SURFACE_BUILT,
}

# asynchronous stages and the stage they settle on
_COMPLETION = {
    Stage.SDK_LOADING: Stage.SDK_LOADED,
    Stage.SESSION_OPENING: Stage.SESSION_OPEN,
}


class StageError(RuntimeError):
    pass


class StageMachine:
    def __init__(self) -> None:
        self.stage = Stage.IDLE
        self.failed = False

    def can_begin(self, stage: Stage) -> bool:
        return not self.failed and self.stage == _PREREQUISITE[stage]

    def begin(self, stage: Stage) -> bool:
        """Enter ``stage``; False if it already ran, is running, or is not yet due."""
        if not self.can_begin(stage):
            if self.stage >= stage:
                logger.debug("Stage %s already entered; skipping", stage.name)
            return False
        self.stage = stage
        return True

    def complete(self, stage: Stage) -> None:
        if stage not in _COMPLETION:
            raise StageError(f"{stage.name} completes when it begins")
        if self.stage != stage:
            raise StageError(f"Cannot complete {stage.name} from {self.stage.name}")
        self.stage = _COMPLETION[stage]

    def fail(self) -> None:
        self.failed = True

    def reached(self, stage: Stage) -> bool:
        return self.stage >= stage


@dataclass
class CheckoutState:
    """Everything one mounted checkout knows; shared by its components."""
    test_mode: bool = False
    stages: StageMachine = field(default_factory=StageMachine)
    gateway: Optional[PaymentGateway] = None
    session: Optional[PaymentSession] = None
    surface: Optional[PaymentSurface] = None
    element: Optional[PaymentElement] = None
    error: Optional[CheckoutError] = None
    processing: bool = False
    alive: bool = True
    succeeded: bool = False

    def record_error(self, error: CheckoutError) -> None:
        self.error = error

    @property
    def classification(self) -> Optional[SessionClassification]:
        return self.session.classification if self.session else None

    @property
    def ready(self) -> bool:
        if self.stages.failed or self.session is None:
            return False
        if self.test_mode or self.session.is_special:
            return True
        return self.surface is not None

    @property
    def phase(self) -> Phase:
        if self.processing:
            return Phase.PROCESSING
        if self.succeeded:
            return Phase.SUCCEEDED
        if self.error is not None:
            return Phase.FAILED
        if self.ready:
            return Phase.READY
        if self.stages.stage == Stage.IDLE:
            return Phase.IDLE
        return Phase.INITIALIZING
