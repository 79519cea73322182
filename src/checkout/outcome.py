"""
Outcome of one payment attempt.

    Ok(result)       the charge completed (or needed no charge)
    Err(error)       terminal failure, reported to the embedder
    Skipped(reason)  nothing reported: not ready, already processing, or unmounted
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from src.checkout.errors import CheckoutError
from src.integrations.contracts.interfaces import PaymentResult

NOT_READY = "not_ready"
BUSY = "busy"
UNMOUNTED = "unmounted"


@dataclass(frozen=True)
class Ok:
    value: PaymentResult


@dataclass(frozen=True)
class Err:
    error: CheckoutError


@dataclass(frozen=True)
class Skipped:
    reason: str


Outcome = Union[Ok, Err, Skipped]
