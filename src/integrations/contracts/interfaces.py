from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SessionClassification(str, Enum):
    NORMAL = "normal"
    FREE = "free"
    SMALL_AMOUNT = "small_amount"


class IntentStatus(str, Enum):
    SUCCEEDED = "succeeded"
    PROCESSING = "processing"
    REQUIRES_ACTION = "requires_action"
    REQUIRES_PAYMENT_METHOD = "requires_payment_method"
    REQUIRES_CONFIRMATION = "requires_confirmation"
    CANCELED = "canceled"


# ---------------------------------------------------------------------------
# Shared data models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PaymentSession:
    """Backend-issued authorization context for one checkout attempt."""
    classification: SessionClassification
    client_secret: Optional[str] = None
    special_order_id: Optional[str] = None

    def __post_init__(self):
        if self.classification == SessionClassification.NORMAL:
            if not self.client_secret or self.special_order_id is not None:
                raise ValueError("normal sessions carry a client_secret and no special_order_id")
        elif not self.special_order_id or self.client_secret is not None:
            raise ValueError(f"{self.classification.value} sessions carry a special_order_id and no client_secret")

    @property
    def is_special(self) -> bool:
        return self.classification != SessionClassification.NORMAL


@dataclass(frozen=True)
class PaymentResult:
    status: str
    transaction_id: str
    amount: str
    payment_id: Optional[str] = None
    payment_intent_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "transaction_id": self.transaction_id,
            "payment_id": self.payment_id,
            "payment_intent_id": self.payment_intent_id,
            "amount": self.amount,
        }


@dataclass(frozen=True)
class SurfaceOptions:
    """Options the card-entry surface is constructed with."""
    appearance: Dict[str, Any] = field(default_factory=dict)
    payment_method_creation: str = "manual"
    billing_address_collection: str = "never"


@dataclass(frozen=True)
class ElementOptions:
    payment_method_types: List[str] = field(default_factory=lambda: ["card"])
    default_values: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ConfirmParams:
    return_url: str
    redirect: str = "if_required"


@dataclass(frozen=True)
class GatewayIntent:
    id: str
    status: str
    amount: int                          # minor currency units

    @property
    def major_amount(self) -> str:
        return format(Decimal(self.amount) / Decimal(100), "f")


@dataclass(frozen=True)
class GatewayError:
    message: Optional[str] = None
    code: Optional[str] = None
    type: Optional[str] = None


@dataclass(frozen=True)
class ConfirmResult:
    error: Optional[GatewayError] = None
    payment_intent: Optional[GatewayIntent] = None


@dataclass
class ScriptHandle:
    """A script resource injected into the hosting environment."""
    src: str
    loaded: bool = False
    failed: bool = False


# ---------------------------------------------------------------------------
# Abstract gateway / environment interfaces
# ---------------------------------------------------------------------------

class ElementAnchor(ABC):
    """The single place a card-entry element is mounted into."""

    @abstractmethod
    def attach(self, element: "PaymentElement") -> None:
        """Bind the element to this anchor."""

    @abstractmethod
    def detach(self, element: "PaymentElement") -> None:
        """Release the element from this anchor."""

    @abstractmethod
    def payment_method_params(self) -> Dict[str, str]:
        """Return the payment method details collected by the anchor."""


class PaymentElement(ABC):
    """A mountable card-entry element created from a surface."""

    @property
    @abstractmethod
    def mounted(self) -> bool:
        """True while the element is attached to an anchor."""

    @abstractmethod
    def mount(self, anchor: ElementAnchor) -> None:
        """Attach the element to exactly one anchor."""

    @abstractmethod
    def unmount(self) -> None:
        """Detach the element. May raise if the element was already destroyed."""


class PaymentSurface(ABC):
    """Elements group bound to one session's client secret."""

    client_secret: str
    options: SurfaceOptions

    @abstractmethod
    def create_element(self, kind: str, options: ElementOptions) -> PaymentElement:
        """Create an element of the given kind (e.g. "payment")."""


class PaymentGateway(ABC):
    """Narrow capability interface over the card-processing SDK."""

    @abstractmethod
    def create_surface(self, client_secret: str, options: SurfaceOptions) -> PaymentSurface:
        """Construct the card-entry surface for a session."""

    @abstractmethod
    async def confirm(self, surface: PaymentSurface, params: ConfirmParams) -> ConfirmResult:
        """Create the payment method and confirm the charge in one step."""


class ScriptEnvironment(ABC):
    """Hosting environment the SDK script is loaded into."""

    @abstractmethod
    def find_client(self, publishable_key: str) -> Optional[PaymentGateway]:
        """Return a client handle already present in the environment, if any."""

    @abstractmethod
    def inject_script(self, src: str) -> ScriptHandle:
        """Add a script resource to the environment and return its handle."""

    @abstractmethod
    async def wait_loaded(self, handle: ScriptHandle) -> None:
        """Suspend until the script has loaded; raise if loading fails."""

    @abstractmethod
    def contains(self, handle: ScriptHandle) -> bool:
        """True while the script resource is still present."""

    @abstractmethod
    def remove_script(self, handle: ScriptHandle) -> None:
        """Remove the script resource."""

    @abstractmethod
    def create_client(self, publishable_key: str) -> PaymentGateway:
        """Construct a client handle from the loaded SDK."""
