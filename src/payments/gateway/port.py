"""Payment gateway port (abstract interface).

The storefront never touches card data. The browser completes payment against
the gateway using a client secret; the server only creates the payment intent
and later reads back its terminal state. Adapters: FakeGateway (dev/test) and
StripeGateway (production).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from shared.errors import InvalidRequest

CLIENT_SECRET_MARKER = "_secret_"


class PaymentStatus(Enum):
    """The three outcomes checkout branches on."""

    SUCCEEDED = "succeeded"
    PROCESSING = "processing"
    FAILED = "failed"


@dataclass(frozen=True)
class PaymentIntent:
    """A freshly created payment intent."""

    id: str
    client_secret: str
    amount: int
    currency: str
    status: str


@dataclass(frozen=True)
class PaymentConfirmation:
    """Terminal state of a payment intent as reported by the gateway."""

    status: PaymentStatus
    payment_intent_id: str
    gateway_status: str | None = None
    failure_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == PaymentStatus.SUCCEEDED


def intent_id_from_client_secret(client_secret: str | None) -> str:
    """Extract the payment intent id from a ``<id>_secret_<token>`` client secret."""
    if not client_secret or CLIENT_SECRET_MARKER not in client_secret:
        raise InvalidRequest("Payment information is missing. Please try again.")
    intent_id, _, token = client_secret.partition(CLIENT_SECRET_MARKER)
    if not intent_id or not token:
        raise InvalidRequest("Payment information is malformed. Please try again.")
    return intent_id


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_intent(self, amount: int, currency: str) -> PaymentIntent:
        """Create a payment intent for ``amount`` minor units (cents)."""
        ...

    @abstractmethod
    def retrieve_payment_intent(self, client_secret: str) -> PaymentConfirmation:
        """Read back the state of the intent identified by its client secret.

        Raises InvalidRequest for a missing or malformed secret and
        UpstreamFailure when the gateway errors or times out.
        """
        ...
