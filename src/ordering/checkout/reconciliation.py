"""Checkout reconciliation: turns a confirmed payment into exactly one order.

One CheckoutReconciliation lives for one checkout attempt (one visit to the
order-complete page). Its state machine doubles as the one-shot guard: only
the first run() leaves ``awaiting_payment_confirmation``; any later call,
for instance from a re-render, gets the recorded outcome back and submits
nothing.

Flow:
    1. Read the payment intent back from the gateway.
    2a. succeeded  → submitting_order
    2b. processing → stays awaiting_payment_confirmation (attempt consumed)
    2c. failed / gateway error / bad client secret → order_failed
    3. Check the cart has items and a shipping address, else order_failed.
    4. Submit the order.
    5a. Acknowledged → order_confirmed, and only then clear the cart.
    5b. Any failure  → order_failed, cart left as it was for a retry.

There is no automatic retry; the customer starts a new checkout.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

import structlog
from payments.gateway.port import PaymentConfirmation, PaymentGateway, PaymentStatus
from shared.errors import InvalidRequest, PersistenceFailure, StorefrontError, UpstreamFailure

from ordering.cart.store import CartStore
from ordering.checkout.submission import OrderSubmitter

logger = structlog.get_logger(__name__)

PROCESSING_MESSAGE = "Your payment is still processing. We will update you shortly."
EMPTY_CART_MESSAGE = "Your cart is empty or shipping address is missing."
ORDER_FAILED_MESSAGE = (
    "Your payment was successful, but we failed to create your order. Please contact support."
)


class ReconciliationState(Enum):
    AWAITING_PAYMENT_CONFIRMATION = "awaiting_payment_confirmation"
    SUBMITTING_ORDER = "submitting_order"
    ORDER_CONFIRMED = "order_confirmed"
    ORDER_FAILED = "order_failed"


_VALID_TRANSITIONS = {
    ReconciliationState.AWAITING_PAYMENT_CONFIRMATION: {
        ReconciliationState.SUBMITTING_ORDER,
        ReconciliationState.ORDER_FAILED,
    },
    ReconciliationState.SUBMITTING_ORDER: {
        ReconciliationState.ORDER_CONFIRMED,
        ReconciliationState.ORDER_FAILED,
    },
    ReconciliationState.ORDER_CONFIRMED: set(),  # Terminal
    ReconciliationState.ORDER_FAILED: set(),  # Terminal
}


@dataclass(frozen=True)
class ReconciliationOutcome:
    attempt_id: str
    state: ReconciliationState
    order_id: str | None = None
    message: str | None = None
    error: StorefrontError | None = None

    @property
    def succeeded(self) -> bool:
        return self.state == ReconciliationState.ORDER_CONFIRMED


def build_order_request(cart, confirmation: PaymentConfirmation, paid_at: datetime) -> dict:
    """Shape the current cart into the create-order request body."""
    address = cart.shipping_address
    return {
        "orderItems": [
            {
                "product": str(item.product_id),
                "name": item.name,
                "price": item.unit_price,
                "image": item.image,
                "quantity": item.quantity,
            }
            for item in cart.items
        ],
        "shippingAddress": {
            "address": address.address,
            "city": address.city,
            "postalCode": address.postal_code,
            "country": address.country,
        },
        "totalPrice": cart.total_price(),
        "isPaid": True,
        "paidAt": paid_at.isoformat(),
        "paymentResult": {
            "id": confirmation.payment_intent_id,
            "status": confirmation.gateway_status or confirmation.status.value,
        },
    }


class CheckoutReconciliation:
    def __init__(
        self,
        cart_store: CartStore,
        gateway: PaymentGateway,
        submitter: OrderSubmitter,
        token: str | None,
        attempt_id: str | None = None,
    ):
        self.cart_store = cart_store
        self.gateway = gateway
        self.submitter = submitter
        self.token = token
        self.attempt_id = attempt_id or uuid4().hex
        self.state = ReconciliationState.AWAITING_PAYMENT_CONFIRMATION
        self._started = False
        self._outcome: ReconciliationOutcome | None = None

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _transition(self, target: ReconciliationState) -> None:
        if target not in _VALID_TRANSITIONS[self.state]:
            raise RuntimeError(f"Cannot transition from {self.state.value} to {target.value}")
        logger.info(
            "Checkout state changed",
            attempt_id=self.attempt_id,
            previous_state=self.state.value,
            new_state=target.value,
        )
        self.state = target

    def _settle(self, order_id=None, message=None, error=None) -> ReconciliationOutcome:
        self._outcome = ReconciliationOutcome(
            attempt_id=self.attempt_id,
            state=self.state,
            order_id=order_id,
            message=message,
            error=error,
        )
        return self._outcome

    def _fail(self, error: StorefrontError, message: str | None = None) -> ReconciliationOutcome:
        self._transition(ReconciliationState.ORDER_FAILED)
        logger.warning(
            "Checkout failed",
            attempt_id=self.attempt_id,
            error_type=type(error).__name__,
            error=error.message,
        )
        return self._settle(message=message or error.message, error=error)

    @property
    def outcome(self) -> ReconciliationOutcome | None:
        return self._outcome

    # -------------------------------------------------------------------
    # Workflow
    # -------------------------------------------------------------------
    def run(self, client_secret: str | None) -> ReconciliationOutcome:
        """Reconcile the payment behind ``client_secret``. Runs at most once.

        Always returns a settled outcome: an error nobody mapped still moves
        the attempt to ``order_failed`` and leaves the cart untouched.
        """
        if self._started:
            logger.info("Checkout already reconciled, skipping", attempt_id=self.attempt_id)
            return self._outcome
        self._started = True

        try:
            return self._reconcile(client_secret)
        except Exception as exc:
            if ReconciliationState.ORDER_FAILED not in _VALID_TRANSITIONS[self.state]:
                raise
            logger.exception("Checkout raised unexpectedly", attempt_id=self.attempt_id, state=self.state.value)
            if self.state == ReconciliationState.SUBMITTING_ORDER:
                return self._fail(PersistenceFailure(ORDER_FAILED_MESSAGE, cause=repr(exc)))
            return self._fail(UpstreamFailure("Could not confirm your payment. Please try again.", cause=repr(exc)))

    def _reconcile(self, client_secret: str | None) -> ReconciliationOutcome:
        try:
            confirmation = self.gateway.retrieve_payment_intent(client_secret)
        except StorefrontError as exc:
            return self._fail(exc)

        if confirmation.status == PaymentStatus.PROCESSING:
            return self._settle(message=PROCESSING_MESSAGE)

        if confirmation.status != PaymentStatus.SUCCEEDED:
            return self._fail(
                InvalidRequest(confirmation.failure_message or "Payment failed. Please try again."),
            )

        self._transition(ReconciliationState.SUBMITTING_ORDER)
        return self._submit(confirmation)

    def _submit(self, confirmation: PaymentConfirmation) -> ReconciliationOutcome:
        # Read the cart as it is now, right before submitting
        cart = self.cart_store.snapshot()
        if cart.is_empty() or cart.shipping_address is None:
            return self._fail(InvalidRequest(EMPTY_CART_MESSAGE))

        order_data = build_order_request(cart, confirmation, paid_at=datetime.now(UTC))
        try:
            order = self.submitter.submit(order_data, token=self.token, idempotency_key=self.attempt_id)
        except StorefrontError as exc:
            return self._fail(exc, message=exc.message or ORDER_FAILED_MESSAGE)

        self._transition(ReconciliationState.ORDER_CONFIRMED)
        order_id = str(order.get("_id") or order.get("id"))
        # Record the outcome before touching the cart, so it survives a failed clear
        outcome = self._settle(order_id=order_id, message="Your order has been placed!")
        self.cart_store.clear()

        logger.info("Checkout completed", attempt_id=self.attempt_id, order_id=order_id)
        return outcome
