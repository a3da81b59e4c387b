"""Configurable fake payment gateway for development and testing.

Simulates a gateway without external calls. Intents are kept in memory and
report whatever outcome the gateway is configured with when they are read
back, so checkout can be exercised for success, processing and failure.
"""

from uuid import uuid4

from shared.errors import InvalidRequest, UpstreamFailure

from payments.gateway.port import (
    PaymentConfirmation,
    PaymentGateway,
    PaymentIntent,
    PaymentStatus,
    intent_id_from_client_secret,
)


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.outcome: PaymentStatus = PaymentStatus.SUCCEEDED
        self.failure_message: str = "Your card was declined."
        self.unavailable: bool = False
        self.intents: dict[str, PaymentIntent] = {}
        self.calls: list[dict] = []

    def configure(
        self,
        outcome: PaymentStatus = PaymentStatus.SUCCEEDED,
        failure_message: str = "Your card was declined.",
        unavailable: bool = False,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.outcome = outcome
        self.failure_message = failure_message
        self.unavailable = unavailable

    def create_payment_intent(self, amount: int, currency: str) -> PaymentIntent:
        self.calls.append({"method": "create_payment_intent", "amount": amount, "currency": currency})
        if self.unavailable:
            raise UpstreamFailure("Payment gateway unavailable")
        if amount <= 0:
            raise InvalidRequest("Amount must be greater than zero")

        intent_id = f"pi_fake{uuid4().hex[:16]}"
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:12]}",
            amount=amount,
            currency=currency,
            status="requires_payment_method",
        )
        self.intents[intent_id] = intent
        return intent

    def retrieve_payment_intent(self, client_secret: str) -> PaymentConfirmation:
        self.calls.append({"method": "retrieve_payment_intent", "client_secret": client_secret})
        intent_id = intent_id_from_client_secret(client_secret)
        if self.unavailable:
            raise UpstreamFailure("Payment gateway unavailable")

        if self.outcome == PaymentStatus.FAILED:
            return PaymentConfirmation(
                status=PaymentStatus.FAILED,
                payment_intent_id=intent_id,
                gateway_status="requires_payment_method",
                failure_message=self.failure_message,
            )
        return PaymentConfirmation(
            status=self.outcome,
            payment_intent_id=intent_id,
            gateway_status=self.outcome.value,
        )
