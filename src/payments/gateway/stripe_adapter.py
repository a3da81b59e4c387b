"""Stripe payment gateway adapter.

Talks to the Stripe REST API with httpx: creates PaymentIntents with automatic
payment methods and reads their status back after the browser completes
payment. Every call carries an explicit timeout.
"""

import httpx
import structlog
from shared.errors import UpstreamFailure

from payments.gateway.port import (
    PaymentConfirmation,
    PaymentGateway,
    PaymentIntent,
    PaymentStatus,
    intent_id_from_client_secret,
)

logger = structlog.get_logger(__name__)

STRIPE_API_BASE = "https://api.stripe.com"

# Stripe intent statuses that are neither success nor in flight
_STATUS_MAP = {
    "succeeded": PaymentStatus.SUCCEEDED,
    "processing": PaymentStatus.PROCESSING,
}


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str, timeout: float = 10.0, client: httpx.Client | None = None) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.client = client or httpx.Client(base_url=STRIPE_API_BASE, timeout=timeout)

    def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            response = self.client.request(
                method,
                path,
                auth=(self.api_key, ""),
                timeout=self.timeout,
                **kwargs,
            )
        except httpx.TimeoutException as exc:
            logger.error("Stripe request timed out", path=path)
            raise UpstreamFailure("Payment gateway timed out") from exc
        except httpx.HTTPError as exc:
            logger.error("Stripe request failed", path=path, error=str(exc))
            raise UpstreamFailure("Payment gateway unreachable") from exc

        try:
            payload = response.json() if response.content else {}
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if response.is_error:
            message = (payload.get("error") or {}).get("message", "Payment gateway error")
            logger.error("Stripe returned an error", path=path, status_code=response.status_code, error=message)
            raise UpstreamFailure(message, status_code=response.status_code)
        return payload

    def create_payment_intent(self, amount: int, currency: str) -> PaymentIntent:
        payload = self._request(
            "POST",
            "/v1/payment_intents",
            data={
                "amount": amount,
                "currency": currency,
                "automatic_payment_methods[enabled]": "true",
            },
        )
        return PaymentIntent(
            id=payload["id"],
            client_secret=payload["client_secret"],
            amount=payload["amount"],
            currency=payload["currency"],
            status=payload["status"],
        )

    def retrieve_payment_intent(self, client_secret: str) -> PaymentConfirmation:
        intent_id = intent_id_from_client_secret(client_secret)
        payload = self._request("GET", f"/v1/payment_intents/{intent_id}")

        gateway_status = payload.get("status")
        status = _STATUS_MAP.get(gateway_status, PaymentStatus.FAILED)
        failure_message = None
        if status == PaymentStatus.FAILED:
            failure_message = (payload.get("last_payment_error") or {}).get(
                "message", "Payment failed. Please try again."
            )
        return PaymentConfirmation(
            status=status,
            payment_intent_id=payload.get("id", intent_id),
            gateway_status=gateway_status,
            failure_message=failure_message,
        )
