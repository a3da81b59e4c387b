"""FastAPI routes for the Payments domain — payment intents."""

import os

from fastapi import APIRouter, HTTPException

from payments.api.schemas import (
    ConfigureGatewayRequest,
    CreatePaymentIntentRequest,
    GatewayConfigResponse,
    PaymentIntentResponse,
)
from payments.gateway import get_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentStatus

payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/intent", response_model=PaymentIntentResponse)
def create_payment_intent(body: CreatePaymentIntentRequest) -> PaymentIntentResponse:
    """Create a payment intent and hand its client secret to the browser."""
    intent = get_gateway().create_payment_intent(amount=body.amount, currency=body.currency)
    return PaymentIntentResponse(client_secret=intent.client_secret)


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only)."""
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    try:
        outcome = PaymentStatus(body.outcome)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown outcome: {body.outcome}") from None

    gateway.configure(
        outcome=outcome,
        failure_message=body.failure_message,
        unavailable=body.unavailable,
    )
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        outcome=gateway.outcome.value,
        failure_message=gateway.failure_message,
        unavailable=gateway.unavailable,
    )
