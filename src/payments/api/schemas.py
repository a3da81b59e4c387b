"""Pydantic request/response schemas for the Payments API.

These are external contracts: the frontend's payment form posts the amount
in cents and receives the client secret it confirms payment with.
"""

from pydantic import BaseModel, ConfigDict, Field


class CreatePaymentIntentRequest(BaseModel):
    amount: int = Field(gt=0, description="Amount in cents")
    currency: str = "usd"

    model_config = {"json_schema_extra": {"examples": [{"amount": 4599, "currency": "usd"}]}}


class PaymentIntentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(alias="clientSecret")


class ConfigureGatewayRequest(BaseModel):
    outcome: str = "succeeded"  # succeeded, processing, failed
    failure_message: str = "Your card was declined."
    unavailable: bool = False


class GatewayConfigResponse(BaseModel):
    gateway: str
    outcome: str
    failure_message: str
    unavailable: bool
