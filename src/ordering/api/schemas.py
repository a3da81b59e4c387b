"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Wire names are camelCase to match the storefront
frontend; request line items carry ``quantity`` while stored and returned
order items carry ``qty``.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: str
    city: str
    postal_code: str = Field(alias="postalCode")
    country: str


class PaymentResultSchema(BaseModel):
    id: str | None = None
    status: str | None = None


class CartLineSchema(BaseModel):
    """A cart line as the client submits it."""

    product: str
    name: str
    price: float = Field(ge=0)
    image: str | None = None
    quantity: int


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "orderItems": [
                        {
                            "product": "665f1c2e9b1d4a0012ab34cd",
                            "name": "Oak Frame 8x10",
                            "price": 24.5,
                            "image": "https://res.cloudinary.com/demo/oak-8x10.jpg",
                            "quantity": 2,
                        }
                    ],
                    "shippingAddress": {
                        "address": "12 Temple Road",
                        "city": "Kandy",
                        "postalCode": "20000",
                        "country": "Sri Lanka",
                    },
                    "totalPrice": 49.0,
                    "isPaid": True,
                    "paidAt": "2026-10-17T09:30:00Z",
                    "paymentResult": {"id": "pi_3Q0abc", "status": "succeeded"},
                }
            ]
        },
    }

    order_items: list[CartLineSchema] = Field(default_factory=list, alias="orderItems")
    shipping_address: ShippingAddressSchema = Field(alias="shippingAddress")
    total_price: float = Field(alias="totalPrice")
    is_paid: bool = Field(default=False, alias="isPaid")
    paid_at: datetime | None = Field(default=None, alias="paidAt")
    payment_result: PaymentResultSchema | None = Field(default=None, alias="paymentResult")


class UpdateOrderStatusRequest(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderItemSchema(BaseModel):
    product: str
    name: str
    qty: int
    image: str | None = None
    price: float


class OrderSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    user: str
    order_items: list[OrderItemSchema] = Field(alias="orderItems")
    shipping_address: ShippingAddressSchema = Field(alias="shippingAddress")
    total_price: float = Field(alias="totalPrice")
    is_paid: bool = Field(alias="isPaid")
    paid_at: datetime | None = Field(default=None, alias="paidAt")
    payment_result: PaymentResultSchema | None = Field(default=None, alias="paymentResult")
    order_status: str = Field(alias="orderStatus")
    delivered_at: datetime | None = Field(default=None, alias="deliveredAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @classmethod
    def from_order(cls, order) -> "OrderSchema":
        return cls(
            id=str(order.id),
            user=str(order.owner_id),
            order_items=[
                OrderItemSchema(
                    product=str(item.product_id),
                    name=item.name,
                    qty=item.qty,
                    image=item.image,
                    price=item.price,
                )
                for item in order.items
            ],
            shipping_address=ShippingAddressSchema(
                address=order.shipping_address.address,
                city=order.shipping_address.city,
                postal_code=order.shipping_address.postal_code,
                country=order.shipping_address.country,
            ),
            total_price=order.total_price,
            is_paid=bool(order.is_paid),
            paid_at=order.paid_at,
            payment_result=(
                PaymentResultSchema(id=order.payment_result.id, status=order.payment_result.status)
                if order.payment_result
                else None
            ),
            order_status=order.status,
            delivered_at=order.delivered_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderResponse(BaseModel):
    success: bool = True
    order: OrderSchema


class MyOrdersResponse(BaseModel):
    success: bool = True
    orders: list[OrderSchema]


class OrderListResponse(BaseModel):
    success: bool = True
    count: int
    orders: list[OrderSchema]
