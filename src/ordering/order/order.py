"""Order aggregate (CQRS) — durable record of a completed checkout.

An order is written once, when a paid checkout is reconciled, and afterwards
only its fulfillment status changes. Items, address and total are snapshots
taken at checkout time; nothing is recomputed against the live catalogue.

Fulfillment statuses:
    pending → processing → shipped → delivered, or cancelled
Status changes are admin-driven and not restricted to a transition order.
Moving to delivered stamps delivered_at.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)
from shared.errors import InvalidRequest, InvalidStatus

from ordering.domain import ordering
from ordering.order.events import OrderPlaced, OrderStatusUpdated

# Tolerance when comparing the submitted total against the item snapshot
_PRICE_TOLERANCE = 0.01


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class FulfillmentStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships to, frozen at checkout."""

    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@ordering.value_object(part_of="Order")
class PaymentResult:
    """Reference and terminal status reported by the payment gateway."""

    id = String(max_length=255)
    status = String(max_length=50)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A snapshotted line item. Stored quantity is named ``qty``."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    qty = Integer(required=True, min_value=1)
    image = String(required=True, max_length=1000)
    price = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    owner_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress, required=True)
    total_price = Float(required=True, default=0.0)
    is_paid = Boolean(default=False)
    paid_at = DateTime()
    payment_result = ValueObject(PaymentResult)
    status = String(
        choices=FulfillmentStatus,
        default=FulfillmentStatus.PENDING.value,
    )
    delivered_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        owner_id,
        items_data,
        shipping_address,
        total_price,
        is_paid=False,
        paid_at=None,
        payment_result=None,
    ):
        """Create an order from checkout data.

        Args:
            owner_id: Identifier of the authenticated principal.
            items_data: List of dicts in storage shape: product_id, name,
                        qty, image, price.
            shipping_address: Dict with address, city, postal_code, country.
            total_price: Total submitted by the client; must match the items.
            is_paid: Whether the gateway confirmed payment.
            paid_at: When payment was confirmed.
            payment_result: Dict with the gateway's id and status.
        """
        if not items_data:
            raise InvalidRequest("No order items")

        expected_total = round(sum(item["price"] * item["qty"] for item in items_data), 2)
        if abs(expected_total - float(total_price)) > _PRICE_TOLERANCE:
            raise InvalidRequest(
                f"Total price {total_price} does not match items total {expected_total}",
                expected_total=expected_total,
            )

        now = datetime.now(UTC)
        order = cls(
            owner_id=owner_id,
            items=[OrderItem(**item) for item in items_data],
            shipping_address=ShippingAddress(**shipping_address),
            total_price=float(total_price),
            is_paid=is_paid,
            paid_at=paid_at,
            payment_result=PaymentResult(**payment_result) if payment_result else None,
            status=FulfillmentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                owner_id=str(owner_id),
                item_count=sum(item.qty for item in order.items),
                total_price=order.total_price,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Fulfillment
    # -------------------------------------------------------------------
    def update_status(self, new_status: str):
        """Move the order to a new fulfillment status."""
        try:
            target = FulfillmentStatus(new_status)
        except ValueError:
            raise InvalidStatus(
                f"Invalid status provided: {new_status!r}. "
                f"Allowed: {', '.join(s.value for s in FulfillmentStatus)}"
            ) from None

        previous_status = self.status
        now = datetime.now(UTC)
        self.status = target.value
        if target == FulfillmentStatus.DELIVERED:
            self.delivered_at = now
        self.updated_at = now

        self.raise_(
            OrderStatusUpdated(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=target.value,
                delivered_at=self.delivered_at if target == FulfillmentStatus.DELIVERED else None,
                updated_at=now,
            )
        )
