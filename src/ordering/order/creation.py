"""Order creation — command and handler.

Clients submit line items with a ``quantity`` field; the order stores it as
``qty``. The rename happens here, in one place, and nowhere else.
"""

import json

import structlog
from protean import handle
from protean.fields import Boolean, DateTime, Float, Identifier, Text
from protean.utils.globals import current_domain
from shared.errors import InvalidRequest, PersistenceFailure, Unauthenticated

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


def to_order_line(item: dict) -> dict:
    """Map a client line item onto the stored OrderItem shape."""
    if "quantity" not in item:
        raise InvalidRequest("Order item is missing 'quantity'", item=item.get("name"))
    return {
        "product_id": item.get("product"),
        "name": item.get("name"),
        "qty": item["quantity"],
        "image": item.get("image"),
        "price": item.get("price"),
    }


@ordering.command(part_of="Order")
class PlaceOrder:
    owner_id = Identifier()  # Checked in the handler; absence is an auth failure
    items = Text(required=True)  # JSON: list of client line items
    shipping_address = Text(required=True)  # JSON: address dict
    total_price = Float(required=True)
    is_paid = Boolean(default=False)
    paid_at = DateTime()
    payment_result = Text()  # JSON: {id, status}


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        if not command.owner_id:
            raise Unauthenticated()

        client_items = json.loads(command.items) if isinstance(command.items, str) else command.items
        if not client_items:
            raise InvalidRequest("No order items")

        shipping_address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )
        payment_result = (
            json.loads(command.payment_result) if isinstance(command.payment_result, str) else command.payment_result
        )

        order = Order.place(
            owner_id=command.owner_id,
            items_data=[to_order_line(item) for item in client_items],
            shipping_address=shipping_address,
            total_price=command.total_price,
            is_paid=command.is_paid,
            paid_at=command.paid_at,
            payment_result=payment_result,
        )

        try:
            current_domain.repository_for(Order).add(order)
        except Exception as exc:
            logger.error("Failed to persist order", owner_id=str(command.owner_id), error=str(exc))
            raise PersistenceFailure() from exc

        logger.info(
            "Order placed",
            order_id=str(order.id),
            owner_id=str(command.owner_id),
            total_price=order.total_price,
        )
        return str(order.id)
