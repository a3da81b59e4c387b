"""Tests for the Order aggregate: placement and fulfillment status."""

from datetime import UTC, datetime

import pytest
from ordering.order.events import OrderPlaced, OrderStatusUpdated
from ordering.order.order import FulfillmentStatus, Order
from protean.exceptions import ValidationError
from shared.errors import InvalidRequest, InvalidStatus

ADDRESS = {"address": "12 Temple Road", "city": "Kandy", "postal_code": "20000", "country": "Sri Lanka"}


def _line(**overrides):
    line = {"product_id": "prod-oak", "name": "Oak Frame", "qty": 2, "image": "oak.jpg", "price": 10.0}
    line.update(overrides)
    return line


def _place(**overrides):
    kwargs = {
        "owner_id": "user-001",
        "items_data": [_line(), _line(product_id="prod-walnut", name="Walnut Frame", qty=3, price=5.0)],
        "shipping_address": ADDRESS,
        "total_price": 35.0,
        "is_paid": True,
        "paid_at": datetime(2026, 10, 17, 9, 30, tzinfo=UTC),
        "payment_result": {"id": "pi_123", "status": "succeeded"},
    }
    kwargs.update(overrides)
    return Order.place(**kwargs)


class TestPlaceOrder:
    def test_copies_checkout_data(self):
        order = _place()

        assert str(order.owner_id) == "user-001"
        assert len(order.items) == 2
        assert order.items[0].qty == 2
        assert order.shipping_address.city == "Kandy"
        assert order.total_price == 35.0
        assert order.is_paid is True
        assert order.payment_result.id == "pi_123"

    def test_starts_pending(self):
        order = _place()
        assert order.status == FulfillmentStatus.PENDING.value
        assert order.delivered_at is None

    def test_stamps_created_and_updated(self):
        order = _place()
        assert order.created_at is not None
        assert order.updated_at == order.created_at

    def test_without_payment_result(self):
        order = _place(is_paid=False, paid_at=None, payment_result=None)
        assert order.payment_result is None
        assert order.is_paid is False

    def test_raises_order_placed(self):
        order = _place()

        event = order._events[-1]
        assert isinstance(event, OrderPlaced)
        assert event.item_count == 5
        assert event.total_price == 35.0

    def test_no_items_is_rejected(self):
        with pytest.raises(InvalidRequest, match="No order items"):
            _place(items_data=[])

    def test_total_must_match_items(self):
        with pytest.raises(InvalidRequest) as exc:
            _place(total_price=40.0)
        assert exc.value.context["expected_total"] == 35.0

    def test_total_within_a_cent_is_accepted(self):
        order = _place(total_price=35.004)
        assert order.total_price == 35.004

    def test_incomplete_address_is_rejected(self):
        with pytest.raises(ValidationError):
            _place(shipping_address={"address": "12 Temple Road", "city": "Kandy", "postal_code": "20000"})

    def test_item_needs_an_image(self):
        with pytest.raises(ValidationError):
            _place(items_data=[_line(image=None)], total_price=20.0)

    def test_item_qty_must_be_positive(self):
        with pytest.raises(ValidationError):
            _place(items_data=[_line(qty=0)], total_price=0.0)


class TestUpdateStatus:
    @pytest.mark.parametrize("status", ["processing", "shipped", "cancelled", "pending"])
    def test_moves_to_status_without_delivery_stamp(self, status):
        order = _place()
        order.update_status(status)

        assert order.status == status
        assert order.delivered_at is None

    def test_delivered_stamps_delivered_at(self):
        order = _place()
        order.update_status("delivered")

        assert order.status == FulfillmentStatus.DELIVERED.value
        assert order.delivered_at is not None
        assert order.updated_at == order.delivered_at

    def test_changes_are_not_restricted_to_forward_moves(self):
        order = _place()
        order.update_status("shipped")
        order.update_status("processing")
        assert order.status == "processing"

    def test_unknown_status_is_rejected(self):
        order = _place()
        with pytest.raises(InvalidStatus, match="Invalid status provided"):
            order.update_status("lost")
        assert order.status == FulfillmentStatus.PENDING.value

    def test_status_values_are_case_sensitive(self):
        order = _place()
        with pytest.raises(InvalidStatus):
            order.update_status("Delivered")

    def test_raises_status_updated(self):
        order = _place()
        order.update_status("delivered")

        event = order._events[-1]
        assert isinstance(event, OrderStatusUpdated)
        assert event.previous_status == "pending"
        assert event.new_status == "delivered"
        assert event.delivered_at is not None
