"""Shopping Cart aggregate (CQRS) — session-scoped cart that feeds checkout.

The cart belongs to one browsing session. It holds at most one line per
product, snapshots product name, price and image at the moment the product is
added (prices are never re-fetched), and carries the shipping address captured
before payment. Totals are derived on demand and never stored.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject
from shared.errors import InvalidQuantity

from ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    ShippingAddressSaved,
)
from ordering.domain import ordering


@dataclass(frozen=True)
class CatalogueProduct:
    """Product details supplied by the catalogue at add-to-cart time."""

    id: str
    name: str
    price: float
    images: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "CatalogueProduct":
        return cls(
            id=str(data.get("_id") or data["id"]),
            name=data["name"],
            price=float(data["price"]),
            images=list(data.get("images") or []),
        )


def _check_quantity(quantity) -> None:
    # bool is an int subclass; True must not count as one unit
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        raise InvalidQuantity(f"Quantity must be an integer, got {quantity!r}")


@ordering.value_object(part_of="ShoppingCart")
class CartShippingAddress:
    """Address as captured by the shipping form.

    Not validated here; the order's ShippingAddress enforces required fields
    when the order is persisted.
    """

    address = String(max_length=255)
    city = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100)


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image = String(max_length=1000)
    added_at = DateTime()


@ordering.aggregate
class ShoppingCart:
    session_id = String(max_length=255)
    items = HasMany(CartItem)
    shipping_address = ValueObject(CartShippingAddress)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, session_id):
        """Create an empty cart whose identity is the session key."""
        now = datetime.now(UTC)
        return cls(
            id=session_id,
            session_id=session_id,
            created_at=now,
            updated_at=now,
        )

    def _find(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product: CatalogueProduct, quantity: int):
        """Add a product to the cart, or increase its quantity if already present."""
        _check_quantity(quantity)
        if quantity <= 0:
            raise InvalidQuantity(f"Quantity must be positive, got {quantity}")

        now = datetime.now(UTC)
        existing = self._find(product.id)

        if existing:
            existing.quantity += quantity
            new_quantity = existing.quantity
            unit_price = existing.unit_price
        else:
            self.add_items(
                CartItem(
                    product_id=product.id,
                    name=product.name,
                    unit_price=product.price,
                    quantity=quantity,
                    image=product.images[0] if product.images else None,
                    added_at=now,
                )
            )
            new_quantity = quantity
            unit_price = product.price

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product.id),
                quantity_added=quantity,
                new_quantity=new_quantity,
                unit_price=unit_price,
            )
        )

    def remove_item(self, product_id):
        """Remove the line for a product. Absent products are ignored."""
        item = self._find(product_id)
        if item is None:
            return

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                product_id=str(product_id),
            )
        )

    def update_quantity(self, product_id, quantity: int):
        """Set an item's quantity. Zero or less removes the item."""
        _check_quantity(quantity)

        item = self._find(product_id)
        if item is None:
            return

        if quantity <= 0:
            self.remove_item(product_id)
            return

        previous_quantity = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def save_shipping_address(self, address: dict):
        """Replace the shipping address with whatever the form captured."""
        self.shipping_address = CartShippingAddress(
            address=address.get("address"),
            city=address.get("city"),
            postal_code=address.get("postal_code") or address.get("postalCode"),
            country=address.get("country"),
        )
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ShippingAddressSaved(
                cart_id=str(self.id),
                city=self.shipping_address.city,
                country=self.shipping_address.country,
            )
        )

    def clear(self):
        """Drop every item and the shipping address."""
        removed = list(self.items)
        for item in removed:
            self.remove_items(item)
        self.shipping_address = None
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                items_removed_count=len(removed),
                cleared_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    def total_item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def total_price(self) -> float:
        return round(sum(item.unit_price * item.quantity for item in self.items), 2)

    def is_empty(self) -> bool:
        return not self.items
