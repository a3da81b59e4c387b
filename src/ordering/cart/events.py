"""Domain events for the ShoppingCart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the cart, or its quantity was increased."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity_added = Integer(required=True)
    new_quantity = Integer(required=True)
    unit_price = Float(required=True)


@ordering.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart item was set to a new value."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemRemoved:
    """An item was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.event(part_of="ShoppingCart")
class ShippingAddressSaved:
    """A shipping address was captured on the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    city = String()
    country = String()


@ordering.event(part_of="ShoppingCart")
class CartCleared:
    """All items and the shipping address were dropped from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    items_removed_count = Integer(required=True)
    cleared_at = DateTime(required=True)
