"""The session-scoped handle over a ShoppingCart.

A CartStore is constructed explicitly for one session key and given the
repository it persists to. Every mutation loads the cart, applies the change
and writes it back, so reopening a store for the same session (a page reload)
sees the same cart.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.cart.cart import CatalogueProduct, ShoppingCart

logger = structlog.get_logger(__name__)


class CartStore:
    def __init__(self, session_id: str, repository=None):
        self.session_id = session_id
        self._repository = repository
        self._closed = False

    @property
    def repository(self):
        if self._repository is None:
            self._repository = current_domain.repository_for(ShoppingCart)
        return self._repository

    def _load(self) -> ShoppingCart:
        if self._closed:
            raise RuntimeError(f"Cart store for session {self.session_id} is closed")
        try:
            return self.repository.get(self.session_id)
        except ObjectNotFoundError:
            cart = ShoppingCart.create(self.session_id)
            self.repository.add(cart)
            return cart

    def _mutate(self, operation, *args):
        cart = self._load()
        getattr(cart, operation)(*args)
        self.repository.add(cart)
        return cart

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, product: CatalogueProduct | dict, quantity: int) -> None:
        if isinstance(product, dict):
            product = CatalogueProduct.from_dict(product)
        self._mutate("add_item", product, quantity)

    def remove_item(self, product_id: str) -> None:
        self._mutate("remove_item", product_id)

    def update_quantity(self, product_id: str, quantity: int) -> None:
        self._mutate("update_quantity", product_id, quantity)

    def save_shipping_address(self, address: dict) -> None:
        self._mutate("save_shipping_address", address)

    def clear(self) -> None:
        self._mutate("clear")
        logger.info("Cart cleared", session_id=self.session_id)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def items(self):
        return list(self._load().items)

    @property
    def shipping_address(self):
        return self._load().shipping_address

    def total_item_count(self) -> int:
        return self._load().total_item_count()

    def total_price(self) -> float:
        return self._load().total_price()

    def snapshot(self) -> ShoppingCart:
        """Return the current cart state, loaded fresh from the repository."""
        return self._load()

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def close(self) -> None:
        """Tear the store down at the end of a session; the cart is emptied."""
        if self._closed:
            return
        self.clear()
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed
