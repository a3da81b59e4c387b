"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cart.store import CartStore
from pytest_bdd import parsers, then


@pytest.fixture()
def cart_store():
    return CartStore("sess-bdd-cart")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart holds {count:d} items"))
def _(cart_store, count):
    assert cart_store.total_item_count() == count


@then(parsers.cfparse("the cart still holds {count:d} items"))
def _(cart_store, count):
    assert cart_store.total_item_count() == count


@then("the cart is empty")
def _(cart_store):
    assert cart_store.items == []
