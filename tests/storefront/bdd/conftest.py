"""Shared BDD fixtures and step definitions for checkout scenarios."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from storefront.cart.cart import Cart
from storefront.cart.items import AddToCart
from storefront.customer.addresses import AddAddress
from storefront.identity.owner import user_owner_key
from storefront.order.order import Order

USER_ID = "user-bdd"


@pytest.fixture()
def shopper():
    return {"user_id": USER_ID, "owner_key": user_owner_key(USER_ID), "address_id": None}


@pytest.fixture()
def outcome():
    """Container for the result or error of the last checkout attempt."""
    return {"result": None, "exc": None}


def _add(shopper, product_id, quantity, variant_id=None):
    current_domain.process(
        AddToCart(
            owner_key=shopper["owner_key"],
            user_id=shopper["user_id"],
            product_id=product_id,
            variant_id=variant_id,
            quantity=quantity,
        ),
        asynchronous=False,
    )


def shopper_cart(shopper):
    return current_domain.repository_for(Cart).for_owner(shopper["owner_key"])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a signed-in shopper with a saved address")
def signed_in_shopper(shopper):
    shopper["address_id"] = current_domain.process(
        AddAddress(
            user_id=shopper["user_id"],
            full_name="Asha Rao",
            phone="9876543210",
            pincode="560001",
            state="Karnataka",
            city="Bengaluru",
            address_line1="12 MG Road",
        ),
        asynchronous=False,
    )


@given(parsers.cfparse("the cart holds {qty:d} jars of honey"))
def cart_holds_honey(shopper, qty):
    _add(shopper, "prod-honey", qty)


@given(parsers.cfparse('the cart holds {qty:d} tee in size "{variant_id}"'))
def cart_holds_tee(shopper, qty, variant_id):
    _add(shopper, "prod-tee", qty, variant_id=variant_id)


@given(parsers.cfparse('the tee in size "{variant_id}" has {qty:d} left'))
def tee_stock(catalog, variant_id, qty):
    catalog.set_stock("prod-tee", qty, variant_id=variant_id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_lines(shopper, count):
    assert len(shopper_cart(shopper).lines) == count


@then("no order was placed")
def no_order_placed():
    assert current_domain.repository_for(Order)._dao.query.all().total == 0
