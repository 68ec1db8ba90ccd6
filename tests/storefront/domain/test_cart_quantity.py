"""Domain tests for setting a line's quantity against live stock."""

from dataclasses import replace

import pytest
from storefront.cart.cart import Cart
from storefront.errors import Conflict, InvalidInput, NotFound


def _make_cart_with(product, variant_id=None, quantity=1):
    cart = Cart.create(owner_key="u:user-001", user_id="user-001")
    line = cart.add_product(product, variant_id=variant_id, quantity=quantity)
    return cart, line


class TestSetQuantity:
    def test_sets_absolute_quantity(self, tee):
        cart, line = _make_cart_with(tee, "var-l", quantity=1)
        cart.set_quantity(line.id, 4, tee)
        assert cart.find_line(line.id).quantity == 4

    def test_exceeding_stock_carries_available(self, tee):
        cart, line = _make_cart_with(tee, "var-m", quantity=1)

        with pytest.raises(Conflict) as exc:
            cart.set_quantity(line.id, 3, tee)

        assert exc.value.available == 2
        assert cart.find_line(line.id).quantity == 1

    def test_quantity_equal_to_stock_is_allowed(self, tee):
        cart, line = _make_cart_with(tee, "var-m")
        cart.set_quantity(line.id, 2, tee)
        assert cart.find_line(line.id).quantity == 2

    def test_out_of_stock_variant_fails(self, tee):
        cart, line = _make_cart_with(tee, "var-xl")
        with pytest.raises(Conflict) as exc:
            cart.set_quantity(line.id, 1, tee)
        assert exc.value.available == 0

    def test_products_without_variants_use_base_stock(self, honey):
        cart, line = _make_cart_with(honey)
        with pytest.raises(Conflict) as exc:
            cart.set_quantity(line.id, 11, honey)
        assert exc.value.available == 10

    def test_unknown_line_fails_not_found(self, tee):
        cart, _ = _make_cart_with(tee, "var-l")
        with pytest.raises(NotFound):
            cart.set_quantity("no-such-line", 1, tee)

    def test_deactivated_product_fails_conflict(self, tee):
        cart, line = _make_cart_with(tee, "var-l")
        with pytest.raises(Conflict):
            cart.set_quantity(line.id, 2, replace(tee, is_active=False))

    def test_deleted_product_fails_conflict(self, tee):
        cart, line = _make_cart_with(tee, "var-l")
        with pytest.raises(Conflict):
            cart.set_quantity(line.id, 2, None)

    def test_removed_variant_fails_conflict(self, tee):
        cart, line = _make_cart_with(tee, "var-l")
        without_l = replace(tee, variants=tuple(v for v in tee.variants if v.id != "var-l"))

        with pytest.raises(Conflict) as exc:
            cart.set_quantity(line.id, 2, without_l)
        assert "no longer exists" in exc.value.message

    def test_zero_quantity_is_invalid(self, tee):
        cart, line = _make_cart_with(tee, "var-l")
        with pytest.raises(InvalidInput):
            cart.set_quantity(line.id, 0, tee)
