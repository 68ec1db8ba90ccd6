"""Domain tests for switching a line to another variant or color."""

from dataclasses import replace

import pytest
from storefront.cart.cart import Cart
from storefront.cart.events import CartLineOptionsChanged
from storefront.errors import Conflict, InvalidInput, NotFound


def _make_cart():
    return Cart.create(owner_key="u:user-001", user_id="user-001")


class TestChangeOptionsInPlace:
    def test_moves_line_to_new_variant_and_reprices(self, tee):
        cart = _make_cart()
        line = cart.add_product(tee, variant_id="var-l", quantity=1)

        target = cart.change_options(line.id, tee, variant_id="var-m", color_key="Navy")

        assert str(target.id) == str(line.id)
        assert target.variant_id == "var-m"
        assert target.color_key == "navy"
        assert (target.mrp, target.sale_price) == (849.0, 649.0)
        assert target.image == "tee/m-navy.jpg"
        assert len(cart.lines) == 1

    def test_omitted_color_clears_it(self, tee):
        cart = _make_cart()
        line = cart.add_product(tee, variant_id="var-l", color_key="white")
        target = cart.change_options(line.id, tee, variant_id="var-l")
        assert target.color_key is None

    def test_current_quantity_must_fit_new_variant(self, tee):
        cart = _make_cart()
        line = cart.add_product(tee, variant_id="var-l", quantity=3)

        with pytest.raises(Conflict) as exc:
            cart.change_options(line.id, tee, variant_id="var-m")

        assert exc.value.available == 2
        assert cart.find_line(line.id).variant_id == "var-l"

    def test_sold_out_variant_is_rejected(self, tee):
        cart = _make_cart()
        line = cart.add_product(tee, variant_id="var-l")
        with pytest.raises(Conflict):
            cart.change_options(line.id, tee, variant_id="var-xl")

    def test_unknown_variant_is_invalid(self, tee):
        cart = _make_cart()
        line = cart.add_product(tee, variant_id="var-l")
        with pytest.raises(InvalidInput):
            cart.change_options(line.id, tee, variant_id="var-unknown")

    def test_color_outside_product_palette_is_invalid(self, tee):
        cart = _make_cart()
        line = cart.add_product(tee, variant_id="var-l")
        with pytest.raises(InvalidInput):
            cart.change_options(line.id, tee, variant_id="var-l", color_key="Crimson")

    def test_unknown_line_fails_not_found(self, tee):
        cart = _make_cart()
        with pytest.raises(NotFound):
            cart.change_options("no-such-line", tee, variant_id="var-l")

    def test_deleted_product_fails_not_found(self, tee):
        cart = _make_cart()
        line = cart.add_product(tee, variant_id="var-l")
        with pytest.raises(NotFound):
            cart.change_options(line.id, None, variant_id="var-l")

    def test_inactive_product_fails_conflict(self, tee):
        cart = _make_cart()
        line = cart.add_product(tee, variant_id="var-l")
        with pytest.raises(Conflict):
            cart.change_options(line.id, replace(tee, is_active=False), variant_id="var-l")


class TestChangeOptionsMerge:
    def test_collision_merges_into_existing_line(self, tee):
        cart = _make_cart()
        moving = cart.add_product(tee, variant_id="var-l", color_key="navy", quantity=1)
        existing = cart.add_product(tee, variant_id="var-m", color_key="navy", quantity=1)

        target = cart.change_options(moving.id, tee, variant_id="var-m", color_key="Navy")

        assert len(cart.lines) == 1
        assert str(target.id) == str(existing.id)
        assert target.quantity == 2
        assert cart.find_line(moving.id) is None

    def test_merge_adopts_new_price_snapshot(self, tee):
        cart = _make_cart()
        moving = cart.add_product(tee, variant_id="var-l", quantity=1)
        cart.add_product(replace(tee, variants=(replace(tee.variants[0], mrp=800.0, sale_price=600.0),)), "var-m")

        target = cart.change_options(moving.id, tee, variant_id="var-m")

        assert (target.mrp, target.sale_price) == (849.0, 649.0)

    def test_merged_quantity_over_stock_fails_and_keeps_both_lines(self, tee):
        cart = _make_cart()
        moving = cart.add_product(tee, variant_id="var-l", quantity=2)
        cart.add_product(tee, variant_id="var-m", quantity=1)

        with pytest.raises(Conflict) as exc:
            cart.change_options(moving.id, tee, variant_id="var-m")

        assert exc.value.available == 2
        assert len(cart.lines) == 2

    def test_merge_keys_stay_unique(self, tee):
        cart = _make_cart()
        a = cart.add_product(tee, variant_id="var-l", color_key="white")
        cart.add_product(tee, variant_id="var-l", color_key="navy")
        cart.change_options(a.id, tee, variant_id="var-l", color_key="navy")

        keys = [line.merge_key for line in cart.lines]
        assert len(keys) == len(set(keys))

    def test_raises_options_changed_event_with_merge_source(self, tee):
        cart = _make_cart()
        moving = cart.add_product(tee, variant_id="var-l", quantity=1)
        cart.add_product(tee, variant_id="var-m", quantity=1)

        cart.change_options(moving.id, tee, variant_id="var-m")

        event = cart._events[-1]
        assert isinstance(event, CartLineOptionsChanged)
        assert event.merged_from_line_id == str(moving.id)
        assert event.quantity == 2
