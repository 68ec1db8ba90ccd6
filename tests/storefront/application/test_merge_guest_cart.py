"""Application tests for folding a guest cart into a signed-in user's cart."""

from protean import current_domain
from storefront.cart.cart import Cart
from storefront.cart.items import AddToCart
from storefront.cart.management import MergeGuestCart
from storefront.identity.owner import guest_owner_key, user_owner_key

GUEST = "a1b2c3"
USER = "user-001"


def _add(owner_key, product_id, quantity=1, variant_id=None, **ids):
    return current_domain.process(
        AddToCart(owner_key=owner_key, product_id=product_id, variant_id=variant_id, quantity=quantity, **ids),
        asynchronous=False,
    )


def _cart(owner_key):
    return current_domain.repository_for(Cart).for_owner(owner_key)


class TestMergeGuestCart:
    def test_guest_lines_move_to_new_user_cart(self):
        _add(guest_owner_key(GUEST), "prod-honey", quantity=2, guest_id=GUEST)

        merged = current_domain.process(MergeGuestCart(user_id=USER, guest_id=GUEST), asynchronous=False)

        assert merged == 1
        user_cart = _cart(user_owner_key(USER))
        assert [(line.product_id, line.quantity) for line in user_cart.lines] == [("prod-honey", 2)]
        assert _cart(guest_owner_key(GUEST)).lines == []

    def test_colliding_lines_sum_quantities(self):
        _add(user_owner_key(USER), "prod-tee", variant_id="var-l", user_id=USER)
        _add(guest_owner_key(GUEST), "prod-tee", quantity=2, variant_id="var-l", guest_id=GUEST)
        _add(guest_owner_key(GUEST), "prod-honey", guest_id=GUEST)

        current_domain.process(MergeGuestCart(user_id=USER, guest_id=GUEST), asynchronous=False)

        lines = {(line.product_id, line.variant_id): line.quantity for line in _cart(user_owner_key(USER)).lines}
        assert lines == {("prod-tee", "var-l"): 3, ("prod-honey", None): 1}

    def test_missing_guest_cart_is_a_no_op(self):
        merged = current_domain.process(MergeGuestCart(user_id=USER, guest_id="unknown"), asynchronous=False)

        assert merged == 0
        assert _cart(user_owner_key(USER)) is None
