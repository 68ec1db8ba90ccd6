"""Checkout summary: a read-only preview of what placing an order would do."""

from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalog import get_catalog
from storefront.checkout.validation import compute_totals, validate_selected_lines


def checkout_summary(owner_key: str) -> dict:
    cart = current_domain.repository_for(Cart).for_owner(owner_key)
    lines = validate_selected_lines(cart, get_catalog())
    return {
        "items": [line.to_dict() for line in lines],
        "totals": compute_totals(lines).to_dict(),
    }
