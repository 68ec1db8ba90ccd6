"""Cart lifecycle management: clearing and guest-to-user merge."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.domain import storefront
from storefront.identity.owner import guest_owner_key, user_owner_key

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Cart")
class ClearCart:
    owner_key = String(required=True, max_length=100)


@storefront.command(part_of="Cart")
class MergeGuestCart:
    """Fold the cart of a guest token into the signed-in user's cart."""

    user_id = Identifier(required=True)
    guest_id = String(required=True, max_length=64)


@storefront.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_owner(command.owner_key)
        # Clearing an absent or empty cart is a successful no-op
        if cart is None or not cart.lines:
            return 0

        removed = len(cart.lines)
        cart.clear()
        repo.save(cart)
        logger.info("cart_cleared", owner_key=command.owner_key, lines_removed=removed)
        return removed

    @handle(MergeGuestCart)
    def merge_guest_cart(self, command):
        repo = current_domain.repository_for(Cart)
        guest_cart = repo.for_owner(guest_owner_key(command.guest_id))
        if guest_cart is None or not guest_cart.lines:
            return 0

        owner_key = user_owner_key(command.user_id)
        cart = repo.for_owner_or_create(owner_key, user_id=command.user_id)
        merged = cart.absorb(guest_cart)
        guest_cart.clear()

        repo.save(cart)
        repo.save(guest_cart)
        logger.info(
            "guest_cart_merged",
            owner_key=owner_key,
            source_owner_key=guest_cart.owner_key,
            lines_merged=merged,
        )
        return merged
