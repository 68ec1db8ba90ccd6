"""Cart repository: owner-key lookup and version-checked writes."""

import structlog
from protean.exceptions import ExpectedVersionError

from storefront.cart.cart import Cart
from storefront.domain import storefront
from storefront.errors import StaleCartError

logger = structlog.get_logger(__name__)


@storefront.repository(part_of=Cart)
class CartRepository:
    def for_owner(self, owner_key: str) -> Cart | None:
        """Return the owner's cart, or ``None`` without creating one."""
        carts = self._dao.query.filter(owner_key=owner_key).all().items
        return carts[0] if carts else None

    def for_owner_or_create(self, owner_key: str, user_id=None, guest_id=None) -> Cart:
        cart = self.for_owner(owner_key)
        if cart is None:
            cart = Cart.create(owner_key=owner_key, user_id=user_id, guest_id=guest_id)
            logger.info("cart_created", owner_key=owner_key, cart_id=str(cart.id))
        return cart

    def save(self, cart: Cart) -> Cart:
        """Persist ``cart`` unless another write landed since it was loaded.

        The aggregate version is checked on write; a mismatch means a
        concurrent write won and the whole command must be re-run.
        """
        try:
            self.add(cart)
        except ExpectedVersionError as exc:
            logger.warning("stale_cart_write", owner_key=cart.owner_key, cart_id=str(cart.id))
            raise StaleCartError("Your cart was updated elsewhere, please retry") from exc
        return cart
