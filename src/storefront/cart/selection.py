"""Checkout selection: commands and handler.

Selection is a pure flag flip; stock is not revalidated here.
"""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.domain import storefront
from storefront.errors import NotFound


@storefront.command(part_of="Cart")
class SelectCartLine:
    owner_key = String(required=True, max_length=100)
    line_id = Identifier(required=True)
    selected = Boolean(default=True)


@storefront.command(part_of="Cart")
class SelectAllCartLines:
    owner_key = String(required=True, max_length=100)
    selected = Boolean(default=True)


@storefront.command_handler(part_of=Cart)
class CartSelectionHandler:
    @handle(SelectCartLine)
    def select_cart_line(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_owner(command.owner_key)
        if cart is None:
            raise NotFound("Cart item not found")
        cart.select_line(command.line_id, command.selected)
        repo.save(cart)

    @handle(SelectAllCartLines)
    def select_all_cart_lines(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_owner(command.owner_key)
        if cart is None or not cart.lines:
            return
        cart.select_all(command.selected)
        repo.save(cart)
