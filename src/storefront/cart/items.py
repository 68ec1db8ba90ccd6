"""Cart line management: commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalog import get_catalog
from storefront.domain import storefront
from storefront.errors import NotFound

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Cart")
class AddToCart:
    owner_key = String(required=True, max_length=100)
    user_id = Identifier()
    guest_id = String(max_length=64)
    product_id = Identifier(required=True)
    variant_id = Identifier()
    color_key = String(max_length=50)
    quantity = Integer(min_value=1, default=1)


@storefront.command(part_of="Cart")
class SetLineQuantity:
    owner_key = String(required=True, max_length=100)
    line_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class ChangeLineOptions:
    owner_key = String(required=True, max_length=100)
    line_id = Identifier(required=True)
    variant_id = Identifier()
    color_key = String(max_length=50)


@storefront.command(part_of="Cart")
class RemoveCartLine:
    owner_key = String(required=True, max_length=100)
    line_id = Identifier(required=True)


def _existing_cart(repo, owner_key):
    # Line-level commands on an owner without a cart can only miss the line
    cart = repo.for_owner(owner_key)
    if cart is None:
        raise NotFound("Cart item not found")
    return cart


@storefront.command_handler(part_of=Cart)
class ManageCartLinesHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_owner_or_create(command.owner_key, user_id=command.user_id, guest_id=command.guest_id)
        product = get_catalog().get_product(command.product_id)
        line = cart.add_product(
            product,
            variant_id=command.variant_id,
            color_key=command.color_key,
            quantity=command.quantity or 1,
        )
        repo.save(cart)
        logger.info(
            "cart_line_added",
            owner_key=command.owner_key,
            line_id=str(line.id),
            product_id=command.product_id,
            quantity=line.quantity,
        )
        return str(line.id)

    @handle(SetLineQuantity)
    def set_line_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = _existing_cart(repo, command.owner_key)
        line = cart.find_line(command.line_id)
        product = get_catalog().get_product(line.product_id) if line is not None else None
        cart.set_quantity(command.line_id, command.quantity, product)
        repo.save(cart)
        logger.info("cart_line_quantity_set", owner_key=command.owner_key, line_id=command.line_id)
        return command.line_id

    @handle(ChangeLineOptions)
    def change_line_options(self, command):
        repo = current_domain.repository_for(Cart)
        cart = _existing_cart(repo, command.owner_key)
        line = cart.find_line(command.line_id)
        product = get_catalog().get_product(line.product_id) if line is not None else None
        target = cart.change_options(
            command.line_id,
            product,
            variant_id=command.variant_id,
            color_key=command.color_key,
        )
        repo.save(cart)
        logger.info(
            "cart_line_options_changed",
            owner_key=command.owner_key,
            line_id=command.line_id,
            target_line_id=str(target.id),
        )
        return str(target.id)

    @handle(RemoveCartLine)
    def remove_cart_line(self, command):
        repo = current_domain.repository_for(Cart)
        cart = _existing_cart(repo, command.owner_key)
        cart.remove_line(command.line_id)
        repo.save(cart)
        logger.info("cart_line_removed", owner_key=command.owner_key, line_id=command.line_id)
