"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Cart")
class CartLineAdded:
    """A product selection was added to the cart, or merged into an existing line."""

    __version__ = 1

    cart_id = Identifier(required=True)
    owner_key = String(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier()
    color_key = String()
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)


@storefront.event(part_of="Cart")
class CartLineQuantityChanged:
    """A line's quantity was set to a new absolute value."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="Cart")
class CartLineOptionsChanged:
    """A line moved to another variant or color, possibly merging into a sibling line."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    merged_from_line_id = Identifier()
    variant_id = Identifier()
    color_key = String()
    quantity = Integer(required=True)


@storefront.event(part_of="Cart")
class CartLineRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)


@storefront.event(part_of="Cart")
class CartCleared:
    """All lines were removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    lines_removed = Integer(required=True)


@storefront.event(part_of="Cart")
class CartLinesCheckedOut:
    """Selected lines left the cart because they became an order."""

    __version__ = 1

    cart_id = Identifier(required=True)
    order_id = Identifier(required=True)
    lines_removed = Integer(required=True)


@storefront.event(part_of="Cart")
class GuestCartMerged:
    """A guest cart's lines were folded into a signed-in user's cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    source_owner_key = String(required=True)
    lines_merged = Integer(required=True)
