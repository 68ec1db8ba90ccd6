"""Cart aggregate: one cart per owner key, lines unique by merge key.

The cart stores a price/display snapshot on each line and revalidates live
stock whenever a quantity or option change could oversell. Writes are
version-checked by ``CartRepository.save``.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from storefront.cart.events import (
    CartCleared,
    CartLineAdded,
    CartLineOptionsChanged,
    CartLineQuantityChanged,
    CartLineRemoved,
    CartLinesCheckedOut,
    GuestCartMerged,
)
from storefront.cart.snapshot import (
    assert_in_stock,
    live_variant,
    normalize_color_key,
    require_variant,
    resolve_snapshot,
)
from storefront.domain import storefront
from storefront.errors import Conflict, InvalidInput, NotFound


@storefront.entity(part_of="Cart")
class CartLine:
    product_id = Identifier(required=True)
    variant_id = Identifier()
    color_key = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    title = String(max_length=255)
    image = String(max_length=500)
    mrp = Float(min_value=0.0, default=0.0)
    sale_price = Float(min_value=0.0, default=0.0)
    is_selected = Boolean(default=True)
    added_at = DateTime()
    updated_at = DateTime()

    @property
    def merge_key(self):
        return (
            str(self.product_id),
            str(self.variant_id) if self.variant_id else None,
            normalize_color_key(self.color_key),
        )

    def apply_snapshot(self, snapshot, now):
        self.title = snapshot.title
        self.image = snapshot.image
        self.mrp = snapshot.mrp
        self.sale_price = snapshot.sale_price
        self.updated_at = now


@storefront.aggregate
class Cart:
    owner_key = String(required=True, max_length=100, unique=True)
    user_id = Identifier()  # Set for signed-in owners
    guest_id = String(max_length=64)  # Set for anonymous owners
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def lines_must_have_distinct_merge_keys(self):
        keys = [line.merge_key for line in self.lines]
        if len(keys) != len(set(keys)):
            raise ValidationError({"lines": ["A cart cannot hold two lines for the same product selection"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, owner_key, user_id=None, guest_id=None):
        now = datetime.now(UTC)
        return cls(
            owner_key=owner_key,
            user_id=user_id,
            guest_id=guest_id,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def find_line(self, line_id):
        return next((line for line in self.lines if str(line.id) == str(line_id)), None)

    def line_for(self, merge_key):
        return next((line for line in self.lines if line.merge_key == merge_key), None)

    def selected_lines(self):
        return [line for line in self.lines if line.is_selected is True]

    def _line_or_not_found(self, line_id):
        line = self.find_line(line_id)
        if line is None:
            raise NotFound("Cart item not found")
        return line

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_product(self, product, variant_id=None, color_key=None, quantity=1):
        """Add a selection, merging into the line with the same merge key.

        Stock is not checked here; it is enforced when the
        quantity changes and at checkout.
        """
        if product is None:
            raise NotFound("Product not found")
        if quantity < 1:
            raise InvalidInput("Quantity must be at least 1", field="qty")

        variant = require_variant(product, variant_id)
        color_key = normalize_color_key(color_key)
        snapshot = resolve_snapshot(product, variant, color_key)
        merge_key = (str(product.id), str(variant.id) if variant else None, color_key)
        now = datetime.now(UTC)

        line = self.line_for(merge_key)
        if line is not None:
            line.quantity += quantity
            line.apply_snapshot(snapshot, now)
        else:
            line = CartLine(
                product_id=str(product.id),
                variant_id=str(variant.id) if variant else None,
                color_key=color_key,
                quantity=quantity,
                title=snapshot.title,
                image=snapshot.image,
                mrp=snapshot.mrp,
                sale_price=snapshot.sale_price,
                is_selected=True,
                added_at=now,
                updated_at=now,
            )
            self.add_lines(line)

        self.updated_at = now
        self.raise_(
            CartLineAdded(
                cart_id=str(self.id),
                owner_key=self.owner_key,
                line_id=str(line.id),
                product_id=str(product.id),
                variant_id=line.variant_id,
                color_key=color_key,
                quantity=quantity,
                line_quantity=line.quantity,
            )
        )
        return line

    def set_quantity(self, line_id, quantity, product):
        """Set an absolute quantity after checking the live stock of the line's variant."""
        if quantity < 1:
            raise InvalidInput("Quantity must be at least 1", field="qty")

        line = self._line_or_not_found(line_id)
        variant = live_variant(product, line.variant_id)
        assert_in_stock(product, variant, quantity)

        previous_quantity = line.quantity
        now = datetime.now(UTC)
        line.quantity = quantity
        line.updated_at = now
        self.updated_at = now

        self.raise_(
            CartLineQuantityChanged(
                cart_id=str(self.id),
                line_id=str(line.id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )
        return line

    def change_options(self, line_id, product, variant_id, color_key=None):
        """Move a line to another variant/color of the same product.

        If the new selection collides with another line, the two are merged
        into that line and this one is dropped.
        """
        line = self._line_or_not_found(line_id)
        if product is None:
            raise NotFound("Product not found")
        if not product.is_active:
            raise Conflict("Product is not available")

        if product.has_variants:
            variant = require_variant(product, variant_id)
        elif variant_id:
            raise InvalidInput("Invalid variant selected", field="variantId")
        else:
            variant = None

        color_key = normalize_color_key(color_key)
        if color_key is not None and not product.offers_color(color_key):
            raise InvalidInput("Invalid color for this product", field="colorKey")

        available = assert_in_stock(product, variant, line.quantity)

        merge_key = (str(product.id), str(variant.id) if variant else None, color_key)
        target = self.line_for(merge_key)
        merged_from = None
        if target is not None and str(target.id) != str(line.id):
            merged_quantity = target.quantity + line.quantity
            if merged_quantity > available:
                raise Conflict(f"Only {available} left in stock", available=available)
            merged_from = line
        else:
            target = line

        snapshot = resolve_snapshot(product, variant, color_key)
        now = datetime.now(UTC)
        with atomic_change(self):
            if merged_from is not None:
                target.quantity += merged_from.quantity
                self.remove_lines(merged_from)
            target.variant_id = str(variant.id) if variant else None
            target.color_key = color_key
            target.apply_snapshot(snapshot, now)
            self.updated_at = now

        self.raise_(
            CartLineOptionsChanged(
                cart_id=str(self.id),
                line_id=str(target.id),
                merged_from_line_id=str(merged_from.id) if merged_from is not None else None,
                variant_id=target.variant_id,
                color_key=color_key,
                quantity=target.quantity,
            )
        )
        return target

    def remove_line(self, line_id):
        """Remove one line. Removing an absent line fails so callers can detect no-ops."""
        line = self._line_or_not_found(line_id)
        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartLineRemoved(cart_id=str(self.id), line_id=str(line_id)))

    def clear(self):
        count = len(self.lines)
        with atomic_change(self):
            for line in list(self.lines):
                self.remove_lines(line)
            self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id), lines_removed=count))

    # -------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------
    def select_line(self, line_id, selected):
        line = self._line_or_not_found(line_id)
        now = datetime.now(UTC)
        line.is_selected = bool(selected)
        line.updated_at = now
        self.updated_at = now
        return line

    def select_all(self, selected):
        now = datetime.now(UTC)
        for line in self.lines:
            line.is_selected = bool(selected)
            line.updated_at = now
        self.updated_at = now

    # -------------------------------------------------------------------
    # Checkout and identity transitions
    # -------------------------------------------------------------------
    def check_out_lines(self, line_ids, order_id):
        """Drop exactly the lines that were converted into ``order_id``."""
        wanted = {str(line_id) for line_id in line_ids}
        converted = [line for line in self.lines if str(line.id) in wanted]
        with atomic_change(self):
            for line in converted:
                self.remove_lines(line)
            self.updated_at = datetime.now(UTC)
        self.raise_(
            CartLinesCheckedOut(
                cart_id=str(self.id),
                order_id=str(order_id),
                lines_removed=len(converted),
            )
        )

    def absorb(self, guest_cart):
        """Fold a guest cart's lines into this cart using the Add merge rule.

        Colliding lines sum their quantities and take the guest line's
        snapshot, which is the most recent write the shopper made.
        """
        now = datetime.now(UTC)
        merged = 0
        with atomic_change(self):
            for guest_line in guest_cart.lines:
                line = self.line_for(guest_line.merge_key)
                if line is not None:
                    line.quantity += guest_line.quantity
                    line.title = guest_line.title
                    line.image = guest_line.image
                    line.mrp = guest_line.mrp
                    line.sale_price = guest_line.sale_price
                    line.updated_at = now
                else:
                    self.add_lines(
                        CartLine(
                            product_id=guest_line.product_id,
                            variant_id=guest_line.variant_id,
                            color_key=guest_line.color_key,
                            quantity=guest_line.quantity,
                            title=guest_line.title,
                            image=guest_line.image,
                            mrp=guest_line.mrp,
                            sale_price=guest_line.sale_price,
                            is_selected=guest_line.is_selected,
                            added_at=guest_line.added_at or now,
                            updated_at=now,
                        )
                    )
                merged += 1
            self.updated_at = now

        self.raise_(
            GuestCartMerged(
                cart_id=str(self.id),
                source_owner_key=guest_cart.owner_key,
                lines_merged=merged,
            )
        )
        return merged
