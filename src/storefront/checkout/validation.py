"""Selected-lines validation shared by the checkout summary and order placement.

Validation is all-or-nothing: one unavailable product, vanished variant or
short stock fails the whole checkout. Prices come from the cart snapshot.
"""

from collections import Counter
from dataclasses import dataclass

import structlog

from storefront.cart.snapshot import assert_in_stock, live_variant
from storefront.catalog.port import ProductSnapshot, VariantSnapshot
from storefront.errors import Conflict, InvalidState

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CheckoutLine:
    line_id: str
    product_id: str
    product_code: str | None
    variant_id: str | None
    color_key: str | None
    quantity: int
    title: str
    image: str | None
    mrp: float
    sale_price: float

    @property
    def line_total(self) -> float:
        return self.sale_price * self.quantity

    def to_dict(self) -> dict:
        return {
            "lineId": self.line_id,
            "productId": self.product_id,
            "productCode": self.product_code,
            "variantId": self.variant_id,
            "colorKey": self.color_key,
            "qty": self.quantity,
            "title": self.title,
            "image": self.image,
            "mrp": self.mrp,
            "salePrice": self.sale_price,
            "lineTotal": self.line_total,
        }


@dataclass(frozen=True)
class CheckoutTotals:
    subtotal: float
    mrp_total: float
    savings: float

    def to_dict(self) -> dict:
        return {"subtotal": self.subtotal, "mrpTotal": self.mrp_total, "savings": self.savings}


def compute_totals(lines) -> CheckoutTotals:
    subtotal = sum(line.sale_price * line.quantity for line in lines)
    mrp_total = sum(line.mrp * line.quantity for line in lines)
    return CheckoutTotals(subtotal=subtotal, mrp_total=mrp_total, savings=max(0.0, mrp_total - subtotal))


def _checkout_line(line, product: ProductSnapshot, variant: VariantSnapshot | None) -> CheckoutLine:
    return CheckoutLine(
        line_id=str(line.id),
        product_id=str(line.product_id),
        product_code=product.product_code,
        variant_id=str(line.variant_id) if line.variant_id else None,
        color_key=line.color_key,
        quantity=line.quantity,
        title=line.title or product.title,
        image=line.image,
        mrp=float(line.mrp or 0),
        sale_price=float(line.sale_price or 0),
    )


def _stock_key(line):
    return str(line.product_id), str(line.variant_id) if line.variant_id else None


def validate_selected_lines(cart, catalog) -> list[CheckoutLine]:
    """Revalidate the cart's selected lines against live catalog state."""
    if cart is None or not cart.lines:
        raise InvalidState("Cart is empty")

    selected = cart.selected_lines()
    if not selected:
        raise InvalidState("No items selected for checkout")

    # Lines that differ only by colour draw on the same stock
    requested = Counter()
    for line in selected:
        requested[_stock_key(line)] += line.quantity

    products = catalog.get_products(line.product_id for line in selected)
    validated = []
    for line in selected:
        product = products.get(str(line.product_id))
        try:
            variant = live_variant(product, line.variant_id)
            assert_in_stock(product, variant, requested[_stock_key(line)])
        except Conflict as exc:
            logger.warning(
                "checkout_line_invalid",
                owner_key=cart.owner_key,
                line_id=str(line.id),
                product_id=str(line.product_id),
                reason=exc.message,
            )
            raise Conflict(exc.message, available=exc.available, lineId=str(line.id)) from exc
        validated.append(_checkout_line(line, product, variant))

    return validated
