"""Snapshot resolution and live stock checks shared by cart and checkout."""

from dataclasses import dataclass

from storefront.catalog.port import ProductSnapshot, VariantSnapshot, normalize_color_key
from storefront.errors import Conflict, InvalidInput

__all__ = [
    "LineSnapshot",
    "assert_in_stock",
    "live_variant",
    "normalize_color_key",
    "require_variant",
    "resolve_image",
    "resolve_price",
    "resolve_snapshot",
]


@dataclass(frozen=True)
class LineSnapshot:
    """Price and display values copied onto a cart line when it is written."""

    title: str
    image: str | None
    mrp: float
    sale_price: float


def require_variant(product: ProductSnapshot, variant_id) -> VariantSnapshot | None:
    """Return the selected variant, enforcing a selection on variant-bearing products."""
    if not product.has_variants:
        return None
    if not variant_id:
        raise InvalidInput("Please select a variant", field="variantId")
    variant = product.variant(variant_id)
    if variant is None:
        raise InvalidInput("Invalid variant selected", field="variantId")
    return variant


def resolve_price(product: ProductSnapshot, variant: VariantSnapshot | None) -> tuple[float, float]:
    if variant is not None and variant.has_own_price:
        return float(variant.mrp), float(variant.sale_price)
    return float(product.mrp or 0), float(product.sale_price or 0)


def resolve_image(product: ProductSnapshot, variant: VariantSnapshot | None, color_key: str | None) -> str | None:
    """Most specific image wins: variant color, then variant, then product."""
    if variant is not None:
        image = variant.image_for_color(color_key) or variant.image or next(iter(variant.images), None)
        if image:
            return image
    return product.feature_image or next(iter(product.gallery_images), None)


def resolve_snapshot(product: ProductSnapshot, variant: VariantSnapshot | None, color_key: str | None) -> LineSnapshot:
    mrp, sale_price = resolve_price(product, variant)
    return LineSnapshot(
        title=product.title,
        image=resolve_image(product, variant, color_key),
        mrp=mrp,
        sale_price=sale_price,
    )


def live_variant(product: ProductSnapshot | None, variant_id) -> VariantSnapshot | None:
    """Re-fetch the variant a line points at, failing when it is no longer buyable."""
    if product is None or not product.is_active:
        raise Conflict("Product is not available")
    if variant_id is None:
        if product.has_variants:
            raise Conflict("Selected variant no longer exists")
        return None
    variant = product.variant(variant_id)
    if variant is None:
        raise Conflict("Selected variant no longer exists")
    return variant


def assert_in_stock(product: ProductSnapshot, variant: VariantSnapshot | None, quantity: int) -> int:
    """Fail unless ``quantity`` units are available; returns the available count."""
    available = product.available_stock(variant)
    if available <= 0:
        raise Conflict("This item is out of stock", available=0)
    if quantity > available:
        raise Conflict(f"Only {available} left in stock", available=available)
    return available
