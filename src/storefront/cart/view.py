"""Read side of the cart: fetch with live catalog enrichment.

Reads never create a cart. Each line keeps its stored snapshot and is paired
with current catalog data, or ``None`` when the product is gone or inactive.
"""

from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalog import get_catalog


def _iso(value):
    return value.isoformat() if value else None


def enrich_product(product):
    if product is None or not product.is_active:
        return None
    return {
        "id": product.id,
        "productCode": product.product_code,
        "title": product.title,
        "slug": product.slug,
        "featureImage": product.feature_image,
        "galleryImages": list(product.gallery_images),
        "mrp": product.mrp,
        "salePrice": product.sale_price,
        "variants": [
            {
                "id": variant.id,
                "label": variant.label,
                "mrp": variant.mrp,
                "salePrice": variant.sale_price,
                "quantity": variant.quantity,
                "image": variant.image,
                "images": list(variant.images),
            }
            for variant in product.variants
        ],
        "colors": [
            {"name": color.name, "key": color.key, "hex": color.hex, "images": list(color.images)}
            for color in product.colors
        ],
    }


def serialize_line(line, product=None):
    return {
        "id": str(line.id),
        "productId": str(line.product_id),
        "variantId": str(line.variant_id) if line.variant_id else None,
        "colorKey": line.color_key,
        "qty": line.quantity,
        "title": line.title,
        "image": line.image,
        "mrp": line.mrp,
        "salePrice": line.sale_price,
        "isSelected": bool(line.is_selected),
        "addedAt": _iso(line.added_at),
        "updatedAt": _iso(line.updated_at),
        "product": enrich_product(product),
    }


def empty_cart(owner_key):
    return {"id": None, "ownerKey": owner_key, "items": []}


def fetch_cart(owner_key: str) -> dict:
    cart = current_domain.repository_for(Cart).for_owner(owner_key)
    if cart is None:
        return empty_cart(owner_key)

    products = get_catalog().get_products(line.product_id for line in cart.lines)
    return {
        "id": str(cart.id),
        "ownerKey": cart.owner_key,
        "items": [serialize_line(line, products.get(str(line.product_id))) for line in cart.lines],
    }
