"""Demo catalog used by ``manage.py seed-catalog`` and the load tests."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalog.product import Product

DEMO_PRODUCTS = [
    {
        "id": "demo-tee",
        "product_code": "TEE-001",
        "title": "Everyday Cotton Tee",
        "slug": "everyday-cotton-tee",
        "mrp": 799.0,
        "sale_price": 599.0,
        "feature_image": "products/tee/feature.jpg",
        "gallery_images": ["products/tee/1.jpg", "products/tee/2.jpg"],
        "colors": [
            {"name": "Navy", "hex": "#1f2a44", "images": ["products/tee/navy.jpg"]},
            {"name": "White", "hex": "#ffffff", "images": ["products/tee/white.jpg"]},
        ],
        "variants": [
            {"id": "demo-tee-m", "label": "M", "quantity": 500, "color_images": {"navy": "products/tee/m-navy.jpg"}},
            {"id": "demo-tee-l", "label": "L", "quantity": 500, "mrp": 849.0, "sale_price": 649.0},
        ],
    },
    {
        "id": "demo-honey",
        "product_code": "HNY-250",
        "title": "Wildflower Honey",
        "slug": "wildflower-honey",
        "mrp": 500.0,
        "sale_price": 400.0,
        "base_stock": 1000,
        "feature_image": "products/honey/feature.jpg",
    },
]


def _exists(repo, product_id):
    try:
        repo.get(product_id)
    except ObjectNotFoundError:
        return False
    return True


def seed_catalog(products=DEMO_PRODUCTS) -> list[str]:
    """Insert the demo products that are not stored yet; returns their ids."""
    repo = current_domain.repository_for(Product)
    seeded = []
    for entry in products:
        if _exists(repo, entry["id"]):
            continue

        product = Product.create(
            id=entry["id"],
            product_code=entry["product_code"],
            title=entry["title"],
            slug=entry.get("slug"),
            mrp=entry["mrp"],
            sale_price=entry["sale_price"],
            base_stock=entry.get("base_stock", 0),
            feature_image=entry.get("feature_image"),
            gallery_images=entry.get("gallery_images"),
        )
        for color in entry.get("colors", []):
            product.add_color(**color)
        for variant in entry.get("variants", []):
            product.add_variant(**variant)
        repo.add(product)
        seeded.append(entry["id"])
    return seeded
