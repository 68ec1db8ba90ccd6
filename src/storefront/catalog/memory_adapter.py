"""In-memory catalog: deterministic products and stock for tests and demos."""

from dataclasses import replace

from storefront.catalog.port import Catalog, ProductSnapshot
from storefront.errors import Conflict


class InMemoryCatalog(Catalog):
    """Catalog backed by a dict of snapshots.

    Snapshots are immutable, so every stock change swaps in a new snapshot
    for the product.
    """

    def __init__(self, products=()):
        self._products: dict[str, ProductSnapshot] = {}
        for product in products:
            self.put(product)

    def put(self, product: ProductSnapshot) -> ProductSnapshot:
        self._products[str(product.id)] = product
        return product

    def remove(self, product_id: str) -> None:
        self._products.pop(str(product_id), None)

    def deactivate(self, product_id: str) -> None:
        product = self._products[str(product_id)]
        self._products[str(product_id)] = replace(product, is_active=False)

    def remove_variant(self, product_id: str, variant_id: str) -> None:
        product = self._products[str(product_id)]
        variants = tuple(v for v in product.variants if str(v.id) != str(variant_id))
        self._products[str(product_id)] = replace(product, variants=variants)

    def set_stock(self, product_id: str, quantity: int, variant_id: str | None = None) -> None:
        product = self._products[str(product_id)]
        if variant_id is None:
            self._products[str(product_id)] = replace(product, base_stock=quantity)
            return
        variants = tuple(
            replace(v, quantity=quantity) if str(v.id) == str(variant_id) else v for v in product.variants
        )
        self._products[str(product_id)] = replace(product, variants=variants)

    def get_product(self, product_id: str) -> ProductSnapshot | None:
        return self._products.get(str(product_id))

    def debit_stock(self, product_id: str, variant_id: str | None, quantity: int) -> int:
        product = self._products.get(str(product_id))
        if product is None:
            raise Conflict("Product is no longer available")

        variant = product.variant(variant_id)
        if variant_id is not None and variant is None:
            raise Conflict("Selected variant no longer exists")

        available = product.available_stock(variant)
        if quantity > available:
            raise Conflict("Requested quantity exceeds available stock", available=available)

        remaining = available - quantity
        self.set_stock(product.id, remaining, variant_id=variant.id if variant else None)
        return remaining
