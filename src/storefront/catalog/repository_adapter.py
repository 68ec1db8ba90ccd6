"""Catalog adapter reading the Product aggregate through its repository.

Runs inside the caller's unit of work, so a stock debit made during checkout
commits or rolls back together with the order.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalog.port import Catalog, ProductSnapshot
from storefront.catalog.product import Product
from storefront.errors import Conflict


class RepositoryCatalog(Catalog):
    def get_product(self, product_id: str) -> ProductSnapshot | None:
        try:
            product = current_domain.repository_for(Product).get(str(product_id))
        except ObjectNotFoundError:
            return None
        return product.to_snapshot()

    def debit_stock(self, product_id: str, variant_id: str | None, quantity: int) -> int:
        repo = current_domain.repository_for(Product)
        try:
            product = repo.get(str(product_id))
        except ObjectNotFoundError:
            raise Conflict("Product is no longer available") from None

        remaining = product.debit_stock(variant_id, quantity)
        repo.add(product)
        return remaining
