"""Catalog port (read interface plus stock debit).

The cart and checkout engines only ever see catalog data through these frozen
snapshots, so tests can install an in-memory catalog with deterministic stock
and production can read the Product aggregate without either side changing.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


def normalize_color_key(value: str | None) -> str | None:
    """Trim and lower-case a color key; blank values collapse to ``None``."""
    if value is None:
        return None
    key = str(value).strip().lower()
    return key or None


def _is_price(value) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


@dataclass(frozen=True)
class ColorSnapshot:
    """A color offered by a product."""

    name: str
    hex: str | None = None
    images: tuple[str, ...] = ()

    @property
    def key(self) -> str | None:
        return normalize_color_key(self.name)


@dataclass(frozen=True)
class VariantSnapshot:
    """A purchasable variant of a product with its own stock."""

    id: str
    label: str
    quantity: int = 0
    mrp: float | None = None
    sale_price: float | None = None
    image: str | None = None
    images: tuple[str, ...] = ()
    color_images: dict[str, str] = field(default_factory=dict)

    @property
    def has_own_price(self) -> bool:
        return _is_price(self.mrp) and _is_price(self.sale_price)

    def image_for_color(self, color_key: str | None) -> str | None:
        if color_key is None:
            return None
        for key, image in self.color_images.items():
            if normalize_color_key(key) == color_key and image:
                return image
        return None


@dataclass(frozen=True)
class ProductSnapshot:
    """Live catalog state of a product at the moment it was read."""

    id: str
    title: str
    mrp: float
    sale_price: float
    product_code: str | None = None
    slug: str | None = None
    is_active: bool = True
    base_stock: int = 0
    feature_image: str | None = None
    gallery_images: tuple[str, ...] = ()
    colors: tuple[ColorSnapshot, ...] = ()
    variants: tuple[VariantSnapshot, ...] = ()

    @property
    def has_variants(self) -> bool:
        return bool(self.variants)

    def variant(self, variant_id) -> VariantSnapshot | None:
        if variant_id is None:
            return None
        return next((v for v in self.variants if str(v.id) == str(variant_id)), None)

    def offers_color(self, color_key: str | None) -> bool:
        return any(color.key == color_key for color in self.colors)

    def available_stock(self, variant: VariantSnapshot | None = None) -> int:
        if variant is not None:
            return variant.quantity or 0
        return self.base_stock or 0


class Catalog(ABC):
    """Abstract catalog interface."""

    @abstractmethod
    def get_product(self, product_id: str) -> ProductSnapshot | None:
        """Return the product, active or not, or ``None`` when it does not exist."""
        ...

    def get_products(self, product_ids) -> dict[str, ProductSnapshot]:
        """Return the existing products among ``product_ids`` keyed by id."""
        products = {}
        for product_id in dict.fromkeys(str(pid) for pid in product_ids):
            product = self.get_product(product_id)
            if product is not None:
                products[product_id] = product
        return products

    @abstractmethod
    def debit_stock(self, product_id: str, variant_id: str | None, quantity: int) -> int:
        """Reduce availability and return the remaining stock.

        Raises ``Conflict`` when less than ``quantity`` is available.
        """
        ...
