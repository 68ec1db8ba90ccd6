"""Product aggregate with Variant and Color entities.

This is the catalog record the default catalog adapter reads. Storefront
administration owns it; the cart only ever sees it as a ``ProductSnapshot``.
Image collections are stored as JSON text.
"""

import json

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, HasMany, Integer, String, Text

from storefront.catalog.port import ColorSnapshot, ProductSnapshot, VariantSnapshot, normalize_color_key
from storefront.domain import storefront
from storefront.errors import Conflict, NotFound


def _load_list(raw) -> tuple[str, ...]:
    return tuple(json.loads(raw)) if raw else ()


@storefront.entity(part_of="Product")
class ProductColor:
    """A color swatch offered by the product."""

    name: String(required=True, max_length=50)
    hex: String(max_length=9)
    images: Text()  # JSON array of image paths


@storefront.entity(part_of="Product")
class ProductVariant:
    """A size/weight option with its own stock and, optionally, its own price."""

    label: String(required=True, max_length=100)
    quantity: Integer(min_value=0, default=0)
    mrp: Float(min_value=0.0)
    sale_price: Float(min_value=0.0)
    image: String(max_length=500)
    images: Text()  # JSON array of image paths
    color_images: Text()  # JSON object: color key -> image path


@storefront.aggregate
class Product:
    """A catalog product, priced at product level and optionally per variant."""

    product_code: String(required=True, max_length=50, unique=True)
    title: String(required=True, max_length=255)
    slug: String(max_length=255)
    feature_image: String(max_length=500)
    gallery_images: Text()  # JSON array of image paths
    mrp: Float(required=True, min_value=0.0)
    sale_price: Float(required=True, min_value=0.0)
    base_stock: Integer(min_value=0, default=0)
    is_active: Boolean(default=True)
    colors: HasMany(ProductColor)
    variants: HasMany(ProductVariant)

    @invariant.post
    def sale_price_cannot_exceed_mrp(self):
        if self.sale_price is not None and self.mrp is not None and self.sale_price > self.mrp:
            raise ValidationError({"sale_price": ["Sale price cannot exceed MRP"]})

    @classmethod
    def create(
        cls,
        product_code,
        title,
        mrp,
        sale_price,
        slug=None,
        feature_image=None,
        gallery_images=None,
        base_stock=0,
        **kwargs,
    ):
        return cls(
            product_code=product_code,
            title=title,
            slug=slug,
            feature_image=feature_image,
            gallery_images=json.dumps(list(gallery_images or [])),
            mrp=mrp,
            sale_price=sale_price,
            base_stock=base_stock,
            **kwargs,
        )

    def add_color(self, name, hex=None, images=None, **kwargs):
        color = ProductColor(name=name, hex=hex, images=json.dumps(list(images or [])), **kwargs)
        self.add_colors(color)
        return color

    def add_variant(
        self, label, quantity=0, mrp=None, sale_price=None, image=None, images=None, color_images=None, **kwargs
    ):
        variant = ProductVariant(
            **kwargs,
            label=label,
            quantity=quantity,
            mrp=mrp,
            sale_price=sale_price,
            image=image,
            images=json.dumps(list(images or [])),
            color_images=json.dumps(color_images or {}),
        )
        self.add_variants(variant)
        return variant

    def deactivate(self):
        self.is_active = False

    def debit_stock(self, variant_id, quantity):
        """Take ``quantity`` units out of the variant (or base) stock."""
        if variant_id is None:
            if quantity > self.base_stock:
                raise Conflict("Requested quantity exceeds available stock", available=self.base_stock)
            self.base_stock -= quantity
            return self.base_stock

        variant = next((v for v in self.variants if str(v.id) == str(variant_id)), None)
        if variant is None:
            raise NotFound("Variant not found")
        if quantity > variant.quantity:
            raise Conflict("Requested quantity exceeds available stock", available=variant.quantity)
        variant.quantity -= quantity
        return variant.quantity

    def to_snapshot(self) -> ProductSnapshot:
        return ProductSnapshot(
            id=str(self.id),
            product_code=self.product_code,
            title=self.title,
            slug=self.slug,
            is_active=bool(self.is_active),
            mrp=self.mrp,
            sale_price=self.sale_price,
            base_stock=self.base_stock or 0,
            feature_image=self.feature_image,
            gallery_images=_load_list(self.gallery_images),
            colors=tuple(
                ColorSnapshot(name=c.name, hex=c.hex, images=_load_list(c.images)) for c in self.colors
            ),
            variants=tuple(
                VariantSnapshot(
                    id=str(v.id),
                    label=v.label,
                    quantity=v.quantity or 0,
                    mrp=v.mrp,
                    sale_price=v.sale_price,
                    image=v.image,
                    images=_load_list(v.images),
                    color_images={
                        normalize_color_key(key): image
                        for key, image in (json.loads(v.color_images) if v.color_images else {}).items()
                    },
                )
                for v in self.variants
            ),
        )
