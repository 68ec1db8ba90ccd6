"""Domain tests for the Product catalog record."""

import pytest
from protean.exceptions import ValidationError
from storefront.catalog.product import Product
from storefront.errors import Conflict


def _make_product(**overrides):
    fields = {
        "product_code": "TEE-001",
        "title": "Everyday Cotton Tee",
        "mrp": 799.0,
        "sale_price": 599.0,
        "gallery_images": ["tee/1.jpg"],
    }
    fields.update(overrides)
    return Product.create(**fields)


class TestProduct:
    def test_sale_price_cannot_exceed_mrp(self):
        with pytest.raises(ValidationError):
            _make_product(sale_price=900.0)

    def test_snapshot_carries_variants_colors_and_images(self):
        product = _make_product()
        product.add_color("Navy", hex="#1f2a44", images=["tee/navy.jpg"])
        variant = product.add_variant("M", quantity=3, mrp=849.0, sale_price=649.0, color_images={"Navy": "m.jpg"})

        snapshot = product.to_snapshot()

        assert snapshot.gallery_images == ("tee/1.jpg",)
        assert snapshot.colors[0].key == "navy"
        assert snapshot.variant(variant.id).quantity == 3
        assert snapshot.variant(variant.id).image_for_color("navy") == "m.jpg"

    def test_debit_variant_stock(self):
        product = _make_product()
        variant = product.add_variant("M", quantity=3)

        assert product.debit_stock(variant.id, 2) == 1

    def test_debit_base_stock(self):
        product = _make_product(base_stock=4)
        assert product.debit_stock(None, 4) == 0

    def test_debit_beyond_stock_fails(self):
        product = _make_product(base_stock=1)
        with pytest.raises(Conflict) as exc:
            product.debit_stock(None, 2)
        assert exc.value.available == 1
