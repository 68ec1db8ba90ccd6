import pytest
from protean.integrations.pytest import DomainFixture
from storefront.catalog import reset_catalog, set_catalog
from storefront.catalog.memory_adapter import InMemoryCatalog
from storefront.catalog.port import ColorSnapshot, ProductSnapshot, VariantSnapshot


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
def make_honey(**overrides):
    """A product without variants: mrp 500, sale 400, 10 in stock."""
    fields = {
        "id": "prod-honey",
        "product_code": "HNY-250",
        "title": "Wildflower Honey",
        "slug": "wildflower-honey",
        "mrp": 500.0,
        "sale_price": 400.0,
        "base_stock": 10,
        "feature_image": "honey/feature.jpg",
        "gallery_images": ("honey/1.jpg",),
    }
    fields.update(overrides)
    return ProductSnapshot(**fields)


def make_tee(**overrides):
    """A variant product: M (stock 2, own price), L (stock 5, inherits price), XL (sold out)."""
    fields = {
        "id": "prod-tee",
        "product_code": "TEE-001",
        "title": "Everyday Cotton Tee",
        "slug": "everyday-cotton-tee",
        "mrp": 799.0,
        "sale_price": 599.0,
        "feature_image": "tee/feature.jpg",
        "gallery_images": ("tee/1.jpg", "tee/2.jpg"),
        "colors": (
            ColorSnapshot(name="Navy", hex="#1f2a44", images=("tee/navy.jpg",)),
            ColorSnapshot(name="White", hex="#ffffff"),
        ),
        "variants": (
            VariantSnapshot(
                id="var-m",
                label="M",
                quantity=2,
                mrp=849.0,
                sale_price=649.0,
                image="tee/m.jpg",
                color_images={"navy": "tee/m-navy.jpg"},
            ),
            VariantSnapshot(id="var-l", label="L", quantity=5),
            VariantSnapshot(id="var-xl", label="XL", quantity=0, mrp=899.0, sale_price=699.0),
        ),
    }
    fields.update(overrides)
    return ProductSnapshot(**fields)


@pytest.fixture()
def honey():
    return make_honey()


@pytest.fixture()
def tee():
    return make_tee()


@pytest.fixture(autouse=True)
def catalog():
    catalog = InMemoryCatalog([make_honey(), make_tee()])
    set_catalog(catalog)
    yield catalog
    reset_catalog()
