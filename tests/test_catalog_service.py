from decimal import Decimal

import pytest

from storefront.data.models import ProductImageModel, ProductModel
from storefront.domain.errors import NotFoundError
from storefront.services.catalog_service import CatalogService


@pytest.fixture
def catalog(gateway):
    return CatalogService(gateway)


@pytest.fixture
def shelf(db):
    rows = [
        ProductModel(name="Galaxy S24", brand="Samsung", type="Mobile", amount=Decimal("799.00"),
                     description="Flagship phone", is_active=True),
        ProductModel(name="iPhone 15", brand="Apple", type="Mobile", amount=Decimal("829.00"),
                     description="USB-C phone", is_active=True),
        ProductModel(name="Watch Series 9", brand="Apple", type="Watch", amount=Decimal("399.00"),
                     description="Smart watch", is_active=True),
        ProductModel(name="Old Phone", brand="Apple", type="Mobile", amount=Decimal("99.00"),
                     description="Discontinued", is_active=False),
    ]
    db.add_all(rows)
    db.commit()
    return rows


def test_detail_round_trip_with_empty_images(db, catalog):
    product = ProductModel(name="EOS R50", brand="Canon", type="Dslr", amount=Decimal("679.99"),
                           description="Mirrorless camera", banner_url="eos.png", rating=4.4, is_active=True)
    db.add(product)
    db.commit()

    detail = catalog.detail(product.id)

    assert detail.name == "EOS R50"
    assert detail.brand == "Canon"
    assert detail.type == "Dslr"
    assert detail.amount == Decimal("679.99")
    assert detail.banner_url == "eos.png"
    assert detail.rating == 4.4
    assert detail.is_active is True
    assert detail.product_images == []


def test_detail_includes_images(db, catalog, shelf):
    db.add(ProductImageModel(product_id=shelf[0].id, image_url="s24-1.png"))
    db.add(ProductImageModel(product_id=shelf[0].id, image_url="s24-2.png"))
    db.commit()

    detail = catalog.detail(shelf[0].id)

    assert [img.image_url for img in detail.product_images] == ["s24-1.png", "s24-2.png"]


def test_detail_miss_raises(catalog):
    with pytest.raises(NotFoundError):
        catalog.detail(404)


def test_list_only_active_ordered_by_id(catalog, shelf):
    names = [p.name for p in catalog.list_products()]

    assert names == ["Galaxy S24", "iPhone 15", "Watch Series 9"]


def test_list_brand_filter_and_range(catalog, shelf):
    assert [p.name for p in catalog.list_products(brand="Apple")] == ["iPhone 15", "Watch Series 9"]
    assert [p.name for p in catalog.list_products(from_=1, to=1)] == ["iPhone 15"]


def test_search_is_case_insensitive_across_columns(catalog, shelf):
    assert [p.name for p in catalog.search("APPLE")] == ["iPhone 15", "Watch Series 9"]
    assert [p.name for p in catalog.search("smart")] == ["Watch Series 9"]
    assert [p.name for p in catalog.search("mobile")] == ["Galaxy S24", "iPhone 15"]


def test_search_excludes_inactive_and_empty_query(catalog, shelf):
    assert catalog.search("discontinued") == []
    assert catalog.search("") == []
    assert catalog.search(None) == []
