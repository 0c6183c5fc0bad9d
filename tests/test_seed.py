from storefront.data.models import ProductModel
from storefront.data.seed import DEMO_PRODUCTS, seed


def test_seed_only_fills_empty_catalog(db):
    assert seed(db) == len(DEMO_PRODUCTS)
    assert seed(db) == 0

    products = db.query(ProductModel).all()
    assert len(products) == len(DEMO_PRODUCTS)
    assert all(p.is_active and p.product_images for p in products)
