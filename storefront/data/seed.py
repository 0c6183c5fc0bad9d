# storefront/data/seed.py
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.database import SessionLocal
from storefront.data.models import ProductModel, ProductImageModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    {"name": "Galaxy S24", "brand": "Samsung", "type": "Mobile", "amount": Decimal("799.00"), "rating": 4.6,
     "description": "Flagship phone with a 6.2 inch display"},
    {"name": "iPhone 15", "brand": "Apple", "type": "Mobile", "amount": Decimal("829.00"), "rating": 4.7,
     "description": "Dynamic Island and USB-C"},
    {"name": "Watch Series 9", "brand": "Apple", "type": "Watch", "amount": Decimal("399.00"), "rating": 4.5,
     "description": "Always-on retina smart watch"},
    {"name": "EOS R50", "brand": "Canon", "type": "Dslr", "amount": Decimal("679.99"), "rating": 4.4,
     "description": "Compact mirrorless camera for creators"},
]


def seed(db: Session | None = None) -> int:
    own_session = db is None
    db = db or SessionLocal()
    try:
        # nie nadpisujemy: seed tylko gdy katalog pusty
        if db.query(ProductModel).first():
            return 0

        for data in DEMO_PRODUCTS:
            product = ProductModel(is_active=True, banner_url=f"{data['name'].lower().replace(' ', '-')}.png", **data)
            product.product_images.append(ProductImageModel(image_url=f"{data['name'].lower().replace(' ', '-')}-1.png"))
            db.add(product)

        db.commit()
        logger.info(f"Seeded {len(DEMO_PRODUCTS)} demo products")
        return len(DEMO_PRODUCTS)
    finally:
        if own_session:
            db.close()
