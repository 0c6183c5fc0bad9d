#storefront/data/models/product.py
from sqlalchemy import Column, Integer, ForeignKey, String, Numeric, Boolean, Float, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    brand = Column(String, nullable=False, default="", index=True)
    type = Column(String, nullable=False, default="")
    amount = Column(Numeric(10, 2), nullable=False)
    banner_url = Column(String, nullable=True)
    rating = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    product_images = relationship(
        "ProductImageModel",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImageModel.id",
    )


class ProductImageModel(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(String, nullable=False)

    product = relationship("ProductModel", back_populates="product_images")
