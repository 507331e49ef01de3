from sqlalchemy import BigInteger, Boolean, CheckConstraint, Column, DateTime, Integer, Text
from sqlalchemy import ForeignKey, func
from sqlalchemy.orm import relationship

from hardware_store.db import Base, BigIntegerPK


class Category(Base):
    """
    Top-level grouping for products (e.g. Roofing, Power Tools).

    slug is the URL-safe form of the name used by the storefront
    (/categories/power-tools).
    """

    __tablename__ = "categories"

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    slug = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    image = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    products = relationship("Product", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category id={self.id} slug={self.slug!r}>"


class Product(Base):
    """
    A purchasable catalog item.

    id is an opaque string (UUID) so it can be handed to clients as the cart's
    product reference. Prices are whole currency units: UGX has no minor unit
    in circulation, so 35000 means UGX 35,000.

    original_price is set when the item is on sale and shows the struck-out
    price; it is never used for totals.
    """

    __tablename__ = "products"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(BigInteger, nullable=False)
    original_price = Column(BigInteger, nullable=True)
    image = Column(Text, nullable=True)
    badge = Column(Text, nullable=True)
    category_id = Column(BigInteger, ForeignKey("categories.id"), nullable=True)
    stock_quantity = Column(Integer, nullable=False, default=0)
    is_featured = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price"),
        CheckConstraint("stock_quantity >= 0", name="ck_product_stock"),
    )

    category = relationship("Category", back_populates="products")

    def __repr__(self) -> str:
        return f"<Product id={self.id!r} name={self.name!r}>"
