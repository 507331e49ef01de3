from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, Integer, Text
from sqlalchemy import ForeignKey, func
from sqlalchemy.orm import relationship

from hardware_store.db import Base, BigIntegerPK

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")
PAYMENT_METHODS = ("mobile-money", "card", "cash-on-delivery")


class Order(Base):
    """
    A placed order.

    status is constrained to a fixed set of values using a CHECK constraint
    rather than a database ENUM type, so adding a status is a plain
    ALTER TABLE.

    subtotal, shipping_fee, tax and total are all stored: they are what the
    customer was charged, regardless of later catalog price changes.
    """

    __tablename__ = "orders"

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)
    status = Column(Text, nullable=False, default="pending")
    subtotal = Column(BigInteger, nullable=False)
    shipping_fee = Column(BigInteger, nullable=False, default=0)
    tax = Column(BigInteger, nullable=False, default=0)
    total = Column(BigInteger, nullable=False)
    currency = Column(Text, nullable=False, default="UGX")
    shipping_address = Column(Text, nullable=False)
    payment_method = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending','processing','shipped','delivered','cancelled')",
            name="ck_order_status",
        ),
        CheckConstraint("total >= 0", name="ck_order_total"),
    )

    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id} status={self.status!r} total={self.total}>"


class OrderItem(Base):
    """
    A single line item within an order.

    product_name and unit_price are snapshotted at purchase time so the order
    still reads correctly after the product is renamed or repriced.
    """

    __tablename__ = "order_items"

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    order_id = Column(
        BigInteger, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    product_id = Column(Text, ForeignKey("products.id"), nullable=False)
    product_name = Column(Text, nullable=False)
    unit_price = Column(BigInteger, nullable=False)
    quantity = Column(Integer, nullable=False)
    subtotal = Column(BigInteger, nullable=False)

    __table_args__ = (
        CheckConstraint("unit_price >= 0", name="ck_item_unit_price"),
        CheckConstraint("quantity > 0", name="ck_item_quantity"),
    )

    order = relationship("Order", back_populates="items")

    def __repr__(self) -> str:
        return (
            f"<OrderItem id={self.id} product_id={self.product_id!r} "
            f"qty={self.quantity}>"
        )
