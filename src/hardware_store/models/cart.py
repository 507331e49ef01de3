from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Text, UniqueConstraint
from sqlalchemy import ForeignKey, func

from hardware_store.db import Base, BigIntegerPK


class CartItem(Base):
    """
    One persisted cart line: a (user, product) pair with a quantity.

    There is no separate carts table -- a user's cart is simply the set of
    rows carrying their user_id. The unique constraint is what makes the
    add-to-cart upsert (ON CONFLICT ... DO UPDATE) possible.

    quantity must be > 0 -- removing an item means deleting the row, not
    setting quantity to 0.
    """

    __tablename__ = "cart_items"

    id = Column(BigIntegerPK, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)
    product_id = Column(
        Text, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    quantity = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),
        CheckConstraint("quantity > 0", name="ck_cart_item_quantity"),
    )

    def __repr__(self) -> str:
        return (
            f"<CartItem user_id={self.user_id!r} product_id={self.product_id!r} "
            f"qty={self.quantity}>"
        )
