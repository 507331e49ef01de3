from typing import Optional, List, Dict, Any
from sqlalchemy import text
from hardware_store.repositories.base import BaseRepository
from hardware_store.core.exceptions import BusinessLogicError
import logging

logger = logging.getLogger(__name__)

_LINE_SELECT = """
    SELECT
        ci.id          AS cart_item_id,
        ci.product_id,
        ci.quantity,
        p.name,
        p.price,
        p.image
    FROM cart_items ci
    JOIN products p ON p.id = ci.product_id
"""


class CartRepository(BaseRepository):
    """
    Repository for persisted cart lines

    A cart is the set of cart_items rows for one user_id; every statement is
    scoped by user_id so one identity can never touch another's lines.
    """

    @property
    def table_name(self) -> str:
        return "cart_items"

    def get_lines(self, user_id: str) -> List[Dict[str, Any]]:
        """
        All lines for a user, oldest first, joined with current product
        display fields (name, price, image)
        """
        return self.execute_query(
            _LINE_SELECT + " WHERE ci.user_id = :uid ORDER BY ci.id",
            {"uid": user_id},
        )

    def get_line(self, user_id: str, product_id: str) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(
            _LINE_SELECT + " WHERE ci.user_id = :uid AND ci.product_id = :pid",
            {"uid": user_id, "pid": product_id},
        )

    def add_quantity(
        self,
        user_id: str,
        product_id: str,
        quantity: int,
        max_quantity: int
    ) -> Dict[str, Any]:
        """
        Insert the line or increment its quantity (upsert)

        The limit check and the write share one transaction so the check
        sees the row that is about to be incremented.
        """
        with self.transaction() as conn:
            existing = conn.execute(
                text("SELECT quantity FROM cart_items WHERE user_id = :uid AND product_id = :pid"),
                {"uid": user_id, "pid": product_id},
            ).mappings().first()

            current = existing["quantity"] if existing else 0
            if current + quantity > max_quantity:
                raise BusinessLogicError(
                    f"Total quantity would exceed {max_quantity} (current: {current})",
                    rule="max_item_quantity_exceeded",
                )

            conn.execute(
                text("""
                    INSERT INTO cart_items (user_id, product_id, quantity)
                    VALUES (:uid, :pid, :qty)
                    ON CONFLICT (user_id, product_id)
                    DO UPDATE SET quantity = cart_items.quantity + excluded.quantity,
                                  updated_at = CURRENT_TIMESTAMP
                """),
                {"uid": user_id, "pid": product_id, "qty": quantity},
            )

        logger.debug(f"Cart line {user_id}/{product_id}: {current} -> {current + quantity}")
        return self.get_line(user_id, product_id)

    def set_quantity(self, user_id: str, product_id: str, quantity: int) -> int:
        """Overwrite the quantity of an existing line; returns affected rows"""
        return self.execute_command(
            """
            UPDATE cart_items
            SET quantity = :qty, updated_at = CURRENT_TIMESTAMP
            WHERE user_id = :uid AND product_id = :pid
            """,
            {"qty": quantity, "uid": user_id, "pid": product_id},
        )

    def delete_line(self, user_id: str, product_id: str) -> int:
        return self.execute_command(
            "DELETE FROM cart_items WHERE user_id = :uid AND product_id = :pid",
            {"uid": user_id, "pid": product_id},
        )

    def clear(self, user_id: str) -> int:
        return self.execute_command(
            "DELETE FROM cart_items WHERE user_id = :uid", {"uid": user_id}
        )
