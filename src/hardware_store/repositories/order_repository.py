from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from hardware_store.core.exceptions import BusinessLogicError, DatabaseError, NotFoundError
from hardware_store.repositories.base import BaseRepository
import logging

logger = logging.getLogger(__name__)

_ORDER_COLUMNS = """
    o.id, o.user_id, o.status, o.subtotal, o.shipping_fee, o.tax, o.total,
    o.currency, o.shipping_address, o.payment_method, o.created_at, o.updated_at
"""

_TYPES = {
    "created_at": DateTime(timezone=True),
    "updated_at": DateTime(timezone=True),
}


class OrderRepository(BaseRepository):
    """Repository for orders and their line items"""

    @property
    def table_name(self) -> str:
        return "orders"

    def place_order(
        self,
        user_id: str,
        requested: Optional[Sequence[Tuple[str, int]]],
        shipping_address: str,
        payment_method: str,
        currency: str,
        price_order: Callable[[int], Dict[str, int]]
    ) -> int:
        """
        Atomic checkout:
          1. Resolve the lines (explicit items, or the user's persisted cart)
          2. Decrement stock per line, refusing lines without enough stock
          3. Snapshot names and prices into order + order_items
          4. Clear the user's cart
        Any failure rolls every step back.

        price_order maps the subtotal to {"shipping_fee", "tax", "total"}.
        """
        with self.transaction() as conn:
            if requested is None:
                rows = conn.execute(
                    text("SELECT product_id, quantity FROM cart_items WHERE user_id = :uid ORDER BY id"),
                    {"uid": user_id},
                ).mappings().all()
                lines = [(r["product_id"], int(r["quantity"])) for r in rows]
            else:
                lines = _merge_lines(requested)

            if not lines:
                raise BusinessLogicError("Cannot place an order with no items", rule="empty_order")

            priced = []
            for product_id, quantity in lines:
                product = conn.execute(
                    text("SELECT id, name, price FROM products WHERE id = :pid"),
                    {"pid": product_id},
                ).mappings().first()
                if not product:
                    raise NotFoundError("Product", product_id)

                # Conditional decrement: succeeds only if enough stock remains
                updated = conn.execute(
                    text("""
                        UPDATE products
                        SET stock_quantity = stock_quantity - :qty
                        WHERE id = :pid AND stock_quantity >= :qty
                    """),
                    {"qty": quantity, "pid": product_id},
                )
                if updated.rowcount != 1:
                    raise BusinessLogicError(
                        f"Insufficient stock for {product['name']}",
                        rule="insufficient_stock",
                    )
                priced.append((product, quantity))

            subtotal = sum(int(p["price"]) * qty for p, qty in priced)
            totals = price_order(subtotal)

            order_id = conn.execute(
                text("""
                    INSERT INTO orders (
                        user_id, status, subtotal, shipping_fee, tax, total,
                        currency, shipping_address, payment_method
                    )
                    VALUES (
                        :uid, 'pending', :subtotal, :shipping_fee, :tax, :total,
                        :currency, :shipping_address, :payment_method
                    )
                    RETURNING id
                """),
                {
                    "uid": user_id,
                    "subtotal": subtotal,
                    "shipping_fee": totals["shipping_fee"],
                    "tax": totals["tax"],
                    "total": totals["total"],
                    "currency": currency,
                    "shipping_address": shipping_address,
                    "payment_method": payment_method,
                },
            ).scalar()

            for product, quantity in priced:
                conn.execute(
                    text("""
                        INSERT INTO order_items (
                            order_id, product_id, product_name, unit_price, quantity, subtotal
                        )
                        VALUES (:oid, :pid, :name, :unit_price, :qty, :subtotal)
                    """),
                    {
                        "oid": order_id,
                        "pid": product["id"],
                        "name": product["name"],
                        "unit_price": int(product["price"]),
                        "qty": quantity,
                        "subtotal": int(product["price"]) * quantity,
                    },
                )

            conn.execute(text("DELETE FROM cart_items WHERE user_id = :uid"), {"uid": user_id})

        logger.info(f"Order {order_id} placed for user {user_id}: {len(priced)} lines, subtotal {subtotal}")
        return int(order_id)

    def get_for_user(self, order_id: int, user_id: str) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(
            f"SELECT {_ORDER_COLUMNS} FROM orders o WHERE o.id = :oid AND o.user_id = :uid",
            {"oid": order_id, "uid": user_id},
            _TYPES,
        )

    def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        return self.execute_query(
            f"SELECT {_ORDER_COLUMNS} FROM orders o WHERE o.user_id = :uid ORDER BY o.created_at DESC, o.id DESC",
            {"uid": user_id},
            _TYPES,
        )

    def get_by_id(self, order_id: int) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(
            f"""
            SELECT {_ORDER_COLUMNS},
                   pr.full_name, pr.email, pr.phone, pr.address, pr.city, pr.country
            FROM orders o
            LEFT JOIN profiles pr ON pr.id = o.user_id
            WHERE o.id = :oid
            """,
            {"oid": order_id},
            _TYPES,
        )

    def list_all(
        self,
        status: Optional[str] = None,
        since: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        """Back office listing, newest first, with the customer's name and email"""
        sql = f"""
            SELECT {_ORDER_COLUMNS}, pr.full_name, pr.email
            FROM orders o
            LEFT JOIN profiles pr ON pr.id = o.user_id
            WHERE 1=1
        """
        params: Dict[str, Any] = {}
        if status:
            sql += " AND o.status = :status"
            params["status"] = status
        if since is not None:
            sql += " AND o.created_at >= :since"
            params["since"] = since
        sql += " ORDER BY o.created_at DESC, o.id DESC"

        stmt = text(sql)
        if since is not None:
            stmt = stmt.bindparams(bindparam("since", type_=DateTime(timezone=True)))
        stmt = stmt.columns(**_TYPES)

        try:
            with self.get_db_connection() as conn:
                return [dict(row._mapping) for row in conn.execute(stmt, params)]
        except SQLAlchemyError as e:
            logger.error(f"Admin order listing failed: {str(e)}")
            raise DatabaseError("Order listing failed", "SELECT")

    def get_items(self, order_ids: Sequence[int]) -> Dict[int, List[Dict[str, Any]]]:
        """Line items for several orders, grouped by order id"""
        grouped: Dict[int, List[Dict[str, Any]]] = {int(oid): [] for oid in order_ids}
        if not order_ids:
            return grouped

        stmt = text("""
            SELECT order_id, product_id, product_name, unit_price, quantity, subtotal
            FROM order_items
            WHERE order_id IN :ids
            ORDER BY id
        """).bindparams(bindparam("ids", expanding=True))

        try:
            with self.get_db_connection() as conn:
                for row in conn.execute(stmt, {"ids": list(order_ids)}).mappings():
                    grouped[int(row["order_id"])].append(dict(row))
        except SQLAlchemyError as e:
            logger.error(f"Order item lookup failed: {str(e)}")
            raise DatabaseError("Order item lookup failed", "SELECT")
        return grouped

    def update_status(self, order_id: int, status: str) -> int:
        return self.execute_command(
            "UPDATE orders SET status = :status, updated_at = CURRENT_TIMESTAMP WHERE id = :oid",
            {"status": status, "oid": order_id},
        )


def _merge_lines(requested: Sequence[Tuple[str, int]]) -> List[Tuple[str, int]]:
    """Collapse repeated product ids, keeping first-seen order"""
    merged: Dict[str, int] = {}
    for product_id, quantity in requested:
        merged[product_id] = merged.get(product_id, 0) + quantity
    return list(merged.items())
