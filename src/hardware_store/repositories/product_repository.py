import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime

from hardware_store.repositories.base import BaseRepository
import logging

logger = logging.getLogger(__name__)

# Columns an admin may write; anything else in a payload is ignored upstream
WRITABLE_COLUMNS = (
    "name", "description", "price", "original_price", "image", "badge",
    "category_id", "stock_quantity", "is_featured",
)

SORTABLE_COLUMNS = {
    "created_at": "p.created_at",
    "price": "p.price",
    "name": "p.name",
}

_PRODUCT_SELECT = """
    SELECT
        p.id,
        p.name,
        p.description,
        p.price,
        p.original_price,
        p.image,
        p.badge,
        p.category_id,
        p.stock_quantity,
        p.is_featured,
        p.created_at,
        c.name AS category_name,
        c.slug AS category_slug
    FROM products p
    LEFT JOIN categories c ON c.id = p.category_id
"""

_TYPES = {"created_at": DateTime(timezone=True)}


class ProductRepository(BaseRepository):
    """Repository for catalog products"""

    @property
    def table_name(self) -> str:
        return "products"

    def list_products(
        self,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        featured: Optional[bool] = None,
        sort: str = "created_at",
        order: str = "desc",
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        List products with optional filters

        sort/order are whitelisted before being interpolated; every other
        value is a bound parameter.
        """
        sql = _PRODUCT_SELECT + " WHERE 1=1"
        params: Dict[str, Any] = {}

        if category_id is not None:
            sql += " AND p.category_id = :category_id"
            params["category_id"] = category_id
        if search:
            sql += " AND (LOWER(p.name) LIKE :q OR LOWER(COALESCE(p.description, '')) LIKE :q)"
            params["q"] = f"%{search.lower()}%"
        if featured is True:
            sql += " AND p.is_featured = :featured"
            params["featured"] = True

        sort_column = SORTABLE_COLUMNS.get(sort, SORTABLE_COLUMNS["created_at"])
        direction = "ASC" if order == "asc" else "DESC"
        # id breaks ties: SQLite timestamps only have second resolution
        sql += f" ORDER BY {sort_column} {direction}, p.id {direction}"

        if limit is not None:
            sql += " LIMIT :limit"
            params["limit"] = limit

        return self.execute_query(sql, params, _TYPES)

    def get_by_id(self, product_id: str) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(
            _PRODUCT_SELECT + " WHERE p.id = :id", {"id": product_id}, _TYPES
        )

    def list_by_category(self, category_id: int) -> List[Dict[str, Any]]:
        return self.execute_query(
            _PRODUCT_SELECT + " WHERE p.category_id = :cid ORDER BY p.name, p.id",
            {"cid": category_id},
            _TYPES,
        )

    def create(self, data: Dict[str, Any]) -> str:
        """Insert a product and return its generated id"""
        product_id = str(uuid.uuid4())
        self.execute_command(
            """
            INSERT INTO products (
                id, name, description, price, original_price, image, badge,
                category_id, stock_quantity, is_featured
            )
            VALUES (
                :id, :name, :description, :price, :original_price, :image, :badge,
                :category_id, :stock_quantity, :is_featured
            )
            """,
            {
                "id": product_id,
                "name": data["name"],
                "description": data.get("description"),
                "price": data["price"],
                "original_price": data.get("original_price"),
                "image": data.get("image"),
                "badge": data.get("badge"),
                "category_id": data.get("category_id"),
                "stock_quantity": data.get("stock_quantity", 0),
                "is_featured": data.get("is_featured", False),
            },
        )
        logger.info(f"Created product {product_id} ({data['name']})")
        return product_id

    def update(self, product_id: str, changes: Dict[str, Any]) -> int:
        """Apply a partial update; returns affected row count"""
        columns = [name for name in WRITABLE_COLUMNS if name in changes]
        if not columns:
            return 1 if self.exists(product_id) else 0

        assignments = ", ".join(f"{name} = :{name}" for name in columns)
        params = {name: changes[name] for name in columns}
        params["id"] = product_id
        return self.execute_command(f"UPDATE products SET {assignments} WHERE id = :id", params)

    def delete(self, product_id: str) -> int:
        return self.execute_command("DELETE FROM products WHERE id = :id", {"id": product_id})

    def order_reference_count(self, product_id: str) -> int:
        """Number of order lines that reference the product"""
        count = self.execute_scalar(
            "SELECT COUNT(*) FROM order_items WHERE product_id = :id", {"id": product_id}
        )
        return int(count or 0)
