from typing import Any, Dict, List, Optional

from hardware_store.repositories.base import BaseRepository

WRITABLE_COLUMNS = ("name", "slug", "description", "image")

_CATEGORY_SELECT = """
    SELECT
        c.id,
        c.name,
        c.slug,
        c.description,
        c.image,
        (SELECT COUNT(*) FROM products p WHERE p.category_id = c.id) AS product_count
    FROM categories c
"""


class CategoryRepository(BaseRepository):
    """Repository for product categories"""

    @property
    def table_name(self) -> str:
        return "categories"

    def list_all(self) -> List[Dict[str, Any]]:
        return self.execute_query(_CATEGORY_SELECT + " ORDER BY c.name")

    def get_by_id(self, category_id: int) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(_CATEGORY_SELECT + " WHERE c.id = :id", {"id": category_id})

    def get_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self.execute_single_query(_CATEGORY_SELECT + " WHERE c.slug = :slug", {"slug": slug})

    def name_or_slug_taken(self, name: str, slug: str, exclude_id: Optional[int] = None) -> bool:
        sql = "SELECT 1 FROM categories WHERE (LOWER(name) = LOWER(:name) OR slug = :slug)"
        params: Dict[str, Any] = {"name": name, "slug": slug}
        if exclude_id is not None:
            sql += " AND id <> :exclude_id"
            params["exclude_id"] = exclude_id
        return self.execute_scalar(sql, params) is not None

    def create(self, data: Dict[str, Any]) -> int:
        return int(self.execute_insert_returning_id(
            """
            INSERT INTO categories (name, slug, description, image)
            VALUES (:name, :slug, :description, :image)
            """,
            {
                "name": data["name"],
                "slug": data["slug"],
                "description": data.get("description"),
                "image": data.get("image"),
            },
        ))

    def update(self, category_id: int, changes: Dict[str, Any]) -> int:
        columns = [name for name in WRITABLE_COLUMNS if name in changes]
        if not columns:
            return 1 if self.exists(category_id) else 0

        assignments = ", ".join(f"{name} = :{name}" for name in columns)
        params = {name: changes[name] for name in columns}
        params["id"] = category_id
        return self.execute_command(f"UPDATE categories SET {assignments} WHERE id = :id", params)

    def delete(self, category_id: int) -> int:
        return self.execute_command("DELETE FROM categories WHERE id = :id", {"id": category_id})

    def product_count(self, category_id: int) -> int:
        count = self.execute_scalar(
            "SELECT COUNT(*) FROM products WHERE category_id = :id", {"id": category_id}
        )
        return int(count or 0)
