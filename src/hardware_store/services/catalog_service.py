from typing import Any, Dict, List, Optional
from hardware_store.core.config import StoreConfig
from hardware_store.core.exceptions import (
    BusinessLogicError, ConflictError, NotFoundError, ValidationError
)
from hardware_store.repositories.category_repository import CategoryRepository
from hardware_store.repositories.product_repository import ProductRepository
from hardware_store.schemas.product_schemas import (
    CategoryDetailResponse, CategoryResponse, CategorySummary, ProductResponse
)
from hardware_store.utils.date_utils import DateUtils
from hardware_store.utils.validators import ValidationUtils
import logging

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE = "/placeholder.svg"


class CatalogService:
    """
    Catalog browsing and back office catalog management

    Business Rules:
    - Products without an image are served with the placeholder image
    - A product that has been ordered cannot be deleted
    - A category that still holds products cannot be deleted
    - Category names and slugs are unique (case-insensitive names)
    """

    def __init__(
        self,
        product_repository: ProductRepository,
        category_repository: CategoryRepository,
        store_config: StoreConfig
    ):
        self.product_repo = product_repository
        self.category_repo = category_repository
        self.store_config = store_config

    # Storefront

    def list_products(self, **filters) -> List[ProductResponse]:
        rows = self.product_repo.list_products(**filters)
        logger.info(f"Listed {len(rows)} products (filters={filters})")
        return [self._to_product(row) for row in rows]

    def get_product(self, product_id: str) -> ProductResponse:
        row = self.product_repo.get_by_id(product_id)
        if not row:
            raise NotFoundError("Product", product_id)
        return self._to_product(row)

    def list_categories(self) -> List[CategoryResponse]:
        return [CategoryResponse(**row) for row in self.category_repo.list_all()]

    def get_category_page(self, slug: str) -> CategoryDetailResponse:
        category = self.category_repo.get_by_slug(slug)
        if not category:
            raise NotFoundError("Category", slug)
        products = self.product_repo.list_by_category(category["id"])
        return CategoryDetailResponse(
            **category,
            products=[self._to_product(row) for row in products],
        )

    # Back office: products

    def create_product(self, data: Dict[str, Any]) -> ProductResponse:
        self._check_category(data.get("category_id"))
        product_id = self.product_repo.create(data)
        return self.get_product(product_id)

    def update_product(self, product_id: str, changes: Dict[str, Any]) -> ProductResponse:
        if "category_id" in changes:
            self._check_category(changes["category_id"])
        if not self.product_repo.update(product_id, changes):
            raise NotFoundError("Product", product_id)
        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return self.get_product(product_id)

    def delete_product(self, product_id: str) -> None:
        if not self.product_repo.exists(product_id):
            raise NotFoundError("Product", product_id)
        if self.product_repo.order_reference_count(product_id) > 0:
            raise BusinessLogicError(
                "Cannot delete product that has been ordered",
                rule="product_has_orders",
            )
        self.product_repo.delete(product_id)
        logger.info(f"Deleted product {product_id}")

    # Back office: categories

    def get_category(self, category_id: int) -> CategoryResponse:
        row = self.category_repo.get_by_id(category_id)
        if not row:
            raise NotFoundError("Category", str(category_id))
        return CategoryResponse(**row)

    def create_category(self, data: Dict[str, Any]) -> CategoryResponse:
        data = dict(data)
        data["slug"] = self._resolve_slug(data.get("slug"), data["name"])
        if self.category_repo.name_or_slug_taken(data["name"], data["slug"]):
            raise ConflictError("A category with this name or slug already exists", "name")
        category_id = self.category_repo.create(data)
        logger.info(f"Created category {category_id} ({data['slug']})")
        return self.get_category(category_id)

    def update_category(self, category_id: int, changes: Dict[str, Any]) -> CategoryResponse:
        current = self.get_category(category_id)
        changes = dict(changes)
        if "slug" in changes:
            changes["slug"] = self._resolve_slug(changes["slug"], changes.get("name", current.name))
        name = changes.get("name", current.name)
        slug = changes.get("slug", current.slug)
        if self.category_repo.name_or_slug_taken(name, slug, exclude_id=category_id):
            raise ConflictError("A category with this name or slug already exists", "name")
        self.category_repo.update(category_id, changes)
        return self.get_category(category_id)

    def delete_category(self, category_id: int) -> None:
        self.get_category(category_id)
        if self.category_repo.product_count(category_id) > 0:
            raise BusinessLogicError(
                "Cannot delete category with associated products",
                rule="category_has_products",
            )
        self.category_repo.delete(category_id)
        logger.info(f"Deleted category {category_id}")

    # Helpers

    def _check_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and not self.category_repo.exists(category_id):
            raise ValidationError(
                f"Category {category_id} does not exist",
                field_errors=[{"field": "category_id", "message": "Unknown category"}],
            )

    @staticmethod
    def _resolve_slug(slug: Optional[str], name: str) -> str:
        if not slug:
            return ValidationUtils.slugify(name)
        if not ValidationUtils.validate_slug(slug):
            raise ValidationError(
                "Slug may only contain lowercase letters, digits and single hyphens",
                field_errors=[{"field": "slug", "message": "Invalid slug"}],
            )
        return slug

    def _to_product(self, row: Dict[str, Any]) -> ProductResponse:
        category = None
        if row.get("category_id") is not None and row.get("category_slug"):
            category = CategorySummary(
                id=row["category_id"], name=row["category_name"], slug=row["category_slug"]
            )
        return ProductResponse(
            id=row["id"],
            name=row["name"],
            description=row.get("description"),
            price=int(row["price"]),
            original_price=int(row["original_price"]) if row.get("original_price") is not None else None,
            image=row.get("image") or PLACEHOLDER_IMAGE,
            badge=row.get("badge"),
            category_id=row.get("category_id"),
            category=category,
            stock_quantity=int(row["stock_quantity"]),
            is_featured=bool(row["is_featured"]),
            created_at=DateUtils.to_store_time(row.get("created_at"), self.store_config.timezone),
        )
