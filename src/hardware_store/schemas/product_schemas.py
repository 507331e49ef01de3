from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class CategorySummary(BaseModel):
    """Category fields embedded in product payloads"""
    id: int
    name: str
    slug: str


class ProductResponse(BaseModel):
    """Product in API responses"""
    id: str = Field(description="Product identifier (UUID)")
    name: str
    description: Optional[str] = None
    price: int = Field(ge=0, description="Price in whole currency units")
    original_price: Optional[int] = Field(default=None, description="Pre-sale price, if on sale")
    image: str = "/placeholder.svg"
    badge: Optional[str] = None
    category_id: Optional[int] = None
    category: Optional[CategorySummary] = None
    stock_quantity: int = Field(ge=0)
    is_featured: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "7d0f3c2e-8a55-4d8b-9d2f-0d7f0a1b2c3d",
                "name": "Tororo Cement 50kg Bag",
                "price": 35000,
                "original_price": None,
                "image": "/tororo-cement-bag-50kg.jpg",
                "badge": "Best Seller",
                "category": {"id": 1, "name": "Building Materials", "slug": "building-materials"},
                "stock_quantity": 120,
                "in_stock": True,
            }
        }
    )

    @computed_field
    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0


class CategoryResponse(BaseModel):
    """Category in API responses"""
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    image: Optional[str] = None
    product_count: int = Field(default=0, ge=0)


class CategoryDetailResponse(CategoryResponse):
    """Category page payload: the category plus its products"""
    products: List[ProductResponse] = Field(default_factory=list)
