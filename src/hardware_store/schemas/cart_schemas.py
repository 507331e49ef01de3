from typing import List

from pydantic import BaseModel, ConfigDict, Field, computed_field


class CartLineResponse(BaseModel):
    """A persisted cart line joined with the product's display fields"""
    product_id: str = Field(description="Product identifier")
    quantity: int = Field(ge=1, description="Quantity in cart")
    name: str = Field(description="Product name at read time")
    price: int = Field(ge=0, description="Current unit price")
    image: str = Field(default="/placeholder.svg")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "product_id": "7d0f3c2e-8a55-4d8b-9d2f-0d7f0a1b2c3d",
                "quantity": 2,
                "name": "Tororo Cement 50kg Bag",
                "price": 35000,
                "image": "/tororo-cement-bag-50kg.jpg",
                "subtotal": 70000,
            }
        }
    )

    @computed_field
    @property
    def subtotal(self) -> int:
        return self.price * self.quantity


class CartResponse(BaseModel):
    """Complete cart for one identity"""
    user_id: str
    currency: str = "UGX"
    items: List[CartLineResponse] = Field(default_factory=list)

    @computed_field
    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @computed_field
    @property
    def total_price(self) -> int:
        return sum(item.subtotal for item in self.items)

    @computed_field
    @property
    def is_empty(self) -> bool:
        return not self.items
