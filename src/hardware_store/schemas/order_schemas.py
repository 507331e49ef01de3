from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]


class OrderItemResponse(BaseModel):
    """Order line item, priced as charged"""
    product_id: str
    product_name: str
    unit_price: int = Field(ge=0)
    quantity: int = Field(ge=1)
    subtotal: int = Field(ge=0)


class OrderResponse(BaseModel):
    """Order as seen by its customer"""
    id: int
    status: OrderStatus
    subtotal: int
    shipping_fee: int
    tax: int
    total: int
    currency: str
    shipping_address: str
    payment_method: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemResponse] = Field(default_factory=list)


class CustomerSummary(BaseModel):
    """Customer contact details shown in the back office"""
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None


class AdminOrderResponse(OrderResponse):
    """Order as seen by an administrator"""
    user_id: str
    customer: Optional[CustomerSummary] = None
