from hardware_store.schemas.account_schemas import ProfileResponse
from hardware_store.schemas.cart_schemas import CartLineResponse, CartResponse
from hardware_store.schemas.order_schemas import (
    AdminOrderResponse, CustomerSummary, OrderItemResponse, OrderResponse
)
from hardware_store.schemas.product_schemas import (
    CategoryDetailResponse, CategoryResponse, CategorySummary, ProductResponse
)

__all__ = [
    "ProfileResponse",
    "CartLineResponse",
    "CartResponse",
    "OrderItemResponse",
    "OrderResponse",
    "CustomerSummary",
    "AdminOrderResponse",
    "CategorySummary",
    "CategoryResponse",
    "CategoryDetailResponse",
    "ProductResponse",
]
