from hardware_store.repositories.cart_repository import CartRepository
from hardware_store.repositories.category_repository import CategoryRepository
from hardware_store.repositories.order_repository import OrderRepository
from hardware_store.repositories.product_repository import ProductRepository
from hardware_store.repositories.profile_repository import ProfileRepository

__all__ = [
    "CartRepository",
    "CategoryRepository",
    "OrderRepository",
    "ProductRepository",
    "ProfileRepository",
]
