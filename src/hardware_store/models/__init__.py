# Re-export all models from a single entry point. Importing them here also
# registers every table with Base.metadata before init_db() calls
# create_all().

from hardware_store.models.cart import CartItem
from hardware_store.models.order import ORDER_STATUSES, PAYMENT_METHODS, Order, OrderItem
from hardware_store.models.product import Category, Product
from hardware_store.models.user import Profile

__all__ = [
    "Profile",
    "Category",
    "Product",
    "CartItem",
    "Order",
    "OrderItem",
    "ORDER_STATUSES",
    "PAYMENT_METHODS",
]
