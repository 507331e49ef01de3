from hardware_store.routes.account import account_bp
from hardware_store.routes.admin import admin_bp
from hardware_store.routes.cart import cart_bp
from hardware_store.routes.categories import categories_bp
from hardware_store.routes.orders import orders_bp
from hardware_store.routes.products import products_bp

__all__ = ["account_bp", "admin_bp", "cart_bp", "categories_bp", "orders_bp", "products_bp"]
