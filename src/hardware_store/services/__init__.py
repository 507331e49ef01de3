from hardware_store.services.account_service import AccountService
from hardware_store.services.cart_service import CartService
from hardware_store.services.catalog_service import CatalogService
from hardware_store.services.order_service import OrderService

__all__ = ["AccountService", "CartService", "CatalogService", "OrderService"]
