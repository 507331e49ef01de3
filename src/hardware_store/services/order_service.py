from datetime import datetime
from typing import Any, Dict, List, Optional
from hardware_store.core.config import StoreConfig
from hardware_store.core.exceptions import NotFoundError, ValidationError
from hardware_store.models.order import ORDER_STATUSES
from hardware_store.repositories.order_repository import OrderRepository
from hardware_store.schemas.order_schemas import (
    AdminOrderResponse, CustomerSummary, OrderItemResponse, OrderResponse
)
from hardware_store.utils.date_utils import DateUtils
from hardware_store.utils.formatting_utils import FormattingUtils
import logging

logger = logging.getLogger(__name__)


class OrderService:
    """
    Checkout and order management

    Business Rules:
    - Shipping is a flat fee, charged only when the subtotal is positive
    - Tax is a percentage of the subtotal, rounded half up
    - A new order starts as "pending"; admins move it between the five
      statuses
    - Customers only ever see their own orders
    """

    def __init__(self, order_repository: OrderRepository, store_config: StoreConfig):
        self.order_repo = order_repository
        self.store_config = store_config

    def price_order(self, subtotal: int) -> Dict[str, int]:
        """
        Compute the charges for a subtotal

        Example (defaults): 70000 -> shipping 15000, tax 12600, total 97600
        """
        shipping_fee = self.store_config.shipping_fee if subtotal > 0 else 0
        tax = FormattingUtils.apply_rate(subtotal, self.store_config.tax_rate)
        return {
            "shipping_fee": shipping_fee,
            "tax": tax,
            "total": subtotal + shipping_fee + tax,
        }

    def checkout(self, user_id: str, data: Dict[str, Any]) -> OrderResponse:
        """
        Place an order from explicit items or, when none are given, from the
        user's persisted cart. The cart is emptied either way.
        """
        items = data.get("items")
        requested = None
        if items is not None:
            requested = [(item["product_id"], item["quantity"]) for item in items]

        order_id = self.order_repo.place_order(
            user_id=user_id,
            requested=requested,
            shipping_address=data["shipping_address"],
            payment_method=data["payment_method"],
            currency=self.store_config.currency,
            price_order=self.price_order,
        )
        order = self.get_order(user_id, order_id)
        logger.info(
            f"Checkout complete for user {user_id}: order {order_id}, "
            f"{FormattingUtils.format_money(order.total, order.currency)}"
        )
        return order

    def list_orders(self, user_id: str) -> List[OrderResponse]:
        rows = self.order_repo.list_for_user(user_id)
        items = self.order_repo.get_items([row["id"] for row in rows])
        return [self._to_order(OrderResponse, row, items[int(row["id"])]) for row in rows]

    def get_order(self, user_id: str, order_id: int) -> OrderResponse:
        row = self.order_repo.get_for_user(order_id, user_id)
        if not row:
            raise NotFoundError("Order", str(order_id))
        items = self.order_repo.get_items([order_id])
        return self._to_order(OrderResponse, row, items[order_id])

    # Back office

    def list_all_orders(
        self,
        status: Optional[str] = None,
        since: Optional[datetime] = None
    ) -> List[AdminOrderResponse]:
        if status is not None:
            self._check_status(status)
        rows = self.order_repo.list_all(status=status, since=since)
        items = self.order_repo.get_items([row["id"] for row in rows])
        return [self._to_admin_order(row, items[int(row["id"])]) for row in rows]

    def get_order_for_admin(self, order_id: int) -> AdminOrderResponse:
        row = self.order_repo.get_by_id(order_id)
        if not row:
            raise NotFoundError("Order", str(order_id))
        items = self.order_repo.get_items([order_id])
        return self._to_admin_order(row, items[order_id])

    def update_status(self, order_id: int, status: str) -> AdminOrderResponse:
        self._check_status(status)
        if not self.order_repo.update_status(order_id, status):
            raise NotFoundError("Order", str(order_id))
        logger.info(f"Order {order_id} status set to {status}")
        return self.get_order_for_admin(order_id)

    @staticmethod
    def _check_status(status: str) -> None:
        if status not in ORDER_STATUSES:
            raise ValidationError(
                "Invalid status value",
                field_errors=[{"field": "status", "message": f"Must be one of {', '.join(ORDER_STATUSES)}"}],
            )

    def _to_order(self, model, row: Dict[str, Any], items: List[Dict[str, Any]], **extra):
        tz = self.store_config.timezone
        return model(
            id=int(row["id"]),
            status=row["status"],
            subtotal=int(row["subtotal"]),
            shipping_fee=int(row["shipping_fee"]),
            tax=int(row["tax"]),
            total=int(row["total"]),
            currency=row["currency"],
            shipping_address=row["shipping_address"],
            payment_method=row["payment_method"],
            created_at=DateUtils.to_store_time(row.get("created_at"), tz),
            updated_at=DateUtils.to_store_time(row.get("updated_at"), tz),
            items=[
                OrderItemResponse(
                    product_id=item["product_id"],
                    product_name=item["product_name"],
                    unit_price=int(item["unit_price"]),
                    quantity=int(item["quantity"]),
                    subtotal=int(item["subtotal"]),
                )
                for item in items
            ],
            **extra,
        )

    def _to_admin_order(self, row: Dict[str, Any], items: List[Dict[str, Any]]) -> AdminOrderResponse:
        customer = CustomerSummary(
            id=row["user_id"],
            full_name=row.get("full_name"),
            email=row.get("email"),
            phone=row.get("phone"),
            address=row.get("address"),
            city=row.get("city"),
            country=row.get("country"),
        )
        return self._to_order(AdminOrderResponse, row, items, user_id=row["user_id"], customer=customer)
