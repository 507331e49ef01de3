import logging

from flask import Blueprint

from hardware_store.routes.schemas import CheckoutSchema
from hardware_store.routes.utils import get_current_user_id, get_service, load_json, success_response
from hardware_store.services import OrderService

logger = logging.getLogger(__name__)

orders_bp = Blueprint("orders", __name__)

_checkout_schema = CheckoutSchema()


@orders_bp.route("", methods=["POST"])
def create_order():
    """
    Checkout.
    Body:
      {
        "shipping_address": "Plot 12, Kampala Road",
        "payment_method": "mobile-money",
        "items": [{"product_id": "...", "quantity": 2}]   # optional
      }
    Without items the caller's persisted cart is ordered.
    """
    user_id = get_current_user_id()
    data = load_json(_checkout_schema)
    order = get_service(OrderService).checkout(user_id, data)
    return success_response(order.model_dump(mode="json"), "Order placed", 201)


@orders_bp.route("", methods=["GET"])
def list_orders():
    """Caller's orders, newest first."""
    user_id = get_current_user_id()
    orders = get_service(OrderService).list_orders(user_id)
    return success_response([o.model_dump(mode="json") for o in orders])


@orders_bp.route("/<int:order_id>", methods=["GET"])
def get_order(order_id: int):
    user_id = get_current_user_id()
    order = get_service(OrderService).get_order(user_id, order_id)
    return success_response(order.model_dump(mode="json"))
