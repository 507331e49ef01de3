import logging

from flask import Blueprint, abort, request

from hardware_store.routes.schemas import AddCartItemSchema, UpdateCartItemSchema
from hardware_store.routes.utils import get_current_user_id, get_service, load_json, success_response
from hardware_store.services import CartService

logger = logging.getLogger(__name__)

cart_bp = Blueprint("cart", __name__)

_add_schema = AddCartItemSchema()
_update_schema = UpdateCartItemSchema()


@cart_bp.route("", methods=["GET"])
def get_cart():
    """Return the caller's cart lines with display fields and totals."""
    user_id = get_current_user_id()
    cart = get_service(CartService).get_cart(user_id)
    return success_response(cart.model_dump(mode="json"))


@cart_bp.route("", methods=["POST"])
def add_item():
    """
    Add a product to the cart.
    Body: { "product_id": "...", "quantity": 2 }
    An existing line is incremented by quantity.
    """
    user_id = get_current_user_id()
    data = load_json(_add_schema)
    line = get_service(CartService).add_item(user_id, data["product_id"], data["quantity"])
    return success_response(line.model_dump(mode="json"), "Item added to cart", 201)


@cart_bp.route("", methods=["PATCH"])
def update_item():
    """
    Set the quantity of an existing line.
    Body: { "product_id": "...", "quantity": 3 }
    quantity 0 removes the line.
    """
    user_id = get_current_user_id()
    data = load_json(_update_schema)
    line = get_service(CartService).set_quantity(user_id, data["product_id"], data["quantity"])
    if line is None:
        return success_response(None, "Item removed from cart")
    return success_response(line.model_dump(mode="json"), "Cart updated")


@cart_bp.route("", methods=["DELETE"])
def remove_item():
    """Remove a line. Succeeds whether or not the line existed."""
    user_id = get_current_user_id()
    product_id = request.args.get("product_id", "").strip()
    if not product_id:
        abort(400, "product_id query parameter is required.")
    removed = get_service(CartService).remove_item(user_id, product_id)
    return success_response({"product_id": product_id, "removed": removed}, "Item removed from cart")


@cart_bp.route("/clear", methods=["DELETE"])
def clear_cart():
    user_id = get_current_user_id()
    count = get_service(CartService).clear_cart(user_id)
    return success_response({"removed": count}, "Cart cleared")
