import logging

from flask import Blueprint, abort, request

from hardware_store.core.config import Config
from hardware_store.routes.schemas import CategorySchema, OrderStatusSchema, ProductSchema
from hardware_store.routes.utils import get_current_user_id, get_service, load_json, success_response
from hardware_store.services import AccountService, CatalogService, OrderService
from hardware_store.utils.date_utils import DateUtils

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)

_product_schema = ProductSchema()
_category_schema = CategorySchema()
_status_schema = OrderStatusSchema()


@admin_bp.before_request
def require_admin():
    """Every back office route needs an identity whose profile is_admin."""
    user_id = get_current_user_id()
    get_service(AccountService).require_admin(user_id)


# Products

@admin_bp.route("/products", methods=["GET"])
def list_products():
    products = get_service(CatalogService).list_products(sort="created_at", order="desc")
    return success_response([p.model_dump(mode="json") for p in products])


@admin_bp.route("/products", methods=["POST"])
def create_product():
    data = load_json(_product_schema)
    product = get_service(CatalogService).create_product(data)
    return success_response(product.model_dump(mode="json"), "Product created", 201)


@admin_bp.route("/products/<string:product_id>", methods=["GET"])
def get_product(product_id: str):
    product = get_service(CatalogService).get_product(product_id)
    return success_response(product.model_dump(mode="json"))


@admin_bp.route("/products/<string:product_id>", methods=["PATCH"])
def update_product(product_id: str):
    changes = load_json(_product_schema, partial=True)
    if not changes:
        abort(400, "No fields to update.")
    product = get_service(CatalogService).update_product(product_id, changes)
    return success_response(product.model_dump(mode="json"), "Product updated")


@admin_bp.route("/products/<string:product_id>", methods=["DELETE"])
def delete_product(product_id: str):
    get_service(CatalogService).delete_product(product_id)
    return success_response({"id": product_id}, "Product deleted")


# Categories

@admin_bp.route("/categories", methods=["GET"])
def list_categories():
    categories = get_service(CatalogService).list_categories()
    return success_response([c.model_dump(mode="json") for c in categories])


@admin_bp.route("/categories", methods=["POST"])
def create_category():
    data = load_json(_category_schema)
    category = get_service(CatalogService).create_category(data)
    return success_response(category.model_dump(mode="json"), "Category created", 201)


@admin_bp.route("/categories/<int:category_id>", methods=["GET"])
def get_category(category_id: int):
    category = get_service(CatalogService).get_category(category_id)
    return success_response(category.model_dump(mode="json"))


@admin_bp.route("/categories/<int:category_id>", methods=["PATCH"])
def update_category(category_id: int):
    changes = load_json(_category_schema, partial=True)
    if not changes:
        abort(400, "No fields to update.")
    category = get_service(CatalogService).update_category(category_id, changes)
    return success_response(category.model_dump(mode="json"), "Category updated")


@admin_bp.route("/categories/<int:category_id>", methods=["DELETE"])
def delete_category(category_id: int):
    get_service(CatalogService).delete_category(category_id)
    return success_response({"id": category_id}, "Category deleted")


# Orders

@admin_bp.route("/orders", methods=["GET"])
def list_orders():
    """
    Query params:
        status: one of the order statuses
        since: ISO date or datetime, interpreted in the store timezone
    """
    since = None
    since_raw = request.args.get("since")
    if since_raw:
        try:
            since = DateUtils.parse_date(since_raw, timezone_name=get_service(Config).store.timezone)
        except ValueError:
            abort(400, "since must be a valid date")
    orders = get_service(OrderService).list_all_orders(
        status=request.args.get("status") or None, since=since
    )
    return success_response([o.model_dump(mode="json") for o in orders])


@admin_bp.route("/orders/<int:order_id>", methods=["GET"])
def get_order(order_id: int):
    order = get_service(OrderService).get_order_for_admin(order_id)
    return success_response(order.model_dump(mode="json"))


@admin_bp.route("/orders/<int:order_id>", methods=["PATCH"])
def update_order_status(order_id: int):
    data = load_json(_status_schema)
    order = get_service(OrderService).update_status(order_id, data["status"])
    logger.info(f"Admin {get_current_user_id()} set order {order_id} to {data['status']}")
    return success_response(order.model_dump(mode="json"), "Order status updated")


