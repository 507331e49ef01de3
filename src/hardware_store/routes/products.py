import logging

from flask import Blueprint, abort, request

from hardware_store.routes.utils import get_service, parse_bool, parse_int, success_response
from hardware_store.services import CatalogService

logger = logging.getLogger(__name__)

products_bp = Blueprint("products", __name__)

SORT_FIELDS = ("created_at", "price", "name")


@products_bp.route("", methods=["GET"])
def list_products():
    """
    List products

    Query params:
        category: category id
        search: case-insensitive match on name or description (2-100 chars)
        featured: only featured products when true
        sort: created_at | price | name (default created_at)
        order: asc | desc (default desc)
        limit: 1-100
    """
    search = request.args.get("search", "").strip() or None
    if search is not None and not 2 <= len(search) <= 100:
        abort(400, "search must be between 2 and 100 characters")

    sort = request.args.get("sort", "created_at")
    if sort not in SORT_FIELDS:
        abort(400, f"sort must be one of: {', '.join(SORT_FIELDS)}")
    order = request.args.get("order", "desc").lower()
    if order not in ("asc", "desc"):
        abort(400, "order must be asc or desc")

    featured = parse_bool(request.args.get("featured")) or None
    products = get_service(CatalogService).list_products(
        category_id=parse_int(request.args.get("category"), field_name="category", min_val=1),
        search=search,
        featured=featured,
        sort=sort,
        order=order,
        limit=parse_int(request.args.get("limit"), field_name="limit", min_val=1, max_val=100),
    )
    return success_response([p.model_dump(mode="json") for p in products])


@products_bp.route("/<string:product_id>", methods=["GET"])
def get_product(product_id: str):
    product = get_service(CatalogService).get_product(product_id)
    return success_response(product.model_dump(mode="json"))
