from flask import Blueprint

from hardware_store.routes.utils import get_service, success_response
from hardware_store.services import CatalogService

categories_bp = Blueprint("categories", __name__)


@categories_bp.route("", methods=["GET"])
def list_categories():
    """All categories ordered by name, with product counts."""
    categories = get_service(CatalogService).list_categories()
    return success_response([c.model_dump(mode="json") for c in categories])


@categories_bp.route("/<string:slug>", methods=["GET"])
def get_category(slug: str):
    """A category page: the category and its products."""
    page = get_service(CatalogService).get_category_page(slug)
    return success_response(page.model_dump(mode="json"))
