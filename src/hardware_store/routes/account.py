from flask import Blueprint

from hardware_store.routes.schemas import ProfileCreateSchema, ProfileUpdateSchema
from hardware_store.routes.utils import get_current_user_id, get_service, load_json, success_response
from hardware_store.services import AccountService, OrderService

account_bp = Blueprint("account", __name__)

_create_schema = ProfileCreateSchema()
_update_schema = ProfileUpdateSchema()


@account_bp.route("/profile", methods=["POST"])
def create_profile():
    user_id = get_current_user_id()
    data = load_json(_create_schema)
    profile = get_service(AccountService).create_profile(user_id, data)
    return success_response(profile.model_dump(mode="json"), "Profile created", 201)


@account_bp.route("/profile", methods=["GET"])
def get_profile():
    user_id = get_current_user_id()
    profile = get_service(AccountService).get_profile(user_id)
    return success_response(profile.model_dump(mode="json"))


@account_bp.route("/profile", methods=["PATCH"])
def update_profile():
    """Partial update; is_admin and email are not editable here."""
    user_id = get_current_user_id()
    changes = load_json(_update_schema, partial=True)
    profile = get_service(AccountService).update_profile(user_id, changes)
    return success_response(profile.model_dump(mode="json"), "Profile updated")


@account_bp.route("/orders", methods=["GET"])
def list_my_orders():
    user_id = get_current_user_id()
    orders = get_service(OrderService).list_orders(user_id)
    return success_response([o.model_dump(mode="json") for o in orders])
