from typing import Optional, Type, TypeVar

from flask import abort, current_app, jsonify, request
from datetime import datetime, timezone
from marshmallow import Schema, ValidationError as SchemaValidationError

from hardware_store.core.exceptions import UnauthorizedError, ValidationError
from hardware_store.utils.validators import ValidationUtils

T = TypeVar("T")


def success_response(data, message: Optional[str] = None, status: int = 200):
    """Consistent success response envelope."""
    response = {
        "success": True,
        "data": data,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if message:
        response["message"] = message
    return jsonify(response), status


def get_service(service_class: Type[T]) -> T:
    """Resolve a service from the application's dependency container."""
    return current_app.extensions["container"].get(service_class)


def load_json(schema: Schema, partial: bool = False) -> dict:
    """Validate the JSON body against a marshmallow schema."""
    if not request.is_json:
        abort(400, "Content-Type must be application/json.")
    try:
        return schema.load(request.get_json(force=True) or {}, partial=partial)
    except SchemaValidationError as err:
        field_errors = [
            {"field": field, "message": "; ".join(map(str, messages)) if isinstance(messages, list) else str(messages)}
            for field, messages in err.messages.items()
        ]
        raise ValidationError("Request validation failed", field_errors=field_errors)


def parse_int(
    v,
    default=None,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
    field_name: str = "value",
) -> Optional[int]:
    """Parse an integer with optional range validation."""
    if v is None or v == "":
        return default
    try:
        result = int(v)
    except (TypeError, ValueError):
        abort(400, f"Invalid {field_name}: must be a valid integer")
    if min_val is not None and result < min_val:
        abort(400, f"{field_name} must be at least {min_val}")
    if max_val is not None and result > max_val:
        abort(400, f"{field_name} cannot exceed {max_val}")
    return result


def parse_bool(v, default: bool = False) -> bool:
    """Parse a boolean value from a query string."""
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    return str(v).lower() in ("1", "true", "t", "yes", "y", "on")


def get_current_user_id() -> str:
    """Extract and validate the caller's identity from the X-User-Id header."""
    uid = request.headers.get("X-User-Id", "").strip()
    if not uid:
        raise UnauthorizedError("Missing X-User-Id header.")
    if not ValidationUtils.is_identity(uid):
        abort(400, "Invalid X-User-Id header.")
    return uid
