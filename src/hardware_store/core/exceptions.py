from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class BaseAPIException(Exception):
    """
    Root of every error the store raises on purpose

    The backend turns these into JSON error envelopes; the cart client gets
    the same classes back from HttpCartStore, so both sides of the wire
    share one taxonomy.

    retryable marks failures where repeating the same call may succeed.
    """

    retryable = False

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        internal_message: Optional[str] = None
    ):
        self.message = message
        # Logged, never returned to the caller
        self.internal_message = internal_message or message
        self.status_code = status_code
        self.error_code = error_code or type(self).__name__.replace("Error", "").upper()
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class ValidationError(BaseAPIException):
    """Malformed request: bad JSON body, query parameter or cart quantity"""

    def __init__(self, message: str = "Validation failed", field_errors: Optional[List[Dict[str, str]]] = None):
        self.field_errors = field_errors or []
        details = {"field_errors": self.field_errors} if self.field_errors else {}
        super().__init__(message, 400, "VALIDATION_ERROR", details)


class UnauthorizedError(BaseAPIException):
    """No identity on the request; the caller should sign in, not retry"""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, 401, "UNAUTHORIZED")


class ForbiddenError(BaseAPIException):
    """Identity is known but not allowed, e.g. a customer on an admin route"""

    def __init__(self, message: str = "Access forbidden"):
        super().__init__(message, 403, "FORBIDDEN")


class NotFoundError(BaseAPIException):
    def __init__(self, resource: str = "Resource", resource_id: Optional[str] = None):
        self.resource = resource
        self.resource_id = resource_id
        message = f"{resource} not found"
        if resource_id:
            message += f" with ID: {resource_id}"
        super().__init__(message, 404, "NOT_FOUND")


class ConflictError(BaseAPIException):
    """Uniqueness clash: duplicate profile, email, category name or slug"""

    def __init__(self, message: str = "Resource conflict", conflict_field: Optional[str] = None):
        details = {"conflict_field": conflict_field} if conflict_field else {}
        super().__init__(message, 409, "CONFLICT", details)


class BusinessLogicError(BaseAPIException):
    """
    Well-formed request refused by a store rule

    rule names the rule, e.g. insufficient_stock or category_has_products.
    """

    def __init__(self, message: str, rule: Optional[str] = None):
        self.rule = rule
        details = {"violated_rule": rule} if rule else {}
        super().__init__(message, 422, "BUSINESS_LOGIC_ERROR", details)


class ExternalServiceError(BaseAPIException):
    retryable = True

    def __init__(self, service_name: str, message: str = "External service unavailable"):
        super().__init__(message, 503, "EXTERNAL_SERVICE_ERROR", {"service": service_name})


class TransientError(ExternalServiceError):
    """Cart store unreachable, timed out or failing server-side"""

    def __init__(self, message: str = "Cart service temporarily unavailable"):
        super().__init__("cart-store", message)
        self.error_code = "TRANSIENT_ERROR"


class DatabaseError(BaseAPIException):
    """SQL failure; callers only ever see a generic message"""

    def __init__(self, message: str = "Database operation failed", operation: Optional[str] = None):
        super().__init__(
            "An internal error occurred. Please try again later.",
            500,
            "DATABASE_ERROR",
            {"operation": operation} if operation else {},
            internal_message=message,
        )


class InternalServerError(BaseAPIException):
    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(
            "An internal server error occurred. Please try again later.",
            500,
            "INTERNAL_ERROR",
            internal_message=message,
        )
