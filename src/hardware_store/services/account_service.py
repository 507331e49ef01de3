from typing import Any, Dict
from hardware_store.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from hardware_store.repositories.profile_repository import ProfileRepository
from hardware_store.schemas.account_schemas import ProfileResponse
from hardware_store.utils.validators import ValidationUtils
import logging

logger = logging.getLogger(__name__)


class AccountService:
    """Customer profiles and the admin gate"""

    def __init__(self, profile_repository: ProfileRepository):
        self.profile_repo = profile_repository

    def create_profile(self, user_id: str, data: Dict[str, Any]) -> ProfileResponse:
        try:
            email = ValidationUtils.normalize_email(data["email"])
        except ValueError as exc:
            raise ValidationError(str(exc), field_errors=[{"field": "email", "message": "Invalid email"}])

        if self.profile_repo.exists(user_id):
            raise ConflictError("Profile already exists", "id")
        if self.profile_repo.email_taken(email):
            raise ConflictError("Email address is already registered", "email")

        self.profile_repo.create(user_id, email, data)
        logger.info(f"Created profile for user {user_id}")
        return self.get_profile(user_id)

    def get_profile(self, user_id: str) -> ProfileResponse:
        row = self.profile_repo.get_by_id(user_id)
        if not row:
            raise NotFoundError("Profile", user_id)
        return ProfileResponse(**{**row, "is_admin": bool(row["is_admin"])})

    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> ProfileResponse:
        if not self.profile_repo.update(user_id, changes):
            raise NotFoundError("Profile", user_id)
        logger.info(f"Updated profile for user {user_id}: {sorted(changes)}")
        return self.get_profile(user_id)

    def require_admin(self, user_id: str) -> None:
        if not self.profile_repo.is_admin(user_id):
            logger.warning(f"Non-admin user {user_id} attempted a back office action")
            raise ForbiddenError("Admin access required")
