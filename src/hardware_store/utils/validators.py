import re
import uuid
from typing import Optional

from email_validator import validate_email, EmailNotValidError


class ValidationUtils:
    """
    Validation helpers shared by the request schemas and services

    Features:
    - Email validation and normalization
    - Identifier checks (product UUIDs, caller identities)
    - Slug generation for categories
    """

    PATTERNS = {
        'slug': re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$'),
        'identity': re.compile(r'^[A-Za-z0-9][A-Za-z0-9._:@-]{0,127}$'),
        'phone': re.compile(r'^\+?[0-9 ()-]{7,20}$'),
    }

    MAX_TEXT_LENGTH = 2000
    MAX_NAME_LENGTH = 200

    @classmethod
    def validate_email(cls, email: str, check_deliverability: bool = False) -> bool:
        """Validate email address syntax (DNS checks are opt-in)"""
        try:
            validate_email(email, check_deliverability=check_deliverability)
            return True
        except EmailNotValidError:
            return False

    @classmethod
    def normalize_email(cls, email: str) -> str:
        """Normalize email address for consistent storage"""
        try:
            validated = validate_email(email, check_deliverability=False)
            return validated.normalized.lower()
        except EmailNotValidError:
            raise ValueError(f"Invalid email address: {email}")

    @classmethod
    def is_uuid(cls, value: Optional[str]) -> bool:
        """True when value is a canonical UUID string (product ids)"""
        if not value:
            return False
        try:
            return str(uuid.UUID(value)) == value.lower()
        except (ValueError, AttributeError, TypeError):
            return False

    @classmethod
    def is_identity(cls, value: Optional[str]) -> bool:
        """Identities come from the auth provider; accept any safe opaque token"""
        return bool(value) and cls.PATTERNS['identity'].match(value) is not None

    @classmethod
    def validate_phone_number(cls, phone: str) -> bool:
        return cls.PATTERNS['phone'].match(phone.strip()) is not None

    @classmethod
    def slugify(cls, text: str) -> str:
        """
        Build a URL slug from a display name

        Examples:
            slugify("Power Tools") -> "power-tools"
            slugify("Paint & Supplies") -> "paint-supplies"
        """
        slug = re.sub(r'[^a-z0-9]+', '-', text.lower()).strip('-')
        if not slug:
            raise ValueError(f"Cannot build a slug from {text!r}")
        return slug

    @classmethod
    def validate_slug(cls, slug: str) -> bool:
        return cls.PATTERNS['slug'].match(slug) is not None
