from typing import Any
from uuid import UUID

from app.core.exceptions import InvalidIdentifierError, ValidationError


def parse_id(raw: Any, label: str = "ID") -> UUID:
    """Parse a record id, raising InvalidIdentifierError on a bad format."""
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw).strip())
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdentifierError(f"Invalid {label} format")


def normalize_email(email: Any) -> str:
    """Trimmed, lower-cased email identity; empty is a ValidationError."""
    value = str(email or "").strip().lower()
    if not value:
        raise ValidationError("Email is required")
    return value
