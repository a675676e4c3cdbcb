"""
Shared request parameter checks for the API routes.
"""

from flowmanager.app.core.exceptions import ValidationError


def valid_id(value: int, label: str = "ID") -> int:
    """Identifiers are positive integers; anything else is a 400."""
    if value is None or value <= 0:
        raise ValidationError(f"Invalid {label}")
    return value


def valid_ids(values, label: str = "IDs") -> list[int]:
    """Non-empty list of positive identifiers."""
    if not values:
        raise ValidationError(f"{label} must be a non-empty list")
    return [valid_id(value, label) for value in values]
