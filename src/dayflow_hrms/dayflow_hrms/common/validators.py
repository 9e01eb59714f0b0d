from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value: Any, field_name: str = "value") -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return (value or "").strip() or None


def to_decimal(value: Any, field_name: str) -> Decimal:
    """Convert user input to Decimal without going through float."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def require_non_negative(value: Any, field_name: str) -> Decimal:
    number = to_decimal(value, field_name)
    if not number.is_finite() or number < 0:
        raise ValidationError(f"{field_name} must be a non-negative number")
    return number
