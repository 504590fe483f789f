from __future__ import annotations

from typing import Optional

from ..core.constants import MINUTES_PER_DAY
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_minute_of_day(value: Optional[int], field_name: str, *, optional: bool = False) -> Optional[int]:
    if value is None:
        if optional:
            return None
        raise ValidationError(f"{field_name} is required")
    if int(value) < 0 or int(value) > MINUTES_PER_DAY:
        raise ValidationError(f"{field_name} must be between 0 and {MINUTES_PER_DAY}")
    return int(value)


def require_non_negative(value: Optional[int], field_name: str) -> Optional[int]:
    if value is not None and int(value) < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return value
