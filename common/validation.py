"""
Request validation utilities.
"""

from typing import Any, Optional

from common.exceptions import ValidationException

_TRUE_VALUES = {"1", "true", "t", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "f", "no", "n", "off", ""}

def validate_pagination_params(page: int, per_page: int, max_per_page: int = 100) -> tuple[int, int]:
    """Validate page/per_page pagination parameters."""
    if page < 1:
        raise ValidationException(
            detail="Page parameter must be at least 1",
            field="page",
            value=page
        )

    if per_page <= 0:
        raise ValidationException(
            detail="Per page parameter must be positive",
            field="per_page",
            value=per_page
        )

    if per_page > max_per_page:
        raise ValidationException(
            detail=f"Per page parameter cannot exceed {max_per_page}",
            field="per_page",
            value=per_page
        )

    return page, per_page

def parse_bool(value: Any, field: Optional[str] = None) -> bool:
    """Interpret query-string style booleans ("1", "true", "false", ...)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
    raise ValidationException(
        detail=f"Expected a boolean value, got {value!r}",
        field=field,
        value=value
    )

def is_blank(value: Any) -> bool:
    """Blank values are skipped by search conditions."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False
