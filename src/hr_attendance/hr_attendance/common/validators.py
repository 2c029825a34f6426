from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    """Length is measured after trimming surrounding whitespace."""
    stripped = (value or "").strip()
    if len(stripped) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return stripped


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None
