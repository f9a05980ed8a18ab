"""
Text utility functions.
"""
from typing import Optional

from app.core.exceptions import InvalidArgumentError


def clean_optional_text(text: Optional[str]) -> Optional[str]:
    """
    Trim leading and trailing whitespace, turning blank values into None.

    Args:
        text: The text to clean (may be None)

    Returns:
        Trimmed text, or None if nothing remains
    """
    if text is None:
        return None
    cleaned = text.strip()
    return cleaned if cleaned else None


def require_text(text: Optional[str], field_name: str, max_length: Optional[int] = None) -> str:
    """
    Trim a required text value and validate it.

    Args:
        text: The text to validate
        field_name: Field name used in the error message
        max_length: Optional maximum length after trimming

    Returns:
        The trimmed text

    Raises:
        InvalidArgumentError: If the value is missing, blank or too long
    """
    cleaned = clean_optional_text(text)
    if cleaned is None:
        raise InvalidArgumentError(f"{field_name} is required")
    if max_length is not None and len(cleaned) > max_length:
        raise InvalidArgumentError(f"{field_name} must be at most {max_length} characters")
    return cleaned


def limit_optional_text(text: Optional[str], field_name: str, max_length: int) -> Optional[str]:
    """Trim an optional text value and enforce its maximum length."""
    cleaned = clean_optional_text(text)
    if cleaned is not None and len(cleaned) > max_length:
        raise InvalidArgumentError(f"{field_name} must be at most {max_length} characters")
    return cleaned


def contains_ignore_case(text: Optional[str], query: str) -> bool:
    """Case-insensitive substring check; None never matches."""
    if text is None:
        return False
    return query in text.lower()
