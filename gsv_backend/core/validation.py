"""Shared field checks for forms that report every error at once."""
import re
from typing import Any, Optional
from email_validator import validate_email, EmailNotValidError

NON_DIGITS = re.compile(r"\D")
PHONE_CHARS = re.compile(r"^[\d\s\-\(\)\+\.]+$")


def is_valid_email(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_phone(value: Optional[str]) -> bool:
    """10 to 15 digits, allowing spaces, dashes, dots, parentheses and a leading +"""
    if not value or not PHONE_CHARS.match(value):
        return False
    digits = NON_DIGITS.sub("", value)
    return 10 <= len(digits) <= 15


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def length_error(value: str, min_length: int, max_length: int, label: str) -> Optional[str]:
    if len(value) < min_length:
        return f"{label} must be at least {min_length} characters"
    if len(value) > max_length:
        return f"{label} must be no more than {max_length} characters"
    return None


def validation_failed(errors, message: str = "Validation failed") -> dict:
    """HTTPException detail carrying per-field errors"""
    return {"message": message, "errors": errors}
