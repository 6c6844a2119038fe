"""Shared validation utilities"""

import re
from datetime import date, datetime
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_email(email: Optional[str], message: str = "Use a valid email address.") -> str:
    """
    Validate email format.

    Returns:
        Lowercase, stripped email address

    Raises:
        ValueError: If email is missing or malformed
    """
    email = (email or "").strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError(message)
    return email


def validate_international_phone(
    phone: Optional[str],
    message: str = "Please enter a valid international phone number (e.g., +1 234 567 8900)",
) -> str:
    """
    Validate an international phone number and normalize it to E.164.

    Raises:
        ValueError: If the number has no country code or a bad digit count
    """
    phone = (phone or "").strip()
    if not phone.startswith("+"):
        raise ValueError(message)

    digits = re.sub(r"\D", "", phone)
    # E.164 allows at most 15 digits including the country code
    if not 8 <= len(digits) <= 15:
        raise ValueError(message)

    return f"+{digits}"


def require_text(
    value: Optional[str],
    message: str,
    min_length: int = 1,
    max_length: Optional[int] = None,
    max_message: Optional[str] = None,
) -> str:
    """Strip ``value`` and enforce its length bounds"""
    value = (value or "").strip()
    if len(value) < min_length:
        raise ValueError(message)
    if max_length is not None and len(value) > max_length:
        raise ValueError(max_message or message)
    return value


def parse_date(value, message: str) -> date:
    """Accept a date, datetime or ISO string and return the calendar date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ValueError(message)


def parse_datetime(value) -> Optional[datetime]:
    """Lenient ISO timestamp parsing for backend payloads; None when unparseable"""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def status_filter(value: Optional[str]) -> Optional[str]:
    """List filters use "all" for no filter; the backend expects the parameter absent"""
    if not value or value == "all":
        return None
    return value


def round_money(value: float) -> float:
    return round(float(value), 2)
