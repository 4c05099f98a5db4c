"""Shared utilities used across the app."""
import re
from datetime import datetime

from app.core.config import settings

_NON_DIGITS = re.compile(r"\D")


def to_e164_or_none(raw: str | None) -> str | None:
    """
    Normalize a parent contact number for SMS delivery.
    11 digits starting with 1 -> +1XXXXXXXXXX; 10 digits -> +1 prefixed;
    a value already starting with '+' of at least 11 characters is kept as is.
    Returns None when the number cannot be normalized.
    """
    if not raw:
        return None
    raw = str(raw)
    digits = _NON_DIGITS.sub("", raw)
    if len(digits) == 11 and digits.startswith("1"):
        return "+" + digits
    if len(digits) == 10:
        return "+1" + digits
    if raw.startswith("+") and len(raw) >= 11:
        return raw
    return None


def format_phone_display(phone: str | None) -> str | None:
    """(416) 555-1234 for 10-digit numbers; anything else is returned unchanged."""
    if not phone:
        return phone
    digits = _NON_DIGITS.sub("", phone)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return phone


def format_amount(amount: float | None, placeholder: str = "the due amount") -> str:
    """Currency string for reminder messages; placeholder when no amount is set."""
    if not amount:
        return placeholder
    return f"{settings.CURRENCY_SYMBOL}{float(amount):.2f}"


def format_timestamp(value: datetime | None) -> str | None:
    """'2024-03-14 - 09:00:00' as shown in student listings."""
    if value is None:
        return None
    return value.strftime("%Y-%m-%d - %H:%M:%S")
