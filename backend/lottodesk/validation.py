from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from .errors import ValidationError
from .time_utils import parse_iso_date


# Maximum amount: $9,999,999.99 (999,999,999 cents)
# This prevents database overflow issues and nonsensical amounts
MAX_AMOUNT_CENTS = 999_999_999

BOX_NUMBER_MIN = 1
BOX_NUMBER_MAX = 80

# Values staff type to say "no ticket in this box"
ABSENT_MARKERS = {"", "-"}


def parse_business_date(value: Any, field: str = "date") -> date:
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format")


def parse_int(value: Any, field: str, *, minimum: int | None = None) -> int:
    """
    Strict integer coercion.

    Rejects bools, floats, decimals and scientific notation.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if "e" in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if "." in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        try:
            result = int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    elif isinstance(value, float):
        raise ValidationError(f"{field} must be an integer, not a decimal")
    else:
        raise ValidationError(f"{field} must be an integer")

    if minimum is not None and result < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return result


def parse_optional_int(value: Any, field: str, *, minimum: int | None = None) -> int | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip() == "":
        return None
    return parse_int(value, field, minimum=minimum)


def parse_ticket_number(value: Any, field: str) -> int | None:
    """
    Parse an open/close/new-box-start reading.

    None, "" and "-" mean "no ticket" and come back as None.
    0 is a real reading and stays 0. Negative numbers are rejected.
    """
    if value is None:
        return None
    if isinstance(value, str) and value.strip() in ABSENT_MARKERS:
        return None
    return parse_int(value, field, minimum=0)


def parse_money_cents(value: Any, field: str, *, allow_negative: bool = True) -> int:
    """
    Convert a currency amount to integer cents without float rounding.

    Accepts ints/strings/Decimals in dollars ("12.50" -> 1250). Floats are
    routed through str() so 0.1 becomes exactly 10 cents.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number")
    try:
        if isinstance(value, float):
            amount = Decimal(str(value))
        else:
            amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number")

    cents = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if abs(cents) > MAX_AMOUNT_CENTS:
        raise ValidationError(f"{field} is too large")
    if not allow_negative and cents < 0:
        raise ValidationError(f"{field} cannot be negative")
    return cents


def parse_optional_money_cents(value: Any, field: str, *, allow_negative: bool = True) -> int | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip() == "":
        return None
    return parse_money_cents(value, field, allow_negative=allow_negative)


def parse_cents_field(payload: dict, key: str, *, allow_negative: bool = True) -> int | None:
    """
    Read an amount from a request body.

    "<key>_cents" wins when present (already in cents), else "<key>" is read as dollars.
    """
    cents_key = f"{key}_cents"
    if payload.get(cents_key) is not None:
        cents = parse_int(payload[cents_key], cents_key)
        if not allow_negative and cents < 0:
            raise ValidationError(f"{cents_key} cannot be negative")
        return cents
    return parse_optional_money_cents(payload.get(key), key, allow_negative=allow_negative)


def cents_to_str(cents: int | None) -> str | None:
    if cents is None:
        return None
    sign = "-" if cents < 0 else ""
    cents = abs(cents)
    return f"{sign}{cents // 100}.{cents % 100:02d}"
