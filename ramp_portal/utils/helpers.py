"""Shared parsing helpers used by services and blueprints.

parse_date:          lenient date parsing (None on bad input)
parse_date_input:    strict date parsing (ValidationError on bad input)
parse_amount:        numeric form fields → float, rejecting NaN / negatives
"""
import math
from datetime import date, datetime

from ramp_portal.core.exceptions import ValidationError


def parse_date(value):
    """Parse a date string (ISO or MM/DD/YYYY) to a date object.

    Returns None for empty/invalid input. Supports:
    - YYYY-MM-DD (ISO format, what <input type="date"> sends)
    - YYYY-MM-DDTHH:MM:SS (datetime ISO → .date())
    - MM/DD/YYYY
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except (ValueError, TypeError):
        pass
    try:
        return datetime.fromisoformat(str(value)).date()
    except (ValueError, TypeError):
        pass
    try:
        return datetime.strptime(str(value), "%m/%d/%Y").date()
    except (ValueError, TypeError):
        return None


def parse_date_input(value, field: str, required: bool = False):
    """Parse a date, raising ValidationError when it is unparseable.

    Empty input returns None unless ``required`` is set.
    """
    if value in (None, ""):
        if required:
            raise ValidationError(f"{field} is required", details={field: "required"})
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError(
            f"{field} must be a date (YYYY-MM-DD)",
            details={field: "invalid date"},
        )
    return parsed


def parse_amount(value, field: str, *, required: bool = False, positive: bool = False,
                 default: float = 0.0) -> float:
    """Parse a numeric form value.

    Absent optional values become ``default``. Present values must be finite
    and non-negative (strictly positive when ``positive``); anything else is a
    ValidationError rather than a silent zero.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{field} is required", details={field: "required"})
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", details={field: "not a number"})
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", details={field: "not a number"})
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number", details={field: "not finite"})
    if number < 0:
        raise ValidationError(f"{field} cannot be negative", details={field: "negative"})
    if positive and number == 0:
        raise ValidationError(f"{field} must be greater than zero", details={field: "zero"})
    return number

