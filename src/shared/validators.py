"""Validation utilities for the ledger analytics application."""

from typing import Any, Dict, List, Optional
from datetime import date, datetime

from .exceptions import ValidationError


# Budget periods
VALID_PERIODS = ["monthly", "weekly"]

# First day of a weekly budget period
VALID_WEEK_STARTS = ["sunday", "monday"]


def parse_date(value: Any, field_name: str = "date") -> date:
    """
    Parse a calendar date.

    Accepts date objects, YYYY-MM-DD strings and ISO timestamps; timestamps
    are truncated to the day.

    Args:
        value: Value to parse
        field_name: Field name used in the error message

    Returns:
        Parsed date

    Raises:
        ValidationError: If the value is not a valid date
    """
    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if not value or not isinstance(value, str):
        raise ValidationError(f"{field_name} is required")

    text = value.strip()

    try:
        if len(text) > 10 and text[10] in ('T', ' '):
            return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
        return datetime.strptime(text, '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError(f"Invalid {field_name} '{value}'. Use YYYY-MM-DD")


def validate_period_type(period: str) -> str:
    """
    Validate budget period type.

    Args:
        period: Period to validate

    Returns:
        Validated period

    Raises:
        ValidationError: If period is invalid
    """
    if not period or not isinstance(period, str):
        raise ValidationError("Period type is required")

    period = period.strip().lower()

    if period not in VALID_PERIODS:
        raise ValidationError(
            f"Invalid period type. Must be one of: {', '.join(VALID_PERIODS)}"
        )

    return period


def validate_week_start(week_start: str) -> str:
    """Validate the first day of a weekly period."""
    if not week_start:
        raise ValidationError("Week start is required")

    week_start = week_start.strip().lower()

    if week_start not in VALID_WEEK_STARTS:
        raise ValidationError(
            f"Invalid week start. Must be one of: {', '.join(VALID_WEEK_STARTS)}"
        )

    return week_start


def validate_limit(limit: Any, default: Optional[int] = None) -> Optional[int]:
    """
    Validate a top-N limit.

    Args:
        limit: Limit value (may be a query string)
        default: Value returned when limit is absent

    Returns:
        Validated limit

    Raises:
        ValidationError: If limit is not a positive integer
    """
    if limit is None or limit == '':
        return default

    try:
        limit = int(limit)
    except (ValueError, TypeError):
        raise ValidationError("Limit must be an integer")

    if limit < 1:
        raise ValidationError("Limit must be greater than 0")

    return limit


def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> None:
    """
    Validate that required fields are present in data.

    Args:
        data: Data dictionary to validate
        required_fields: List of required field names

    Raises:
        ValidationError: If any required field is missing
    """
    missing_fields = [field for field in required_fields if field not in data or data[field] is None]

    if missing_fields:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing_fields)}"
        )
