"""
Date parsing and formatting helpers.

All date keys in the pipeline are YYYY-MM-DD strings produced by format_date.
"""

from datetime import date, datetime, timezone
from typing import Union

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

MONTH_ABBREVIATIONS = [name[:3] for name in MONTH_NAMES]

DATE_FORMAT = "%Y-%m-%d"


def format_date(value: Union[date, datetime]) -> str:
    """Format a date or datetime as YYYY-MM-DD."""
    # strftime does not zero-pad years below 1000 on every platform
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string (or a full ISO-8601 datetime) into a date.

    Args:
        value: Date string

    Returns:
        Calendar date

    Raises:
        ValueError: If the string is not a valid date
    """
    text = value.strip()
    if len(text) == 10:
        return datetime.strptime(text, DATE_FORMAT).date()
    return parse_timestamp(text).date()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a timezone-aware datetime.

    A trailing "Z" is accepted for UTC. Timestamps without an offset
    are read as UTC.

    Raises:
        ValueError: If the string is not a valid ISO-8601 datetime
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("timestamp must be a non-empty string")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_month(value: str) -> int:
    """Parse a month given as 1-12 or as a (partial) month name.

    "7", "jul" and "July" all give 7.

    Raises:
        ValueError: If the input names no month
    """
    text = str(value).strip()
    if text.isdigit():
        month = int(text)
        if 1 <= month <= 12:
            return month
    elif text:
        lowered = text.lower()
        for index, name in enumerate(MONTH_NAMES):
            if name.lower().startswith(lowered):
                return index + 1

    raise ValueError(
        f'Invalid month: {value}. Use 1-12 or month names like "January", "July", etc.'
    )


def month_name(month: int) -> str:
    """Return the display name for a month number."""
    if month < 1 or month > 12:
        raise ValueError(f"Invalid month number: {month}. Must be 1-12.")
    return MONTH_NAMES[month - 1]


def default_year() -> int:
    """Current calendar year, the default for contribution maps."""
    return date.today().year
