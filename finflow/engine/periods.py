"""Calendar-month bucketing.

Months are identified by a (year, month) tuple. Ordering always uses the
tuple; display labels are derived from it and never sorted on.
"""

from datetime import date, datetime, time
from typing import NamedTuple

from finflow.core.exceptions import InvalidReferenceDateError
from finflow.core.models import MONTH_ABBREVIATIONS, to_naive_utc


class MonthKey(NamedTuple):
    """Calendar month identifier, ordered chronologically."""

    year: int
    month: int

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        return format_month(self)


def month_key(value: date | datetime) -> MonthKey:
    """Get the calendar month containing a date."""
    return MonthKey(value.year, value.month)


def format_month(key: MonthKey) -> str:
    """Format a month for display, e.g. ``Jan 2025``.

    Uses fixed English abbreviations so output does not depend on the
    process locale.
    """
    return f"{MONTH_ABBREVIATIONS[key.month - 1]} {key.year}"


def parse_month(value: str) -> MonthKey:
    """Parse a ``YYYY-MM`` string.

    Raises:
        ValueError: If the string is not a valid month.
    """
    try:
        year_str, month_str = value.strip().split("-")
        year, month = int(year_str), int(month_str)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid month format: {value!r}. Expected YYYY-MM") from None
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {value!r}")
    return MonthKey(year, month)


def month_start(key: MonthKey) -> date:
    """First day of the month."""
    return date(key.year, key.month, 1)


def next_month(key: MonthKey) -> MonthKey:
    if key.month == 12:
        return MonthKey(key.year + 1, 1)
    return MonthKey(key.year, key.month + 1)


def iterate_months(first: MonthKey, last: MonthKey) -> list[MonthKey]:
    """All months from ``first`` to ``last`` inclusive (empty if reversed)."""
    months: list[MonthKey] = []
    current = first
    while current <= last:
        months.append(current)
        current = next_month(current)
    return months


def is_same_month(a: date | datetime, b: date | datetime) -> bool:
    """Compare year and month components only."""
    return a.year == b.year and a.month == b.month


def coerce_reference_date(value: date | datetime | str) -> datetime:
    """Turn a caller-supplied reference date into a datetime.

    A reference date that cannot be parsed is API misuse, not bad data,
    so it raises instead of being skipped. Aware values are converted to
    naive UTC, the same rule the normalizer applies to transaction dates.

    Raises:
        InvalidReferenceDateError: If the value is not a date or ISO string.
    """
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return to_naive_utc(datetime.fromisoformat(text))
        except ValueError:
            pass
    raise InvalidReferenceDateError(
        "Reference date must be a date, datetime or ISO-8601 string",
        {"value": repr(value)},
    )
