from __future__ import annotations

from datetime import date, datetime, time, timedelta

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}. Expected YYYY-MM-DD")


def parse_month(value: str) -> date:
    """Parse YYYY-MM into the first day of that month."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m").date()
    except ValueError:
        raise ValidationError("Invalid month format. Expected YYYY-MM")


def month_start(value: date) -> date:
    return date(value.year, value.month, 1)


def month_bounds(value: date) -> tuple[datetime, datetime]:
    """Inclusive [start, end] datetimes covering the calendar month of ``value``."""
    start = month_start(value)
    if start.month == 12:
        next_start = date(start.year + 1, 1, 1)
    else:
        next_start = date(start.year, start.month + 1, 1)
    end = datetime.combine(next_start, time.min) - timedelta(microseconds=1)
    return datetime.combine(start, time.min), end


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
