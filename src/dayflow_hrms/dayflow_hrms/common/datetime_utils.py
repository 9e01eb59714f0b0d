from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime
from decimal import Decimal
from typing import Tuple, Union

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    if not isinstance(value, str):
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}")


def parse_month(value: str) -> Tuple[int, int]:
    """Parse YYYY-MM into (year, month)."""
    if not isinstance(value, str):
        raise ValidationError(f"Invalid month (expected YYYY-MM): {value!r}")
    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m")
    except ValueError:
        raise ValidationError(f"Invalid month (expected YYYY-MM): {value!r}")
    return parsed.year, parsed.month


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    first = date(year, month, 1)
    last = date(year, month, monthrange(year, month)[1])
    return first, last


def overlap_days(start: date, end: date, window_start: date, window_end: date) -> int:
    """Calendar days of [start, end] falling inside the window, inclusive."""
    actual_start = max(start, window_start)
    actual_end = min(end, window_end)
    if actual_start > actual_end:
        return 0
    return (actual_end - actual_start).days + 1


def format_hours(hours: Union[Decimal, float, int, None]) -> str:
    """Render fractional hours as HH:MM (minutes are floored)."""
    total_minutes = int(Decimal(str(hours or 0)) * 60)
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def format_clock(value: datetime | None) -> str | None:
    return value.strftime("%H:%M") if value else None
