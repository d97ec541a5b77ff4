"""Calendar-month helpers for budget and trend bucketing."""

import re
from datetime import date
from typing import Optional


MONTH_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def parse_month(month: Optional[str]) -> Optional[date]:
    """First day of a ``YYYY-MM`` month, or None if the string is malformed."""
    if not isinstance(month, str):
        return None
    match = MONTH_PATTERN.match(month.strip())
    if not match:
        return None
    return date(int(match.group(1)), int(match.group(2)), 1)


def shift_month(first_day: date, months: int) -> date:
    """First day of the month ``months`` away from ``first_day``'s month."""
    index = first_day.year * 12 + (first_day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def trailing_months(today: date, count: int) -> list[date]:
    """
    First days of the ``count`` calendar months ending with today's month.

    Oldest first.
    """
    current = today.replace(day=1)
    return [shift_month(current, offset) for offset in range(-(count - 1), 1)]
