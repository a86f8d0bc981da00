import re
from collections.abc import Sequence
from datetime import date
from typing import NamedTuple

from finance_insights.models import MonthRange, Transaction

_MONTH_KEY_RE = re.compile(r"^(\d{4})-(\d{2})$")

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class DateRangePreset(NamedTuple):
    label: str
    months: int  # 0 means all time


DATE_RANGE_PRESETS: tuple[DateRangePreset, ...] = (
    DateRangePreset("Last 3 months", 3),
    DateRangePreset("Last 6 months", 6),
    DateRangePreset("Last 12 months", 12),
    DateRangePreset("All time", 0),
)


def month_key(value: date) -> str:
    return value.strftime("%Y-%m")


def parse_month_key(value: str | None) -> date | None:
    """``"2025-01"`` -> ``date(2025, 1, 1)``; None for anything malformed."""
    if not value:
        return None
    match = _MONTH_KEY_RE.match(value.strip())
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return date(year, month, 1)


def add_months(value: date, months: int) -> date:
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    return date(year, month + 1, 1)


def generate_month_range(start: str, end: str) -> list[str]:
    """Every month key from ``start`` to ``end`` inclusive; empty if reversed."""
    start_date = parse_month_key(start)
    end_date = parse_month_key(end)
    if start_date is None or end_date is None:
        return []

    months: list[str] = []
    current = start_date
    while current <= end_date:
        months.append(month_key(current))
        current = add_months(current, 1)
    return months


def format_month_display(key: str) -> str:
    parsed = parse_month_key(key)
    if parsed is None:
        return key
    return f"{MONTH_ABBREVIATIONS[parsed.month - 1]} {parsed.year}"


def get_date_range_presets() -> list[DateRangePreset]:
    return list(DATE_RANGE_PRESETS)


def calculate_date_range(
    preset_months: int,
    transactions: Sequence[Transaction],
    today: date | None = None,
) -> MonthRange:
    """
    Month range ending with the current month. ``preset_months`` of 0 starts
    at the earliest transaction instead.
    """
    today = today or date.today()
    end = month_key(today)

    if preset_months <= 0:
        start = min((t.month_key for t in transactions), default=end)
        return MonthRange(start=start, end=end)

    start = month_key(add_months(today.replace(day=1), -(preset_months - 1)))
    return MonthRange(start=start, end=end)
