from datetime import date

import pytest

from finance_insights.statement.periods import (
    add_months,
    calculate_date_range,
    format_month_display,
    generate_month_range,
    get_date_range_presets,
    parse_month_key,
)
from helpers import make_tx


def test_month_range_spans_year_boundary():
    assert generate_month_range("2024-11", "2025-02") == ["2024-11", "2024-12", "2025-01", "2025-02"]


def test_month_range_single_month():
    assert generate_month_range("2025-03", "2025-03") == ["2025-03"]


@pytest.mark.parametrize("start, end", [("2025-05", "2025-01"), ("2025-13", "2025-14"), ("garbage", "2025-01")])
def test_month_range_invalid_or_reversed_is_empty(start, end):
    assert generate_month_range(start, end) == []


@pytest.mark.parametrize("value", [None, "", "2025", "2025-1", "2025-00", "2025-13", "25-01", "2025-01-05"])
def test_parse_month_key_rejects_malformed(value):
    assert parse_month_key(value) is None


def test_parse_month_key():
    assert parse_month_key("2025-07") == date(2025, 7, 1)


def test_format_month_display():
    assert format_month_display("2025-01") == "Jan 2025"
    assert format_month_display("2024-12") == "Dec 2024"
    assert format_month_display("not-a-month") == "not-a-month"


def test_add_months_wraps_years():
    assert add_months(date(2025, 1, 1), -1) == date(2024, 12, 1)
    assert add_months(date(2025, 11, 1), 3) == date(2026, 2, 1)


def test_presets():
    presets = get_date_range_presets()
    assert [p.months for p in presets] == [3, 6, 12, 0]
    assert presets[-1].label == "All time"


def test_preset_range_ends_this_month():
    date_range = calculate_date_range(3, [], today=date(2025, 2, 14))
    assert date_range.start == "2024-12"
    assert date_range.end == "2025-02"


def test_all_time_starts_at_earliest_transaction():
    txs = [
        make_tx("1", "2024-06-03", "a", 1.0),
        make_tx("2", "2023-09-20", "b", 1.0),
    ]
    date_range = calculate_date_range(0, txs, today=date(2025, 2, 14))
    assert date_range.start == "2023-09"
    assert date_range.end == "2025-02"


def test_all_time_without_transactions_is_current_month():
    date_range = calculate_date_range(0, [], today=date(2025, 2, 14))
    assert date_range.start == date_range.end == "2025-02"
