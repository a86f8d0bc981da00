from datetime import date

import pytest

from finance_insights.analysis.metrics import (
    calculate_category_breakdown,
    calculate_core_metrics,
    calculate_monthly_cash_flows,
    calculate_trend_metrics,
    determine_trend_direction,
    three_month_moving_average,
)
from finance_insights.models import MonthlyCashFlow
from helpers import checking, credit_card, make_tx, savings


@pytest.fixture
def accounts():
    return [checking(), savings(), credit_card()]


@pytest.fixture
def ledger():
    return [
        # January
        make_tx("j1", "2025-01-01", "Payroll", -4000.0, "INCOME"),
        make_tx("j2", "2025-01-03", "Landlord", 1500.0, "RENT_AND_UTILITIES"),
        make_tx("j3", "2025-01-09", "Market", 300.0, "GROCERIES"),
        make_tx("j4", "2025-01-12", "Bistro", 200.0, "FOOD_AND_DRINK"),
        make_tx("j5", "2025-01-15", "Transfer to savings", 1000.0, "TRANSFER_OUT", account_id="chk"),
        make_tx("j6", "2025-01-15", "Transfer from checking", -1000.0, "TRANSFER_IN", account_id="sav"),
        # February
        make_tx("f1", "2025-02-01", "Payroll", -4000.0, "INCOME"),
        make_tx("f2", "2025-02-03", "Landlord", 1500.0, "RENT_AND_UTILITIES"),
        make_tx("f3", "2025-02-09", "Market", 400.0, "GROCERIES"),
        make_tx("f4", "2025-02-20", "Payment to Chase", 900.0, "LOAN_PAYMENTS"),
        make_tx("f5", "2025-02-25", "Airline", 600.0, "TRAVEL", pending=True),
    ]


def test_core_metrics_ignore_transfers_payments_and_pending(ledger, accounts):
    core = calculate_core_metrics(ledger, accounts)

    assert core.total_income == pytest.approx(8000.0)
    assert core.total_expenses == pytest.approx(3900.0)
    assert core.net_cash_flow == pytest.approx(4100.0)
    assert core.savings_rate == pytest.approx(4100.0 / 8000.0 * 100)
    assert core.period_months == 2
    assert core.avg_monthly_income == pytest.approx(4000.0)
    assert core.avg_monthly_expenses == pytest.approx(1950.0)
    assert core.date_range.start == "2025-01"
    assert core.date_range.end == "2025-02"


def test_core_metrics_on_empty_input():
    core = calculate_core_metrics([], [])

    assert core.total_income == 0
    assert core.savings_rate == 0
    assert core.period_months == 1
    assert core.date_range.start == date.today().strftime("%Y-%m")


def test_savings_rate_without_income_is_zero(accounts):
    txs = [make_tx("1", "2025-01-05", "Market", 50.0, "GROCERIES")]
    core = calculate_core_metrics(txs, accounts)
    assert core.savings_rate == 0
    assert core.net_cash_flow == pytest.approx(-50.0)


def test_monthly_cash_flows_are_chronological(ledger, accounts):
    monthly = calculate_monthly_cash_flows(ledger, accounts)

    assert [m.month for m in monthly] == ["2025-01", "2025-02"]
    assert monthly[0].income == pytest.approx(4000.0)
    assert monthly[0].expenses == pytest.approx(2000.0)
    assert monthly[1].expenses == pytest.approx(1900.0)
    assert monthly[1].net_cash_flow == pytest.approx(2100.0)


def test_trend_metrics(ledger, accounts):
    trends = calculate_trend_metrics(ledger, accounts)

    assert trends.mom_change.amount == pytest.approx(100.0)
    assert trends.mom_change.percentage_change == pytest.approx(5.0)
    assert trends.trend_direction == "stable"
    assert trends.three_month_moving_average == pytest.approx(2050.0)


def test_single_month_trend_is_stable(accounts):
    txs = [make_tx("1", "2025-01-05", "Payroll", -100.0, "INCOME")]
    trends = calculate_trend_metrics(txs, accounts)
    assert trends.trend_direction == "stable"
    assert trends.mom_change.amount == 0
    assert trends.mom_change.percentage_change == 0


def test_negative_prior_month_uses_absolute_divisor(accounts):
    txs = [
        make_tx("1", "2025-01-05", "Rent", 200.0, "RENT_AND_UTILITIES"),
        make_tx("2", "2025-02-01", "Payroll", -100.0, "INCOME"),
    ]
    trends = calculate_trend_metrics(txs, accounts)
    # -200 -> +100 is a 150 % improvement
    assert trends.mom_change.percentage_change == pytest.approx(150.0)
    assert trends.trend_direction == "improving"


def test_falling_to_negative_from_zero_is_declining(accounts):
    txs = [
        make_tx("1", "2025-01-05", "Payroll", -100.0, "INCOME"),
        make_tx("2", "2025-01-06", "Rent", 100.0, "RENT_AND_UTILITIES"),
        make_tx("3", "2025-02-06", "Rent", 100.0, "RENT_AND_UTILITIES"),
    ]
    trends = calculate_trend_metrics(txs, accounts)
    assert trends.mom_change.percentage_change == -100
    assert trends.trend_direction == "declining"


@pytest.mark.parametrize(
    "change, expected",
    [(5.0, "stable"), (5.01, "improving"), (-5.0, "stable"), (-5.01, "declining"), (0.0, "stable")],
)
def test_trend_band_is_exclusive(change, expected):
    assert determine_trend_direction(change) == expected


def test_moving_average_uses_last_three_months():
    monthly = [
        MonthlyCashFlow(month=f"2025-0{i}", income=0, expenses=0, net_cash_flow=value)
        for i, value in enumerate([1000.0, 100.0, 200.0, 300.0], start=1)
    ]
    assert three_month_moving_average(monthly) == pytest.approx(200.0)
    assert three_month_moving_average(monthly[:1]) == pytest.approx(1000.0)
    assert three_month_moving_average([]) == 0


def test_category_breakdown_ranks_and_shares(ledger, accounts):
    breakdown = calculate_category_breakdown(ledger, accounts)

    categories = [c.category for c in breakdown.all_categories]
    assert categories == ["RENT_AND_UTILITIES", "GROCERIES", "FOOD_AND_DRINK"]
    assert [c.rank for c in breakdown.all_categories] == [1, 2, 3]
    assert breakdown.total_expenses == pytest.approx(3900.0)
    assert breakdown.total_income == pytest.approx(8000.0)
    assert breakdown.period_months == 2

    rent = breakdown.all_categories[0]
    assert rent.total_spend == pytest.approx(3000.0)
    assert rent.monthly_average == pytest.approx(1500.0)
    assert rent.percent_of_expenses == pytest.approx(3000.0 / 3900.0 * 100)
    assert rent.percent_of_income == pytest.approx(37.5)


def test_category_mom_change(ledger, accounts):
    by_category = {c.category: c for c in calculate_category_breakdown(ledger, accounts).all_categories}

    assert by_category["GROCERIES"].mom_change.amount == pytest.approx(100.0)
    assert by_category["GROCERIES"].mom_change.percentage_change == pytest.approx(100.0 / 3.0)
    assert by_category["RENT_AND_UTILITIES"].mom_change.percentage_change == 0
    # Nothing in February
    assert by_category["FOOD_AND_DRINK"].mom_change.amount == pytest.approx(-200.0)
    assert by_category["FOOD_AND_DRINK"].mom_change.percentage_change == pytest.approx(-100.0)


def test_new_category_in_latest_month_is_full_increase(accounts):
    txs = [
        make_tx("1", "2025-01-05", "Market", 50.0, "GROCERIES"),
        make_tx("2", "2025-02-05", "Cinema", 20.0, "ENTERTAINMENT"),
    ]
    by_category = {c.category: c for c in calculate_category_breakdown(txs, accounts).all_categories}
    assert by_category["ENTERTAINMENT"].mom_change.percentage_change == 100


def test_single_month_breakdown_has_no_mom_change(accounts):
    txs = [make_tx("1", "2025-01-05", "Market", 50.0, "GROCERIES")]
    item = calculate_category_breakdown(txs, accounts).all_categories[0]
    assert item.mom_change.amount == 0
    assert item.mom_change.percentage_change == 0
    assert item.percent_of_income == 0


def test_top_categories_capped_at_five(accounts):
    categories = ["A", "B", "C", "D", "E", "F", "G"]
    txs = [
        make_tx(str(i), "2025-01-05", name, float(10 * (i + 1)), name)
        for i, name in enumerate(categories)
    ]
    breakdown = calculate_category_breakdown(txs, accounts)
    assert len(breakdown.all_categories) == 7
    assert [c.category for c in breakdown.top_categories] == ["G", "F", "E", "D", "C"]
