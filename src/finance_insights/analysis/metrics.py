from collections import defaultdict
from collections.abc import Sequence
from datetime import date

from finance_insights.classification import TransactionClassifier, get_cash_flow_transactions
from finance_insights.logger import get_logger
from finance_insights.models import (
    EXPENSE_CLASSIFICATIONS,
    Account,
    CategoryBreakdownItem,
    CategoryBreakdownResult,
    ClassifiedTransaction,
    FinancialMetrics,
    MomChange,
    MonthlyCashFlow,
    MonthRange,
    Transaction,
    TransactionClassification,
    TrendDirection,
    TrendMetrics,
)
from finance_insights.taxonomy import Taxonomy

logger = get_logger(__name__)

STABILITY_THRESHOLD = 5.0
MOVING_AVERAGE_MONTHS = 3
TOP_CATEGORY_LIMIT = 5


def _cash_flow(
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    taxonomy: Taxonomy | None,
) -> list[ClassifiedTransaction]:
    classified = TransactionClassifier(taxonomy).classify_all(transactions, accounts)
    return get_cash_flow_transactions(classified)


def _is_expense(transaction: ClassifiedTransaction) -> bool:
    return transaction.classification in EXPENSE_CLASSIFICATIONS


def _totals(cash_flow: Sequence[ClassifiedTransaction]) -> tuple[float, float]:
    income = 0.0
    expenses = 0.0
    for transaction in cash_flow:
        if transaction.classification == TransactionClassification.INCOME:
            income += abs(transaction.amount)
        elif _is_expense(transaction):
            expenses += transaction.amount
    return income, expenses


def _month_keys(transactions: Sequence[Transaction]) -> list[str]:
    return sorted({transaction.month_key for transaction in transactions})


def _percent_change(current: float, prior: float) -> float:
    if prior != 0:
        return (current - prior) / abs(prior) * 100
    if current > 0:
        return 100.0
    if current < 0:
        return -100.0
    return 0.0


def calculate_core_metrics(
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    taxonomy: Taxonomy | None = None,
) -> FinancialMetrics:
    """
    Income, expenses and savings rate over the whole transaction list,
    ignoring transfers, card payments and pending transactions.
    """
    total_income, total_expenses = _totals(_cash_flow(transactions, accounts, taxonomy))
    net_cash_flow = total_income - total_expenses
    savings_rate = net_cash_flow / total_income * 100 if total_income > 0 else 0.0

    months = _month_keys(transactions)
    period_months = max(1, len(months))
    current_month = date.today().strftime("%Y-%m")

    return FinancialMetrics(
        total_income=total_income,
        total_expenses=total_expenses,
        net_cash_flow=net_cash_flow,
        savings_rate=savings_rate,
        avg_monthly_income=total_income / period_months,
        avg_monthly_expenses=total_expenses / period_months,
        period_months=period_months,
        date_range=MonthRange(
            start=months[0] if months else current_month,
            end=months[-1] if months else current_month,
        ),
    )


def calculate_monthly_cash_flows(
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    taxonomy: Taxonomy | None = None,
) -> list[MonthlyCashFlow]:
    """Per-month income, expenses and net cash flow, oldest month first."""
    by_month: dict[str, list[ClassifiedTransaction]] = defaultdict(list)
    for transaction in _cash_flow(transactions, accounts, taxonomy):
        by_month[transaction.month_key].append(transaction)

    monthly: list[MonthlyCashFlow] = []
    for month in sorted(by_month):
        income, expenses = _totals(by_month[month])
        monthly.append(MonthlyCashFlow(
            month=month,
            income=income,
            expenses=expenses,
            net_cash_flow=income - expenses,
        ))
    return monthly


def determine_trend_direction(percentage_change: float) -> TrendDirection:
    if percentage_change > STABILITY_THRESHOLD:
        return "improving"
    if percentage_change < -STABILITY_THRESHOLD:
        return "declining"
    return "stable"


def three_month_moving_average(monthly: Sequence[MonthlyCashFlow]) -> float:
    recent = list(monthly)[-MOVING_AVERAGE_MONTHS:]
    if not recent:
        return 0.0
    return sum(month.net_cash_flow for month in recent) / len(recent)


def calculate_trend_metrics(
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    taxonomy: Taxonomy | None = None,
) -> TrendMetrics:
    """
    Month-over-month movement of net cash flow between the last two months
    with data. A swing beyond +/-5 % counts as improving or declining.
    """
    monthly = calculate_monthly_cash_flows(transactions, accounts, taxonomy)

    mom_change = MomChange()
    if len(monthly) >= 2:
        prior, current = monthly[-2], monthly[-1]
        mom_change = MomChange(
            amount=current.net_cash_flow - prior.net_cash_flow,
            percentage_change=_percent_change(current.net_cash_flow, prior.net_cash_flow),
        )

    direction = determine_trend_direction(mom_change.percentage_change)
    logger.debug(
        "Trend over %d month(s): %s (%.1f%%)",
        len(monthly),
        direction,
        mom_change.percentage_change,
    )
    return TrendMetrics(
        trend_direction=direction,
        mom_change=mom_change,
        three_month_moving_average=three_month_moving_average(monthly),
        monthly_data=monthly,
    )


def _spend_by_category(
    cash_flow: Sequence[ClassifiedTransaction], month: str | None = None
) -> dict[str, float]:
    spend: dict[str, float] = defaultdict(float)
    for transaction in cash_flow:
        if not _is_expense(transaction):
            continue
        if month is not None and transaction.month_key != month:
            continue
        spend[transaction.category] += transaction.amount
    return dict(spend)


def calculate_category_breakdown(
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    taxonomy: Taxonomy | None = None,
) -> CategoryBreakdownResult:
    """
    Expense categories ranked by total spend, with each category's share of
    expenses and income and its change between the last two months.
    """
    cash_flow = _cash_flow(transactions, accounts, taxonomy)
    total_income, total_expenses = _totals(cash_flow)

    months = _month_keys(transactions)
    period_months = max(1, len(months))

    # A single month has nothing to compare against
    has_prior = len(months) >= 2
    current_spend = _spend_by_category(cash_flow, months[-1]) if has_prior else {}
    prior_spend = _spend_by_category(cash_flow, months[-2]) if has_prior else {}

    items: list[CategoryBreakdownItem] = []
    for category, total_spend in _spend_by_category(cash_flow).items():
        mom_change = MomChange()
        if has_prior:
            current = current_spend.get(category, 0.0)
            prior = prior_spend.get(category, 0.0)
            change = current - prior
            if prior != 0:
                percentage = change / prior * 100
            elif current > 0:
                percentage = 100.0
            else:
                percentage = 0.0
            mom_change = MomChange(amount=change, percentage_change=percentage)

        items.append(CategoryBreakdownItem(
            rank=0,
            category=category,
            total_spend=total_spend,
            monthly_average=total_spend / period_months,
            percent_of_expenses=total_spend / total_expenses * 100 if total_expenses > 0 else 0.0,
            percent_of_income=total_spend / total_income * 100 if total_income > 0 else 0.0,
            mom_change=mom_change,
        ))

    items.sort(key=lambda item: item.total_spend, reverse=True)
    for rank, item in enumerate(items, start=1):
        item.rank = rank

    return CategoryBreakdownResult(
        top_categories=items[:TOP_CATEGORY_LIMIT],
        all_categories=items,
        total_expenses=total_expenses,
        total_income=total_income,
        period_months=period_months,
    )
