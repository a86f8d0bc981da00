"""
Rule-based insights and plain-text summaries of the computed metrics.

The text renderers produce compact context blocks that can be handed to a
reporting or chat layer as-is.
"""
from collections.abc import Sequence

from finance_insights.domain.formatting import (
    format_category,
    format_currency,
    format_percent,
    format_signed_percent,
)
from finance_insights.models import (
    BalanceSheet,
    CategoryBreakdownResult,
    FinancialMetrics,
    FinancialSnapshot,
    InsightItem,
    Transaction,
    TrendMetrics,
)
from finance_insights.taxonomy import DEFAULT_TAXONOMY, Taxonomy

SAVINGS_RATE_TARGET = 20.0
SAVINGS_RATE_FOUNDATION = 10.0

CONTEXT_CATEGORY_LIMIT = 8
CONTEXT_MERCHANT_LIMIT = 8
CONTEXT_RECURRING_LIMIT = 6
CONTEXT_TRANSACTION_LIMIT = 50

NO_DATA_MESSAGE = "No transaction data available yet."


def _health_assessment(core: FinancialMetrics) -> InsightItem:
    rate = core.savings_rate
    if rate >= SAVINGS_RATE_TARGET:
        return InsightItem(
            type="positive",
            text=f"You're in great financial shape with a {rate:.1f}% savings rate - "
                 f"that's at or above the recommended {SAVINGS_RATE_TARGET:.0f}% target!",
        )
    if rate >= SAVINGS_RATE_FOUNDATION:
        return InsightItem(
            type="neutral",
            text=f"Your {rate:.1f}% savings rate shows you're building a foundation. "
                 f"The common target is {SAVINGS_RATE_TARGET:.0f}%, and you're making progress.",
        )
    if rate > 0:
        return InsightItem(
            type="attention",
            text=f"Your savings rate of {rate:.1f}% suggests there might be room to save more. "
                 "Even small increases can add up over time.",
        )
    return InsightItem(
        type="attention",
        text="Your expenses are currently exceeding your income. "
             "This is worth looking at to find ways to close the gap.",
    )


def _trend_observation(trends: TrendMetrics) -> InsightItem:
    change = format_currency(abs(trends.mom_change.amount))
    if trends.trend_direction == "improving":
        return InsightItem(
            type="positive",
            text=f"Your finances are trending in the right direction - "
                 f"net cash flow improved by {change} from last month.",
        )
    if trends.trend_direction == "declining":
        return InsightItem(
            type="attention",
            text=f"Your net cash flow decreased by {change} compared to last month. "
                 "It's worth keeping an eye on this.",
        )
    return InsightItem(
        type="neutral",
        text="Your finances have been stable recently, with consistent income and spending patterns.",
    )


def _top_spending(breakdown: CategoryBreakdownResult) -> InsightItem | None:
    if not breakdown.top_categories:
        return None
    top = breakdown.top_categories[0]
    return InsightItem(
        type="neutral",
        text=f"{format_category(top.category)} is your biggest expense at "
             f"{format_currency(top.total_spend)} ({top.percent_of_expenses:.1f}% of spending).",
    )


def _savings_comparison(core: FinancialMetrics) -> InsightItem:
    rate = core.savings_rate
    diff = rate - SAVINGS_RATE_TARGET
    if diff >= 0:
        return InsightItem(
            type="positive",
            text=f"You're saving {rate:.1f}% of your income, exceeding the "
                 f"{SAVINGS_RATE_TARGET:.0f}% benchmark by {diff:.1f} percentage points.",
        )
    return InsightItem(
        type="neutral",
        text=f"At {rate:.1f}%, you're {abs(diff):.1f} percentage points away from the "
             f"{SAVINGS_RATE_TARGET:.0f}% savings benchmark.",
    )


def _positive_win(core: FinancialMetrics, balance_sheet: BalanceSheet) -> InsightItem:
    if balance_sheet.net_worth > 0:
        return InsightItem(
            type="positive",
            text=f"Your net worth is positive at {format_currency(balance_sheet.net_worth)} - "
                 "that's a solid foundation to build on!",
        )
    if core.net_cash_flow > 0:
        return InsightItem(
            type="positive",
            text=f"You saved {format_currency(core.net_cash_flow)} over this period - "
                 "every dollar saved is progress!",
        )
    return InsightItem(
        type="positive",
        text="Taking time to review your finances is a great first step. "
             "Awareness is the foundation of financial progress!",
    )


def generate_insights(
    core: FinancialMetrics,
    trends: TrendMetrics,
    breakdown: CategoryBreakdownResult,
    balance_sheet: BalanceSheet,
) -> list[InsightItem]:
    """
    Short observations in a fixed order: overall health, trend, top
    spending category (when there is one), savings versus the 20 %
    benchmark and something positive.
    """
    insights = [_health_assessment(core), _trend_observation(trends)]
    top = _top_spending(breakdown)
    if top is not None:
        insights.append(top)
    insights.append(_savings_comparison(core))
    insights.append(_positive_win(core, balance_sheet))
    return insights


def build_financial_summary(
    core: FinancialMetrics,
    trends: TrendMetrics,
    breakdown: CategoryBreakdownResult,
    balance_sheet: BalanceSheet,
    taxonomy: Taxonomy | None = None,
) -> str:
    taxonomy = taxonomy or DEFAULT_TAXONOMY

    essential_share = sum(
        item.percent_of_income
        for item in breakdown.top_categories
        if item.category in taxonomy.essential_categories
    )
    discretionary_share = sum(
        item.percent_of_income
        for item in breakdown.top_categories
        if item.category not in taxonomy.essential_categories
    )

    lines = [
        "=== FINANCIAL SUMMARY ===",
        "",
        f"PERIOD: {core.date_range.start} to {core.date_range.end} ({core.period_months} months)",
        "",
        "INCOME & EXPENSES:",
        f"- Total Income: {format_currency(core.total_income)}",
        f"- Total Expenses: {format_currency(core.total_expenses)}",
        f"- Net Cash Flow: {format_currency(core.net_cash_flow)}",
        f"- Monthly Avg Income: {format_currency(core.avg_monthly_income)}",
        f"- Monthly Avg Expenses: {format_currency(core.avg_monthly_expenses)}",
        "",
        "KEY RATIOS:",
        f"- Savings Rate: {format_percent(core.savings_rate)}",
        f"- Essential Expenses: {format_percent(essential_share)} of income",
        f"- Discretionary Expenses: {format_percent(discretionary_share)} of income",
        "",
        "TREND ANALYSIS:",
        f"- Trend Direction: {trends.trend_direction}",
        f"- Month-over-Month Change: {format_currency(trends.mom_change.amount)} "
        f"({format_signed_percent(trends.mom_change.percentage_change)})",
        f"- 3-Month Moving Average: {format_currency(trends.three_month_moving_average)}",
        "",
        "TOP SPENDING CATEGORIES:",
    ]
    for item in breakdown.top_categories:
        lines.append(
            f"  - {format_category(item.category)}: {format_currency(item.total_spend)} "
            f"({format_percent(item.percent_of_expenses)} of expenses, "
            f"{format_signed_percent(item.mom_change.percentage_change)} MoM)"
        )
    lines.extend([
        "",
        "BALANCE SHEET:",
        f"- Liquid Assets: {format_currency(balance_sheet.assets.total_assets)}",
        f"- Credit Card Debt: {format_currency(balance_sheet.liabilities.total_liabilities)}",
        f"- Net Worth: {format_currency(balance_sheet.net_worth)}",
    ])
    return "\n".join(lines)


def build_snapshot_context(
    transactions: Sequence[Transaction], snapshot: FinancialSnapshot | None
) -> str:
    """Snapshot headline numbers followed by the most recent transactions."""
    if snapshot is None or not transactions:
        return NO_DATA_MESSAGE

    parts = [
        "=== FINANCIAL SUMMARY ===",
        f"Period: {snapshot.date_range.start} to {snapshot.date_range.end} ({snapshot.date_range.days} days)",
        f"Total Spending: ${snapshot.total_spending:.2f}",
        f"Daily Average: ${snapshot.average_daily_spend:.2f}",
        f"Weekly Velocity: ${snapshot.weekly_velocity:.2f}",
        f"Discretionary Ratio: {snapshot.discretionary_ratio:.1f}%",
        "",
        "=== SPENDING BY CATEGORY ===",
    ]
    for category in snapshot.category_breakdown[:CONTEXT_CATEGORY_LIMIT]:
        parts.append(
            f"{category.category}: ${category.amount:.2f} "
            f"({category.percentage:.1f}%, {category.transaction_count} txns)"
        )
    parts.append("")

    parts.append("=== TOP MERCHANTS ===")
    for merchant in snapshot.top_merchants[:CONTEXT_MERCHANT_LIMIT]:
        parts.append(f"{merchant.name}: ${merchant.total_spent:.2f} ({merchant.transaction_count} txns)")
    parts.append("")

    if snapshot.recurring_charges:
        parts.append("=== DETECTED RECURRING CHARGES ===")
        for charge in snapshot.recurring_charges[:CONTEXT_RECURRING_LIMIT]:
            parts.append(
                f"{charge.merchant}: ${charge.amount:.2f}/{charge.frequency} "
                f"(~${charge.annual_impact:.0f}/year)"
            )
        parts.append("")

    parts.append("=== RECENT TRANSACTIONS ===")
    recent = sorted(transactions, key=lambda t: t.date, reverse=True)[:CONTEXT_TRANSACTION_LIMIT]
    for transaction in recent:
        sign = "-" if transaction.amount > 0 else "+"
        parts.append(
            f"{transaction.date.isoformat()}: {transaction.name} "
            f"{sign}${abs(transaction.amount):.2f} ({format_category(transaction.category)})"
        )
    return "\n".join(parts)
