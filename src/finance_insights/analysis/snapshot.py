from collections import defaultdict
from collections.abc import Sequence
from datetime import date

from finance_insights.analysis.recurring import detect_recurring_charges
from finance_insights.domain.formatting import capitalize_words, format_category
from finance_insights.logger import get_logger
from finance_insights.models import (
    CategoryBreakdown,
    DateRange,
    FinancialSnapshot,
    TopMerchant,
    Transaction,
)
from finance_insights.taxonomy import DEFAULT_TAXONOMY, Taxonomy

logger = get_logger(__name__)

TOP_MERCHANT_LIMIT = 10


def empty_snapshot(today: date | None = None) -> FinancialSnapshot:
    day = (today or date.today()).isoformat()
    return FinancialSnapshot(date_range=DateRange(start=day, end=day, days=0))


def _spending(transactions: Sequence[Transaction]) -> list[Transaction]:
    return [t for t in transactions if t.amount > 0 and not t.pending]


def _category_breakdown(spending: list[Transaction], total: float) -> list[CategoryBreakdown]:
    totals: dict[str, list[float]] = defaultdict(lambda: [0.0, 0])
    for transaction in spending:
        entry = totals[transaction.category]
        entry[0] += transaction.amount
        entry[1] += 1

    breakdown = [
        CategoryBreakdown(
            category=format_category(category),
            amount=amount,
            percentage=amount / total * 100,
            transaction_count=int(count),
        )
        for category, (amount, count) in totals.items()
    ]
    breakdown.sort(key=lambda item: item.amount, reverse=True)
    return breakdown


def _top_merchants(spending: list[Transaction]) -> list[TopMerchant]:
    totals: dict[str, list[float]] = defaultdict(lambda: [0.0, 0])
    for transaction in spending:
        entry = totals[transaction.name.lower()]
        entry[0] += transaction.amount
        entry[1] += 1

    merchants = [
        TopMerchant(name=capitalize_words(name), total_spent=amount, transaction_count=int(count))
        for name, (amount, count) in totals.items()
    ]
    merchants.sort(key=lambda item: item.total_spent, reverse=True)
    return merchants[:TOP_MERCHANT_LIMIT]


def analyze_transactions(
    transactions: Sequence[Transaction],
    taxonomy: Taxonomy | None = None,
) -> FinancialSnapshot:
    """
    Summarise outbound, settled spending over the window covered by the
    transactions.

    Works on raw categories only; it does not run the classifier, and its
    essential set is ``Taxonomy.snapshot_essential_categories``.
    """
    taxonomy = taxonomy or DEFAULT_TAXONOMY
    spending = _spending(transactions)
    if not spending:
        logger.debug("No settled spending among %d transaction(s); empty snapshot", len(transactions))
        return empty_snapshot()

    start = min(t.date for t in spending)
    end = max(t.date for t in spending)
    days = max(1, (end - start).days)

    total_spending = sum(t.amount for t in spending)
    average_daily_spend = total_spending / days

    essential_spending = sum(
        t.amount for t in spending if t.category in taxonomy.snapshot_essential_categories
    )
    subscription_load = sum(
        t.amount for t in spending if t.category in taxonomy.subscription_categories
    )
    # Float summation order can push the ratio a hair outside [0, 100]
    discretionary_ratio = min(100.0, max(0.0, (total_spending - essential_spending) / total_spending * 100))

    snapshot = FinancialSnapshot(
        total_spending=total_spending,
        average_daily_spend=average_daily_spend,
        weekly_velocity=average_daily_spend * 7,
        category_breakdown=_category_breakdown(spending, total_spending),
        top_merchants=_top_merchants(spending),
        recurring_charges=detect_recurring_charges(spending),
        discretionary_ratio=discretionary_ratio,
        subscription_load=subscription_load,
        date_range=DateRange(start=start.isoformat(), end=end.isoformat(), days=days),
    )
    logger.debug(
        "Snapshot over %d day(s): %d spending transaction(s), %d recurring charge(s)",
        days,
        len(spending),
        len(snapshot.recurring_charges),
    )
    return snapshot
