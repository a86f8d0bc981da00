from collections import defaultdict
from collections.abc import Sequence
from datetime import date

from finance_insights.classification import TransactionClassifier
from finance_insights.logger import get_logger
from finance_insights.models import (
    Account,
    ClassifiedTransaction,
    DetailedCategory,
    DiscretionaryExpenses,
    EssentialExpenses,
    FinancialStatement,
    MonthlyFinancials,
    MonthRange,
    StatementSummary,
    Transaction,
    TransactionClassification,
)
from finance_insights.statement.periods import generate_month_range, month_key, parse_month_key
from finance_insights.taxonomy import DEFAULT_TAXONOMY, Taxonomy

logger = get_logger(__name__)

ESSENTIAL_FIELDS = frozenset(EssentialExpenses.model_fields) - {"total"}
DISCRETIONARY_FIELDS = frozenset(DiscretionaryExpenses.model_fields) - {"total"}


def _resolve_bound(requested: str | None, fallback: str, label: str) -> str:
    if requested is None:
        return fallback
    if parse_month_key(requested) is None:
        logger.warning("Ignoring malformed %s month '%s'; using %s", label, requested, fallback)
        return fallback
    return requested


def _resolve_range(
    transactions: Sequence[Transaction],
    start_month: str | None,
    end_month: str | None,
) -> tuple[str, str]:
    months = sorted({t.month_key for t in transactions})
    current = month_key(date.today())
    default_start = months[0] if months else current
    default_end = months[-1] if months else current
    return (
        _resolve_bound(start_month, default_start, "start"),
        _resolve_bound(end_month, default_end, "end"),
    )


def _add_income(month: MonthlyFinancials, transaction: ClassifiedTransaction, taxonomy: Taxonomy) -> None:
    amount = abs(transaction.amount)
    name = transaction.name.lower()
    if transaction.category == taxonomy.salary_category:
        month.income.salary += amount
    elif any(keyword in name for keyword in taxonomy.investment_income_keywords):
        month.income.investment += amount
    else:
        month.income.other += amount
    month.income.total += amount


def _subcategory(transaction: ClassifiedTransaction, taxonomy: Taxonomy) -> str:
    mapping = taxonomy.statement_mapping(transaction.category)
    return mapping.subcategory if mapping else "other"


def _add_essential(month: MonthlyFinancials, transaction: ClassifiedTransaction, taxonomy: Taxonomy) -> None:
    essential = month.expenses.essential
    subcategory = _subcategory(transaction, taxonomy)
    # Essential has no "other" line; such spend only shows in the total
    if subcategory in ESSENTIAL_FIELDS:
        setattr(essential, subcategory, getattr(essential, subcategory) + transaction.amount)
    essential.total += transaction.amount
    month.expenses.total += transaction.amount


def _add_discretionary(month: MonthlyFinancials, transaction: ClassifiedTransaction, taxonomy: Taxonomy) -> None:
    discretionary = month.expenses.discretionary
    subcategory = _subcategory(transaction, taxonomy)
    if subcategory not in DISCRETIONARY_FIELDS:
        subcategory = "other"
    setattr(discretionary, subcategory, getattr(discretionary, subcategory) + transaction.amount)
    discretionary.total += transaction.amount
    month.expenses.total += transaction.amount


def _detailed_categories(
    totals: dict[str, dict[str, float]], month_count: int
) -> list[DetailedCategory]:
    detailed = []
    for category, monthly_totals in totals.items():
        total = sum(monthly_totals.values())
        detailed.append(DetailedCategory(
            category=category,
            monthly_totals=dict(monthly_totals),
            total=total,
            average=total / month_count,
        ))
    detailed.sort(key=lambda item: item.total, reverse=True)
    return detailed


def build_financial_statement(
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    start_month: str | None = None,
    end_month: str | None = None,
    taxonomy: Taxonomy | None = None,
) -> FinancialStatement:
    """
    Build a month-by-month statement between ``start_month`` and
    ``end_month`` (``YYYY-MM``, inclusive).

    Every month in the range is present even when nothing happened in it.
    Bounds default to the first and last transaction months. Transactions
    outside the range are ignored.
    """
    taxonomy = taxonomy or DEFAULT_TAXONOMY
    classified = TransactionClassifier(taxonomy).classify_all(transactions, accounts)

    start, end = _resolve_range(transactions, start_month, end_month)
    monthly = {key: MonthlyFinancials(month=key) for key in generate_month_range(start, end)}
    category_totals: dict[str, dict[str, float]] = defaultdict(lambda: defaultdict(float))
    skipped = 0

    for transaction in classified:
        month = monthly.get(transaction.month_key)
        if month is None:
            skipped += 1
            continue

        classification = transaction.classification
        if classification == TransactionClassification.EXCLUDED:
            continue

        category_totals[transaction.category][month.month] += abs(transaction.amount)

        if classification == TransactionClassification.INCOME:
            _add_income(month, transaction, taxonomy)
        elif classification == TransactionClassification.EXPENSE_ESSENTIAL:
            _add_essential(month, transaction, taxonomy)
        elif classification == TransactionClassification.EXPENSE_DISCRETIONARY:
            _add_discretionary(month, transaction, taxonomy)
        elif classification == TransactionClassification.INTERNAL_TRANSFER:
            month.transfers.internal += abs(transaction.amount)
        elif classification == TransactionClassification.CREDIT_CARD_PAYMENT:
            month.transfers.credit_card_payments += abs(transaction.amount)

    for month in monthly.values():
        month.net_cash_flow = month.income.total - month.expenses.total
        month.savings_rate = (
            month.net_cash_flow / month.income.total * 100 if month.income.total > 0 else 0.0
        )

    months = [monthly[key] for key in sorted(monthly)]
    month_count = max(1, len(months))
    total_income = sum((m.income.total for m in months), 0.0)
    total_expenses = sum((m.expenses.total for m in months), 0.0)
    total_net_savings = sum((m.net_cash_flow for m in months), 0.0)

    if skipped:
        logger.debug("Skipped %d transaction(s) outside %s..%s", skipped, start, end)
    logger.debug("Built statement for %d month(s), %d categories", len(months), len(category_totals))

    return FinancialStatement(
        months=months,
        date_range=MonthRange(start=start, end=end),
        summary=StatementSummary(
            average_monthly_income=total_income / month_count,
            average_monthly_expenses=total_expenses / month_count,
            average_savings_rate=total_net_savings / total_income * 100 if total_income > 0 else 0.0,
            total_net_savings=total_net_savings,
        ),
        detailed_categories=_detailed_categories(category_totals, month_count),
    )
