from collections.abc import Sequence
from datetime import datetime

from finance_insights.analysis.balance_sheet import calculate_balance_sheet
from finance_insights.analysis.metrics import (
    calculate_category_breakdown,
    calculate_core_metrics,
    calculate_trend_metrics,
)
from finance_insights.analysis.snapshot import analyze_transactions
from finance_insights.classification import TransactionClassifier, get_classification_summary
from finance_insights.insights import generate_insights
from finance_insights.logger import get_logger
from finance_insights.models import (
    Account,
    BalanceSheet,
    CategoryBreakdownResult,
    ClassificationTotal,
    ClassifiedTransaction,
    FinanceReport,
    FinancialMetrics,
    FinancialSnapshot,
    FinancialStatement,
    InsightItem,
    Transaction,
    TransactionClassification,
    TrendMetrics,
)
from finance_insights.statement.builder import build_financial_statement
from finance_insights.statement.periods import calculate_date_range
from finance_insights.taxonomy import DEFAULT_TAXONOMY, Taxonomy

logger = get_logger(__name__)


class FinanceEngine:
    """
    Stateless entry point over the classifier and the analyses, bound to one
    taxonomy. Safe to share between threads.
    """

    def __init__(self, taxonomy: Taxonomy | None = None):
        self.taxonomy = taxonomy or DEFAULT_TAXONOMY
        self.classifier = TransactionClassifier(self.taxonomy)

    def classify(
        self,
        transaction: Transaction,
        all_transactions: Sequence[Transaction],
        accounts: Sequence[Account],
    ) -> TransactionClassification:
        return self.classifier.classify(transaction, all_transactions, accounts)

    def classify_all(
        self, transactions: Sequence[Transaction], accounts: Sequence[Account]
    ) -> list[ClassifiedTransaction]:
        return self.classifier.classify_all(transactions, accounts)

    def summary(
        self, classified: Sequence[ClassifiedTransaction]
    ) -> dict[TransactionClassification, ClassificationTotal]:
        return get_classification_summary(classified)

    def analyze(self, transactions: Sequence[Transaction]) -> FinancialSnapshot:
        return analyze_transactions(transactions, self.taxonomy)

    def core_metrics(
        self, transactions: Sequence[Transaction], accounts: Sequence[Account]
    ) -> FinancialMetrics:
        return calculate_core_metrics(transactions, accounts, self.taxonomy)

    def trend_metrics(
        self, transactions: Sequence[Transaction], accounts: Sequence[Account]
    ) -> TrendMetrics:
        return calculate_trend_metrics(transactions, accounts, self.taxonomy)

    def category_breakdown(
        self, transactions: Sequence[Transaction], accounts: Sequence[Account]
    ) -> CategoryBreakdownResult:
        return calculate_category_breakdown(transactions, accounts, self.taxonomy)

    def balance_sheet(
        self, accounts: Sequence[Account], as_of: datetime | None = None
    ) -> BalanceSheet:
        return calculate_balance_sheet(accounts, as_of)

    def build_statement(
        self,
        transactions: Sequence[Transaction],
        accounts: Sequence[Account],
        start_month: str | None = None,
        end_month: str | None = None,
        preset_months: int | None = None,
    ) -> FinancialStatement:
        """
        Explicit months win; otherwise ``preset_months`` (0 for all time)
        picks a range ending this month.
        """
        if preset_months is not None and start_month is None and end_month is None:
            date_range = calculate_date_range(preset_months, transactions)
            start_month, end_month = date_range.start, date_range.end
        return build_financial_statement(
            transactions, accounts, start_month, end_month, self.taxonomy
        )

    def insights(
        self, transactions: Sequence[Transaction], accounts: Sequence[Account]
    ) -> list[InsightItem]:
        return self.report(transactions, accounts).insights

    def report(
        self, transactions: Sequence[Transaction], accounts: Sequence[Account]
    ) -> FinanceReport:
        core = self.core_metrics(transactions, accounts)
        trends = self.trend_metrics(transactions, accounts)
        breakdown = self.category_breakdown(transactions, accounts)
        balance_sheet = self.balance_sheet(accounts)
        logger.debug(
            f"Report over {core.period_months} month(s): "
            f"savings rate {core.savings_rate:.1f}%, trend {trends.trend_direction}"
        )
        return FinanceReport(
            core_metrics=core,
            trend_metrics=trends,
            category_breakdown=breakdown,
            balance_sheet=balance_sheet,
            insights=generate_insights(core, trends, breakdown, balance_sheet),
        )
