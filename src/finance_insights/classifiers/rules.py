from finance_insights.classifiers.base import Classifier
from finance_insights.classifiers.context import ClassificationContext
from finance_insights.models import (
    ClassificationResult,
    Transaction,
    TransactionClassification,
)


class PendingRule(Classifier):
    name = "pending"

    def classify(
        self, transaction: Transaction, context: ClassificationContext
    ) -> ClassificationResult | None:
        if transaction.pending:
            return ClassificationResult(
                classification=TransactionClassification.EXCLUDED,
                source=self.name,
            )
        return None


class InboundRule(Classifier):
    """Negative amounts are money arriving in the account."""
    name = "inbound"

    def classify(
        self, transaction: Transaction, context: ClassificationContext
    ) -> ClassificationResult | None:
        if transaction.amount < 0:
            return ClassificationResult(
                classification=TransactionClassification.INCOME,
                source=self.name,
            )
        return None


class CategoryRule(Classifier):
    """
    Falls back on the raw category. Always returns a label: anything outside
    the income and essential sets is discretionary.
    """
    name = "category"

    def classify(
        self, transaction: Transaction, context: ClassificationContext
    ) -> ClassificationResult | None:
        taxonomy = context.taxonomy
        if transaction.category in taxonomy.income_categories:
            classification = TransactionClassification.INCOME
        elif transaction.category in taxonomy.essential_categories:
            classification = TransactionClassification.EXPENSE_ESSENTIAL
        else:
            classification = TransactionClassification.EXPENSE_DISCRETIONARY
        return ClassificationResult(classification=classification, source=self.name)
