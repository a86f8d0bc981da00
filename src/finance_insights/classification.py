from collections.abc import Iterable, Sequence

from finance_insights.classifiers.base import Classifier
from finance_insights.classifiers.context import ClassificationContext
from finance_insights.classifiers.credit_card import CreditCardPaymentMatcher
from finance_insights.classifiers.rules import CategoryRule, InboundRule, PendingRule
from finance_insights.classifiers.transfers import InternalTransferMatcher
from finance_insights.logger import get_logger
from finance_insights.models import (
    NON_CASH_FLOW_CLASSIFICATIONS,
    Account,
    ClassificationResult,
    ClassificationTotal,
    ClassifiedTransaction,
    Transaction,
    TransactionClassification,
)
from finance_insights.taxonomy import DEFAULT_TAXONOMY, Taxonomy

logger = get_logger(__name__)


class TransactionClassifier:
    """
    Runs the classification rules in priority order; the first rule that
    returns a result decides the label.
    """

    def __init__(self, taxonomy: Taxonomy | None = None, classifiers: list[Classifier] | None = None):
        self.taxonomy = taxonomy or DEFAULT_TAXONOMY
        if classifiers is None:
            classifiers = [
                # 1. Pending never counts
                PendingRule(),
                # 2. Both legs of a matched transfer, including the inbound one
                InternalTransferMatcher(),
                # 3. Money arriving
                InboundRule(),
                # 4. Paying off a card from checking
                CreditCardPaymentMatcher(),
                # 5. Raw category (always matches)
                CategoryRule(),
            ]
        self.classifiers: list[Classifier] = classifiers

    def build_context(
        self, transactions: Sequence[Transaction], accounts: Sequence[Account]
    ) -> ClassificationContext:
        return ClassificationContext.build(transactions, accounts, self.taxonomy)

    def evaluate(
        self, transaction: Transaction, context: ClassificationContext
    ) -> ClassificationResult:
        for classifier in self.classifiers:
            result = classifier.classify(transaction, context)
            if result:
                logger.debug(
                    f"{classifier.name} labelled {transaction.id} "
                    f"('{transaction.name[:50]}') as {result.classification.value}"
                )
                return result

        logger.debug(f"No rule matched {transaction.id}; defaulting to discretionary")
        return ClassificationResult(
            classification=TransactionClassification.EXPENSE_DISCRETIONARY,
            source="default",
        )

    def classify(
        self,
        transaction: Transaction,
        all_transactions: Sequence[Transaction],
        accounts: Sequence[Account],
    ) -> TransactionClassification:
        context = self.build_context(all_transactions, accounts)
        return self.evaluate(transaction, context).classification

    def classify_all(
        self, transactions: Sequence[Transaction], accounts: Sequence[Account]
    ) -> list[ClassifiedTransaction]:
        context = self.build_context(transactions, accounts)
        classified = [
            ClassifiedTransaction.model_validate({
                **transaction.model_dump(),
                "classification": self.evaluate(transaction, context).classification,
            })
            for transaction in transactions
        ]
        logger.debug("Classified %d transaction(s) across %d account(s)", len(classified), len(accounts))
        return classified


def classify_transaction(
    transaction: Transaction,
    all_transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    taxonomy: Taxonomy | None = None,
) -> TransactionClassification:
    return TransactionClassifier(taxonomy).classify(transaction, all_transactions, accounts)


def classify_all_transactions(
    transactions: Sequence[Transaction],
    accounts: Sequence[Account],
    taxonomy: Taxonomy | None = None,
) -> list[ClassifiedTransaction]:
    return TransactionClassifier(taxonomy).classify_all(transactions, accounts)


def get_classification_summary(
    classified: Iterable[ClassifiedTransaction],
) -> dict[TransactionClassification, ClassificationTotal]:
    summary = {label: ClassificationTotal() for label in TransactionClassification}
    for transaction in classified:
        entry = summary[transaction.classification]
        entry.count += 1
        entry.total += abs(transaction.amount)
    return summary


def get_cash_flow_transactions(
    classified: Iterable[ClassifiedTransaction],
) -> list[ClassifiedTransaction]:
    """Drop transfers, card payments and excluded transactions."""
    return [
        transaction
        for transaction in classified
        if transaction.classification not in NON_CASH_FLOW_CLASSIFICATIONS
    ]
