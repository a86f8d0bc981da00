from finance_insights.classifiers.base import Classifier
from finance_insights.classifiers.context import (
    TRANSFER_MATCH_WINDOW_DAYS,
    ClassificationContext,
    is_transfer_coded,
)
from finance_insights.logger import get_logger
from finance_insights.models import (
    ClassificationResult,
    Transaction,
    TransactionClassification,
)

logger = get_logger(__name__)

TRANSFER_AMOUNT_TOLERANCE = 1.0


def _amounts_match(first: float, second: float) -> bool:
    return abs(abs(first) - abs(second)) < TRANSFER_AMOUNT_TOLERANCE


def _opposite_signs(first: float, second: float) -> bool:
    return (first > 0) != (second > 0)


class InternalTransferMatcher(Classifier):
    """
    Money moved between two of the user's own accounts.

    A transfer-coded transaction qualifies when a transfer-coded counterpart
    exists on another account (opposite sign, near-equal amount, within a few
    days), or when its payee/payer names one of the user's accounts. Matching
    is greedy and per transaction, so both legs of a pair get the label.
    """
    name = "internal_transfer"

    def __init__(self, window_days: int = TRANSFER_MATCH_WINDOW_DAYS):
        self.window_days = window_days

    def classify(
        self, transaction: Transaction, context: ClassificationContext
    ) -> ClassificationResult | None:
        if not is_transfer_coded(transaction, context.taxonomy):
            return None

        counterpart = self.find_counterpart(transaction, context)
        if counterpart is not None:
            logger.debug(
                "Transfer %s matched counterpart %s on account %s",
                transaction.id,
                counterpart.id,
                counterpart.account_id,
            )
            return self._result()

        if self.references_own_account(transaction, context):
            logger.debug("Transfer %s references one of the user's accounts", transaction.id)
            return self._result()

        return None

    def find_counterpart(
        self, transaction: Transaction, context: ClassificationContext
    ) -> Transaction | None:
        for other in context.transfer_candidates(transaction, self.window_days):
            if other.id == transaction.id:
                continue
            if other.account_id == transaction.account_id:
                continue
            if not _amounts_match(other.amount, transaction.amount):
                continue
            if not _opposite_signs(other.amount, transaction.amount):
                continue
            return other
        return None

    def references_own_account(
        self, transaction: Transaction, context: ClassificationContext
    ) -> bool:
        meta = transaction.payment_meta
        if meta is None:
            return False

        payee = (meta.payee or "").lower()
        payer = (meta.payer or "").lower()
        if not payee and not payer:
            return False

        for account in context.accounts:
            for needle in (account.name.lower(), (account.institution or "").lower()):
                if needle and (needle in payee or needle in payer):
                    return True
        return False

    def _result(self) -> ClassificationResult:
        return ClassificationResult(
            classification=TransactionClassification.INTERNAL_TRANSFER,
            source=self.name,
        )
