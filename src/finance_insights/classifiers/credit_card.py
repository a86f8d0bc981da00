from finance_insights.classifiers.base import Classifier
from finance_insights.classifiers.context import ClassificationContext
from finance_insights.models import (
    ClassificationResult,
    Transaction,
    TransactionClassification,
)


class CreditCardPaymentMatcher(Classifier):
    """
    The checking-account leg of paying off a credit card.

    Requires a depository source account, a payment-looking transaction
    (``bill_payment`` code or a payment keyword in the name), and a reference
    to one of the user's cards or a known card issuer in the name or payee.
    """
    name = "credit_card_payment"

    def classify(
        self, transaction: Transaction, context: ClassificationContext
    ) -> ClassificationResult | None:
        account = context.account_for(transaction)
        if account is None or account.type != "depository":
            return None

        name = transaction.name.lower()
        if not self._looks_like_payment(transaction, name, context):
            return None

        payee = ""
        if transaction.payment_meta and transaction.payment_meta.payee:
            payee = transaction.payment_meta.payee.lower()

        if self._references_card(name, payee, context):
            return ClassificationResult(
                classification=TransactionClassification.CREDIT_CARD_PAYMENT,
                source=self.name,
            )
        return None

    def _looks_like_payment(
        self, transaction: Transaction, name: str, context: ClassificationContext
    ) -> bool:
        if transaction.transaction_code == "bill_payment":
            return True
        return any(keyword in name for keyword in context.taxonomy.cc_payment_keywords)

    def _references_card(self, name: str, payee: str, context: ClassificationContext) -> bool:
        haystacks = [text for text in (name, payee) if text]

        needles: list[str] = []
        for card in context.credit_accounts():
            needles.append(card.name.lower())
            needles.append((card.institution or "").lower())
        needles.extend(context.taxonomy.card_issuers)

        return any(needle and needle in text for needle in needles for text in haystacks)
