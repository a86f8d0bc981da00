from abc import ABC, abstractmethod

from finance_insights.classifiers.context import ClassificationContext
from finance_insights.models import ClassificationResult, Transaction


class Classifier(ABC):
    name: str = "classifier"

    @abstractmethod
    def classify(
        self, transaction: Transaction, context: ClassificationContext
    ) -> ClassificationResult | None:
        """Label the transaction, or return None to defer to the next rule."""
        pass
