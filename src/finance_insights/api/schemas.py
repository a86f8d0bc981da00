from pydantic import Field

from finance_insights.models import (
    Account,
    ClassificationTotal,
    ClassifiedTransaction,
    Schema,
    Transaction,
    TransactionClassification,
)


class TransactionsRequest(Schema):
    transactions: list[Transaction]


class LedgerRequest(Schema):
    transactions: list[Transaction]
    accounts: list[Account] = Field(default_factory=list)


class StatementRequest(LedgerRequest):
    start_month: str | None = None
    end_month: str | None = None
    preset_months: int | None = Field(default=None, ge=0)


class BalanceSheetRequest(Schema):
    accounts: list[Account]


class ClassifyResponse(Schema):
    transactions: list[ClassifiedTransaction]
    summary: dict[TransactionClassification, ClassificationTotal]
