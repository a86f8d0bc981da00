from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field

from finance_insights.models import Account, Transaction
from finance_insights.taxonomy import DEFAULT_TAXONOMY, Taxonomy

TRANSFER_MATCH_WINDOW_DAYS = 3


def is_transfer_coded(transaction: Transaction, taxonomy: Taxonomy) -> bool:
    return (
        transaction.transaction_code == "transfer"
        or taxonomy.is_transfer_category(transaction.category)
    )


@dataclass(frozen=True)
class ClassificationContext:
    """
    Everything a rule may look at besides the transaction itself.

    Built once per transaction list. Transfer-coded transactions are bucketed
    by day so the transfer matcher only scans a few days around each
    candidate instead of the whole list.
    """
    transactions: Sequence[Transaction]
    accounts: Sequence[Account]
    taxonomy: Taxonomy = DEFAULT_TAXONOMY
    accounts_by_id: dict[str, Account] = field(init=False)
    transfers_by_day: dict[int, list[Transaction]] = field(init=False)

    def __post_init__(self) -> None:
        by_id = {account.id: account for account in self.accounts}
        by_day: dict[int, list[Transaction]] = defaultdict(list)
        for transaction in self.transactions:
            if is_transfer_coded(transaction, self.taxonomy):
                by_day[transaction.date.toordinal()].append(transaction)
        object.__setattr__(self, "accounts_by_id", by_id)
        object.__setattr__(self, "transfers_by_day", dict(by_day))

    @classmethod
    def build(
        cls,
        transactions: Sequence[Transaction],
        accounts: Sequence[Account],
        taxonomy: Taxonomy | None = None,
    ) -> ClassificationContext:
        return cls(
            transactions=tuple(transactions),
            accounts=tuple(accounts),
            taxonomy=taxonomy or DEFAULT_TAXONOMY,
        )

    def account_for(self, transaction: Transaction) -> Account | None:
        return self.accounts_by_id.get(transaction.account_id)

    def credit_accounts(self) -> list[Account]:
        return [account for account in self.accounts if account.type == "credit"]

    def transfer_candidates(
        self, transaction: Transaction, window_days: int = TRANSFER_MATCH_WINDOW_DAYS
    ) -> list[Transaction]:
        day = transaction.date.toordinal()
        candidates: list[Transaction] = []
        for offset in range(-window_days, window_days + 1):
            candidates.extend(self.transfers_by_day.get(day + offset, ()))
        return candidates
