from collections.abc import Sequence
from datetime import datetime, timezone

from finance_insights.models import (
    Account,
    Assets,
    BalanceSheet,
    BalanceSheetAccount,
    BalanceSheetAccountGroup,
    Liabilities,
)


def _to_balance_sheet_account(account: Account) -> BalanceSheetAccount:
    return BalanceSheetAccount(
        id=account.id,
        name=account.name,
        type=account.type,
        subtype=account.subtype,
        balance=account.balance if account.balance is not None else 0.0,
        institution=account.institution,
    )


def calculate_balance_sheet(
    accounts: Sequence[Account], as_of: datetime | None = None
) -> BalanceSheet:
    """
    Point-in-time assets and liabilities from current account balances.

    Depository accounts are liquid assets and credit accounts are card debt
    (providers report what is owed as a positive balance). Other account
    types are left out. Missing balances count as zero.
    """
    depository: list[BalanceSheetAccount] = []
    credit: list[BalanceSheetAccount] = []
    for account in accounts:
        if account.type == "depository":
            depository.append(_to_balance_sheet_account(account))
        elif account.type == "credit":
            credit.append(_to_balance_sheet_account(account))

    total_assets = sum((account.balance for account in depository), 0.0)
    total_liabilities = sum((account.balance for account in credit), 0.0)

    return BalanceSheet(
        assets=Assets(
            liquid_assets=BalanceSheetAccountGroup(
                group_name="Liquid Assets",
                accounts=depository,
                total_balance=total_assets,
            ),
            total_assets=total_assets,
        ),
        liabilities=Liabilities(
            credit_card_debt=BalanceSheetAccountGroup(
                group_name="Credit Card Debt",
                accounts=credit,
                total_balance=total_liabilities,
            ),
            total_liabilities=total_liabilities,
        ),
        net_worth=total_assets - total_liabilities,
        as_of_date=as_of or datetime.now(timezone.utc),
    )
