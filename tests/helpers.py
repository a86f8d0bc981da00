from datetime import date

from finance_insights.models import Account, PaymentMeta, Transaction


def make_tx(
    tx_id: str,
    day: str | date,
    name: str,
    amount: float,
    category: str = "GENERAL_MERCHANDISE",
    account_id: str = "chk",
    payee: str | None = None,
    payer: str | None = None,
    **extra,
) -> Transaction:
    meta = None
    if payee is not None or payer is not None:
        meta = PaymentMeta(payee=payee, payer=payer)
    return Transaction(
        id=tx_id,
        date=day,
        name=name,
        amount=amount,
        category=category,
        account_id=account_id,
        payment_meta=meta,
        **extra,
    )


def checking(account_id: str = "chk", **extra) -> Account:
    values = {"name": "Everyday Checking", "type": "depository", "subtype": "checking", "balance": 5000.0}
    values.update(extra)
    return Account(id=account_id, **values)


def savings(account_id: str = "sav", **extra) -> Account:
    values = {"name": "High Yield Savings", "type": "depository", "subtype": "savings", "balance": 12000.0}
    values.update(extra)
    return Account(id=account_id, **values)


def credit_card(account_id: str = "cc", **extra) -> Account:
    values = {"name": "Sapphire Card", "type": "credit", "subtype": "credit card", "balance": 800.0}
    values.update(extra)
    return Account(id=account_id, **values)
