import pytest

from finance_insights.classification import classify_transaction
from finance_insights.models import TransactionClassification
from helpers import checking, credit_card, make_tx

C = TransactionClassification


@pytest.fixture
def accounts():
    return [checking(), credit_card(institution="Barclays")]


def test_payment_to_known_issuer_from_checking(accounts):
    tx = make_tx("1", "2025-01-15", "Payment to Chase card", 800.0, "LOAN_PAYMENTS")
    assert classify_transaction(tx, [tx], accounts) == C.CREDIT_CARD_PAYMENT


def test_bill_payment_code_with_card_name_in_payee(accounts):
    tx = make_tx("1", "2025-01-15", "ONLINE XFER", 420.0, "LOAN_PAYMENTS",
                 payee="Sapphire Card", transaction_code="bill_payment")
    assert classify_transaction(tx, [tx], accounts) == C.CREDIT_CARD_PAYMENT


def test_card_institution_matches(accounts):
    tx = make_tx("1", "2025-01-15", "Autopay BARCLAYS", 120.0, "LOAN_PAYMENTS")
    assert classify_transaction(tx, [tx], accounts) == C.CREDIT_CARD_PAYMENT


def test_card_side_of_payment_is_not_a_card_payment(accounts):
    # Money arriving on the card is inbound first
    tx = make_tx("1", "2025-01-15", "Payment thank you - Chase", -800.0,
                 "LOAN_PAYMENTS", account_id="cc")
    assert classify_transaction(tx, [tx], accounts) == C.INCOME


def test_positive_amount_on_credit_account_is_not_a_card_payment(accounts):
    tx = make_tx("1", "2025-01-15", "Chase payment", 50.0, "LOAN_PAYMENTS", account_id="cc")
    assert classify_transaction(tx, [tx], accounts) == C.EXPENSE_ESSENTIAL


def test_payment_without_card_reference_is_not_a_card_payment(accounts):
    tx = make_tx("1", "2025-01-15", "Rent payment", 1800.0, "RENT_AND_UTILITIES")
    assert classify_transaction(tx, [tx], accounts) == C.EXPENSE_ESSENTIAL


def test_card_reference_without_payment_wording_is_not_a_card_payment(accounts):
    tx = make_tx("1", "2025-01-15", "Chase ATM fee", 3.0, "BANK_FEES")
    assert classify_transaction(tx, [tx], accounts) == C.EXPENSE_ESSENTIAL


def test_unknown_source_account_is_not_a_card_payment(accounts):
    tx = make_tx("1", "2025-01-15", "Payment to Chase", 800.0, "LOAN_PAYMENTS", account_id="ghost")
    assert classify_transaction(tx, [tx], accounts) == C.EXPENSE_ESSENTIAL


def test_account_without_institution_does_not_match_everything():
    accounts = [checking(), credit_card(name="Rewards", institution=None)]
    tx = make_tx("1", "2025-01-15", "Gym membership payment", 40.0, "PERSONAL_CARE")
    assert classify_transaction(tx, [tx], accounts) == C.EXPENSE_DISCRETIONARY
