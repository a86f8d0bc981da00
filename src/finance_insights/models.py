import datetime as dt
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Schema(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenSchema(Schema):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TransactionClassification(str, Enum):
    INCOME = "income"
    EXPENSE_ESSENTIAL = "expense_essential"
    EXPENSE_DISCRETIONARY = "expense_discretionary"
    INTERNAL_TRANSFER = "internal_transfer"
    CREDIT_CARD_PAYMENT = "credit_card_payment"
    EXCLUDED = "excluded"


NON_CASH_FLOW_CLASSIFICATIONS = frozenset({
    TransactionClassification.INTERNAL_TRANSFER,
    TransactionClassification.CREDIT_CARD_PAYMENT,
    TransactionClassification.EXCLUDED,
})

EXPENSE_CLASSIFICATIONS = frozenset({
    TransactionClassification.EXPENSE_ESSENTIAL,
    TransactionClassification.EXPENSE_DISCRETIONARY,
})


class PaymentMeta(FrozenSchema):
    payee: str | None = None
    payer: str | None = None
    payment_method: str | None = None


class Transaction(FrozenSchema):
    """
    A bank transaction as delivered by the data provider.

    ``amount`` is positive when money leaves the user and negative when it
    arrives.
    """
    id: str
    date: dt.date
    name: str
    amount: float
    category: str
    pending: bool = False
    account_id: str
    transaction_code: str | None = None
    payment_channel: str | None = None
    payment_meta: PaymentMeta | None = None

    @property
    def month_key(self) -> str:
        return self.date.strftime("%Y-%m")


class Account(FrozenSchema):
    id: str
    name: str
    type: str
    subtype: str | None = None
    balance: float | None = None
    institution: str | None = None
    item_id: str | None = None


class ClassifiedTransaction(Transaction):
    classification: TransactionClassification


class ClassificationResult(FrozenSchema):
    classification: TransactionClassification
    source: str


class ClassificationTotal(Schema):
    count: int = 0
    total: float = 0.0


# Snapshot

class DateRange(Schema):
    start: str
    end: str
    days: int


class MonthRange(Schema):
    start: str
    end: str


class CategoryBreakdown(Schema):
    category: str
    amount: float
    percentage: float
    transaction_count: int


class TopMerchant(Schema):
    name: str
    total_spent: float
    transaction_count: int


RecurringFrequency = Literal["weekly", "bi-weekly", "monthly", "yearly"]


class RecurringCharge(Schema):
    merchant: str
    amount: float
    frequency: RecurringFrequency
    annual_impact: float


class FinancialSnapshot(Schema):
    total_spending: float = 0.0
    average_daily_spend: float = 0.0
    weekly_velocity: float = 0.0
    category_breakdown: list[CategoryBreakdown] = Field(default_factory=list)
    top_merchants: list[TopMerchant] = Field(default_factory=list)
    recurring_charges: list[RecurringCharge] = Field(default_factory=list)
    discretionary_ratio: float = 0.0
    subscription_load: float = 0.0
    date_range: DateRange


# Metrics

class FinancialMetrics(Schema):
    total_income: float
    total_expenses: float
    net_cash_flow: float
    savings_rate: float
    avg_monthly_income: float
    avg_monthly_expenses: float
    period_months: int
    date_range: MonthRange


class MonthlyCashFlow(Schema):
    month: str
    income: float
    expenses: float
    net_cash_flow: float


TrendDirection = Literal["improving", "stable", "declining"]


class MomChange(Schema):
    amount: float = 0.0
    percentage_change: float = 0.0


class TrendMetrics(Schema):
    trend_direction: TrendDirection
    mom_change: MomChange
    three_month_moving_average: float
    monthly_data: list[MonthlyCashFlow]


class CategoryBreakdownItem(Schema):
    rank: int
    category: str
    total_spend: float
    monthly_average: float
    percent_of_expenses: float
    percent_of_income: float
    mom_change: MomChange


class CategoryBreakdownResult(Schema):
    top_categories: list[CategoryBreakdownItem]
    all_categories: list[CategoryBreakdownItem]
    total_expenses: float
    total_income: float
    period_months: int


# Balance sheet

class BalanceSheetAccount(Schema):
    id: str
    name: str
    type: str
    subtype: str | None = None
    balance: float
    institution: str | None = None


class BalanceSheetAccountGroup(Schema):
    group_name: str
    accounts: list[BalanceSheetAccount]
    total_balance: float


class Assets(Schema):
    liquid_assets: BalanceSheetAccountGroup
    total_assets: float


class Liabilities(Schema):
    credit_card_debt: BalanceSheetAccountGroup
    total_liabilities: float


class BalanceSheet(Schema):
    assets: Assets
    liabilities: Liabilities
    net_worth: float
    as_of_date: dt.datetime


# Statement

class IncomeBreakdown(Schema):
    salary: float = 0.0
    investment: float = 0.0
    other: float = 0.0
    total: float = 0.0


class EssentialExpenses(Schema):
    housing: float = 0.0
    utilities: float = 0.0
    transportation: float = 0.0
    groceries: float = 0.0
    insurance: float = 0.0
    medical: float = 0.0
    debt_service: float = 0.0
    total: float = 0.0


class DiscretionaryExpenses(Schema):
    dining_out: float = 0.0
    entertainment: float = 0.0
    shopping: float = 0.0
    travel: float = 0.0
    subscriptions: float = 0.0
    other: float = 0.0
    total: float = 0.0


class Expenses(Schema):
    essential: EssentialExpenses = Field(default_factory=EssentialExpenses)
    discretionary: DiscretionaryExpenses = Field(default_factory=DiscretionaryExpenses)
    total: float = 0.0


class Transfers(Schema):
    internal: float = 0.0
    credit_card_payments: float = 0.0


class MonthlyFinancials(Schema):
    month: str
    income: IncomeBreakdown = Field(default_factory=IncomeBreakdown)
    expenses: Expenses = Field(default_factory=Expenses)
    transfers: Transfers = Field(default_factory=Transfers)
    net_cash_flow: float = 0.0
    savings_rate: float = 0.0


class StatementSummary(Schema):
    average_monthly_income: float
    average_monthly_expenses: float
    average_savings_rate: float
    total_net_savings: float


class DetailedCategory(Schema):
    category: str
    monthly_totals: dict[str, float]
    total: float
    average: float


class FinancialStatement(Schema):
    months: list[MonthlyFinancials]
    date_range: MonthRange
    summary: StatementSummary
    detailed_categories: list[DetailedCategory]


# Insights

InsightType = Literal["positive", "neutral", "attention"]


class InsightItem(Schema):
    type: InsightType
    text: str


class FinanceReport(Schema):
    core_metrics: FinancialMetrics
    trend_metrics: TrendMetrics
    category_breakdown: CategoryBreakdownResult
    balance_sheet: BalanceSheet
    insights: list[InsightItem]
