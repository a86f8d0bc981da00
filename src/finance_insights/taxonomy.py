"""
Category taxonomy: lookup tables that map raw provider category codes onto
economic buckets and statement line items.

The tables live on an immutable ``Taxonomy`` object so callers and tests can
inject their own. ``DEFAULT_TAXONOMY`` carries the built-in tables.
"""
import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from finance_insights.logger import get_logger

logger = get_logger(__name__)


StatementBucket = Literal["income", "essential", "discretionary"]


class TaxonomyError(Exception):
    """Raised when a taxonomy file cannot be read or validated."""


class StatementMapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    bucket: StatementBucket
    subcategory: str


class Taxonomy(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Classifier buckets
    essential_categories: frozenset[str]
    income_categories: frozenset[str]
    transfer_categories: frozenset[str]

    # Credit-card payment detection
    cc_payment_keywords: tuple[str, ...]
    card_issuers: tuple[str, ...]

    # Snapshot analyzer; broader than ``essential_categories``
    snapshot_essential_categories: frozenset[str]
    subscription_categories: frozenset[str]

    # Statement builder
    statement_category_map: dict[str, StatementMapping]
    investment_income_keywords: tuple[str, ...]
    salary_category: str = "INCOME"

    def is_transfer_category(self, category: str) -> bool:
        return category in self.transfer_categories

    def statement_mapping(self, category: str) -> StatementMapping | None:
        return self.statement_category_map.get(category)


DEFAULT_TAXONOMY = Taxonomy(
    essential_categories=frozenset({
        "RENT_AND_UTILITIES",
        "HOME_IMPROVEMENT",
        "MEDICAL",
        "GOVERNMENT_AND_NON_PROFIT",
        "LOAN_PAYMENTS",
        "BANK_FEES",
        "INSURANCE",
        "AUTOMOTIVE",
        "GAS_STATIONS",
        "GROCERIES",
    }),
    income_categories=frozenset({"INCOME", "TRANSFER_IN"}),
    transfer_categories=frozenset({"TRANSFER_IN", "TRANSFER_OUT"}),
    cc_payment_keywords=(
        "payment",
        "autopay",
        "credit card",
        "card payment",
        "bill pay",
        "minimum payment",
        "statement balance",
    ),
    card_issuers=(
        "chase",
        "amex",
        "american express",
        "citi",
        "capital one",
        "discover",
        "wells fargo",
        "bank of america",
        "barclays",
        "synchrony",
        "apple card",
        "goldman sachs",
    ),
    snapshot_essential_categories=frozenset({
        "RENT_AND_UTILITIES",
        "HOME_IMPROVEMENT",
        "MEDICAL",
        "GOVERNMENT_AND_NON_PROFIT",
        "LOAN_PAYMENTS",
        "BANK_FEES",
        "INSURANCE",
        "AUTOMOTIVE",
        "GAS_STATIONS",
        "GROCERIES",
        "INCOME",
        "TRANSFER_IN",
        "TRANSFER_OUT",
    }),
    subscription_categories=frozenset({"ENTERTAINMENT", "GENERAL_SERVICES"}),
    statement_category_map={
        "INCOME": StatementMapping(bucket="income", subcategory="salary"),
        "RENT_AND_UTILITIES": StatementMapping(bucket="essential", subcategory="housing"),
        "HOME_IMPROVEMENT": StatementMapping(bucket="essential", subcategory="housing"),
        "MEDICAL": StatementMapping(bucket="essential", subcategory="medical"),
        "INSURANCE": StatementMapping(bucket="essential", subcategory="insurance"),
        "LOAN_PAYMENTS": StatementMapping(bucket="essential", subcategory="debt_service"),
        "BANK_FEES": StatementMapping(bucket="essential", subcategory="debt_service"),
        "GROCERIES": StatementMapping(bucket="essential", subcategory="groceries"),
        "GAS_STATIONS": StatementMapping(bucket="essential", subcategory="transportation"),
        "AUTOMOTIVE": StatementMapping(bucket="essential", subcategory="transportation"),
        "GOVERNMENT_AND_NON_PROFIT": StatementMapping(bucket="essential", subcategory="other"),
        "FOOD_AND_DRINK": StatementMapping(bucket="discretionary", subcategory="dining_out"),
        "ENTERTAINMENT": StatementMapping(bucket="discretionary", subcategory="entertainment"),
        "GENERAL_MERCHANDISE": StatementMapping(bucket="discretionary", subcategory="shopping"),
        "GENERAL_SERVICES": StatementMapping(bucket="discretionary", subcategory="subscriptions"),
        "TRAVEL": StatementMapping(bucket="discretionary", subcategory="travel"),
        "TRANSPORTATION": StatementMapping(bucket="discretionary", subcategory="transportation"),
        "RECREATION": StatementMapping(bucket="discretionary", subcategory="entertainment"),
        "PERSONAL_CARE": StatementMapping(bucket="discretionary", subcategory="other"),
    },
    investment_income_keywords=("interest", "dividend"),
)


def build_taxonomy(overrides: dict[str, Any], base: Taxonomy = DEFAULT_TAXONOMY) -> Taxonomy:
    """Return ``base`` with the given top-level tables replaced."""
    unknown = set(overrides) - set(Taxonomy.model_fields)
    if unknown:
        raise TaxonomyError(f"Unknown taxonomy keys: {', '.join(sorted(unknown))}")
    merged = base.model_dump()
    merged.update(overrides)
    try:
        return Taxonomy.model_validate(merged)
    except ValidationError as exc:
        raise TaxonomyError(f"Invalid taxonomy: {exc}") from exc


def load_taxonomy(path: str | None) -> Taxonomy:
    """
    Load taxonomy overrides from a JSON file.

    Keys absent from the file keep their default tables. No path means the
    built-in taxonomy.
    """
    if not path:
        return DEFAULT_TAXONOMY

    try:
        with open(path, encoding="utf-8") as handle:
            raw = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise TaxonomyError(f"Could not read taxonomy file {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise TaxonomyError(f"Taxonomy file {path} must contain a JSON object")

    taxonomy = build_taxonomy(raw)
    logger.info("[TAXONOMY] Loaded %d override(s) from %s", len(raw), path)
    return taxonomy
