import math
from collections import defaultdict
from collections.abc import Iterable
from typing import NamedTuple

from finance_insights.domain.formatting import capitalize_words
from finance_insights.models import RecurringCharge, RecurringFrequency, Transaction


class FrequencyBand(NamedTuple):
    frequency: RecurringFrequency
    min_days: float
    max_days: float
    annual_multiplier: int


# Checked in order; the first band containing the average gap wins.
FREQUENCY_BANDS: tuple[FrequencyBand, ...] = (
    FrequencyBand("monthly", 25, 35, 12),
    FrequencyBand("weekly", 6, 8, 52),
    FrequencyBand("bi-weekly", 13, 16, 26),
    FrequencyBand("yearly", 355, 375, 1),
)


def _round_half_up(amount: float) -> int:
    return math.floor(amount + 0.5)


def match_frequency(average_gap_days: float) -> FrequencyBand | None:
    for band in FREQUENCY_BANDS:
        if band.min_days <= average_gap_days <= band.max_days:
            return band
    return None


def average_gap_days(transactions: list[Transaction]) -> float:
    days = sorted(transaction.date.toordinal() for transaction in transactions)
    gaps = [later - earlier for earlier, later in zip(days, days[1:])]
    return sum(gaps) / len(gaps)


def detect_recurring_charges(transactions: Iterable[Transaction]) -> list[RecurringCharge]:
    """
    Find merchant/amount pairs that repeat at a regular interval.

    Transactions are grouped by lower-cased name and amount rounded to whole
    units. A group of two or more whose average spacing falls inside one of
    ``FREQUENCY_BANDS`` becomes a recurring charge; anything else is dropped.
    Sorted by annual impact, largest first.
    """
    groups: dict[tuple[str, int], list[Transaction]] = defaultdict(list)
    for transaction in transactions:
        key = (transaction.name.lower(), _round_half_up(transaction.amount))
        groups[key].append(transaction)

    recurring: list[RecurringCharge] = []
    for (merchant, _), group in groups.items():
        if len(group) < 2:
            continue

        band = match_frequency(average_gap_days(group))
        if band is None:
            continue

        average_amount = sum(transaction.amount for transaction in group) / len(group)
        recurring.append(RecurringCharge(
            merchant=capitalize_words(merchant),
            amount=average_amount,
            frequency=band.frequency,
            annual_impact=average_amount * band.annual_multiplier,
        ))

    recurring.sort(key=lambda charge: charge.annual_impact, reverse=True)
    return recurring
