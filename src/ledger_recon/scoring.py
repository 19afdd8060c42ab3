"""
Similarity scorers for the fuzzy phase.

All scorers return a float in [0, 1]. The combined score weights counterparty
name, amount and date, and only counts factors present on both records, so a
missing date neither helps nor sinks a candidate.
"""

from datetime import date
from decimal import Decimal
from typing import AbstractSet, Dict, Optional, Tuple

from ledger_recon.config import MatchConfig
from ledger_recon.utils import NormalizedRecord

NAME_WEIGHT = 0.40
AMOUNT_WEIGHT = 0.35
DATE_WEIGHT = 0.25

DATE_HORIZON_DAYS = 30


def token_set_similarity(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    """Jaccard similarity of two word sets."""
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    return len(a & b) / len(a | b)


def amount_proximity(a: Decimal, b: Decimal, tolerance: Decimal) -> float:
    diff = abs(a - b)
    if diff <= tolerance:
        return 1.0
    largest = max(a, b)
    if largest <= 0:
        return 0.0
    return max(0.0, 1.0 - float(diff / largest))


def date_proximity(a: date, b: date, tolerance_days: int,
                   horizon_days: int = DATE_HORIZON_DAYS) -> float:
    days = abs((a - b).days)
    if days <= tolerance_days:
        return 1.0
    return max(0.0, 1.0 - days / horizon_days)


def score_components(left: NormalizedRecord, right: NormalizedRecord,
                     config: MatchConfig) -> Dict[str, Optional[float]]:
    """Per-factor scores; None marks a factor missing on either side."""
    name = None
    if left.name_tokens and right.name_tokens:
        name = token_set_similarity(left.name_tokens, right.name_tokens)

    amount = None
    if left.amount is not None and right.amount is not None:
        tolerance = config.amount_tolerance_for(left.amount, right.amount)
        amount = amount_proximity(left.amount, right.amount, tolerance)

    issued = None
    if left.issue_date is not None and right.issue_date is not None:
        issued = date_proximity(left.issue_date, right.issue_date, config.date_tolerance_days)

    return {"name": name, "amount": amount, "date": issued}


_WEIGHTS: Tuple[Tuple[str, float], ...] = (
    ("name", NAME_WEIGHT),
    ("amount", AMOUNT_WEIGHT),
    ("date", DATE_WEIGHT),
)


def fuzzy_score(left: NormalizedRecord, right: NormalizedRecord, config: MatchConfig) -> float:
    components = score_components(left, right, config)
    score = 0.0
    weight_total = 0.0
    for key, weight in _WEIGHTS:
        value = components[key]
        if value is None:
            continue
        score += value * weight
        weight_total += weight
    if weight_total <= 0:
        return 0.0
    # float noise must not push a score across the threshold
    return round(score / weight_total, 10)
