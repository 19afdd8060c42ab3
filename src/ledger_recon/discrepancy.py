from typing import List

from ledger_recon.config import MatchConfig
from ledger_recon.models import Discrepancy
from ledger_recon.utils import NormalizedRecord


def find_discrepancies(left: NormalizedRecord, right: NormalizedRecord,
                       config: MatchConfig) -> List[Discrepancy]:
    """
    Compare a matched pair on amount, issue date and due date.

    The same tolerances as fuzzy scoring apply to every pair whatever phase
    produced it. A difference equal to the tolerance is accepted. Values are
    reported as each ledger recorded them. Fields that are missing or
    unparsable on either side are not compared.
    """
    out: List[Discrepancy] = []

    if left.amount is not None and right.amount is not None:
        diff = abs(left.amount - right.amount)
        if diff > config.amount_tolerance_for(left.amount, right.amount):
            out.append(Discrepancy("amount", left.record.amount, right.record.amount, diff))

    for name in ("issue_date", "due_date"):
        a = getattr(left, name)
        b = getattr(right, name)
        if a is None or b is None:
            continue
        days = abs((a - b).days)
        if days > config.date_tolerance_days:
            out.append(Discrepancy(name, getattr(left.record, name), getattr(right.record, name), days))

    return out
