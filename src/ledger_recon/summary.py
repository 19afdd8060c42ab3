from collections import Counter
from decimal import Decimal
from typing import Sequence

from ledger_recon.models import Category, LedgerRecord, MatchMethod, MatchPair, Summary
from ledger_recon.utils import is_credit_note, signed_amount


def safe_ratio(count: int, total: int) -> float:
    return count / total if total else 0.0


def ledger_total(records: Sequence[LedgerRecord]) -> Decimal:
    total = Decimal("0")
    for rec in records:
        amount = signed_amount(rec.amount)
        if amount is not None:
            total += amount
    return total


def summarize(left: Sequence[LedgerRecord], right: Sequence[LedgerRecord],
              pairs: Sequence[MatchPair], unmatched_left: Sequence[LedgerRecord],
              unmatched_right: Sequence[LedgerRecord]) -> Summary:
    by_method = Counter(p.method.value for p in pairs)
    by_category = Counter(p.category.value for p in pairs)
    matched = len(pairs)

    left_total = ledger_total(left)
    right_total = ledger_total(right)

    return Summary(
        total_left=len(left),
        total_right=len(right),
        matched=matched,
        unmatched_left=len(unmatched_left),
        unmatched_right=len(unmatched_right),
        by_method={m.value: by_method.get(m.value, 0) for m in MatchMethod},
        by_category={c.value: by_category.get(c.value, 0) for c in Category},
        match_rate=safe_ratio(matched, len(right)),
        approval_rate=safe_ratio(by_category.get(Category.APPROVED.value, 0), matched),
        discrepancy_rate=safe_ratio(by_category.get(Category.DISPUTED.value, 0), matched),
        credit_notes_left=sum(1 for r in left if is_credit_note(r)),
        credit_notes_right=sum(1 for r in right if is_credit_note(r)),
        left_total_amount=left_total,
        right_total_amount=right_total,
        variance=abs(left_total - abs(right_total)),
    )
