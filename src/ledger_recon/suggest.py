from typing import Sequence

import pandas as pd
from rapidfuzz import fuzz, utils

from ledger_recon.config import MatchConfig
from ledger_recon.models import LedgerRecord
from ledger_recon.utils import normalize_amount, normalize_date

SUGGESTION_COLUMNS = [
    "left_source_id", "right_source_id", "rank", "similarity", "amount_diff",
    "date_diff_days", "left_name", "right_name", "reason",
]


def build_suggestions(unmatched_left: Sequence[LedgerRecord],
                      unmatched_right: Sequence[LedgerRecord],
                      config: MatchConfig,
                      top_k: int = 3) -> pd.DataFrame:
    """
    Rank leftover right-side records as review candidates for each leftover
    left-side record. Ordering is name similarity, then smallest amount
    difference, then smallest date difference. Nothing here changes the
    reconciliation itself.
    """
    if not unmatched_left or not unmatched_right or top_k < 1:
        return pd.DataFrame(columns=SUGGESTION_COLUMNS)

    right = pd.DataFrame({
        "right_source_id": [r.source_id for r in unmatched_right],
        "right_name": [r.counterparty_name or "" for r in unmatched_right],
        "amount": [normalize_amount(r.amount) for r in unmatched_right],
        "date": [normalize_date(r.issue_date) for r in unmatched_right],
    })

    rows = []
    for l in unmatched_left:
        l_name = l.counterparty_name or ""
        l_amount = normalize_amount(l.amount)
        l_date = normalize_date(l.issue_date)

        candidates = right.copy()
        candidates["similarity"] = candidates["right_name"].apply(
            lambda s: fuzz.token_set_ratio(l_name, s, processor=utils.default_process)
        )
        candidates["amount_diff"] = candidates["amount"].apply(
            lambda a: float(abs(a - l_amount)) if a is not None and l_amount is not None else None
        )
        candidates["date_diff_days"] = candidates["date"].apply(
            lambda d: abs((d - l_date).days) if d is not None and l_date is not None else None
        )

        # missing diffs sort last
        candidates = candidates.sort_values(
            ["similarity", "amount_diff", "date_diff_days"],
            ascending=[False, True, True],
            na_position="last",
            kind="mergesort",
        ).head(top_k)

        rank = 1
        for _, c in candidates.iterrows():
            reason_parts = [f"sim={int(round(c['similarity']))}"]
            if pd.notna(c["amount_diff"]):
                reason_parts.append(f"amt_diff={float(c['amount_diff']):.2f}")
                tolerance = config.amount_tolerance_for(c["amount"], l_amount)
                if c["amount_diff"] <= float(tolerance):
                    reason_parts.append("amount_within_tolerance")
            if pd.notna(c["date_diff_days"]):
                reason_parts.append(f"date_diff={int(c['date_diff_days'])}d")

            rows.append({
                "left_source_id": l.source_id,
                "right_source_id": c["right_source_id"],
                "rank": rank,
                "similarity": float(c["similarity"]),
                "amount_diff": c["amount_diff"],
                "date_diff_days": c["date_diff_days"],
                "left_name": l_name,
                "right_name": c["right_name"],
                "reason": "; ".join(reason_parts),
            })
            rank += 1

    return pd.DataFrame(rows, columns=SUGGESTION_COLUMNS)
