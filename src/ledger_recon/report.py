import os
import json
from typing import Optional, Sequence

import pandas as pd

from ledger_recon.insights import HistoricalInsight
from ledger_recon.models import LedgerRecord, ReconciliationResult

RECORD_COLUMNS = ["source_id", "primary_key", "secondary_key", "counterparty_name",
                  "amount", "issue_date", "due_date", "document_type"]


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def records_frame(records: Sequence[LedgerRecord]) -> pd.DataFrame:
    rows = []
    for r in records:
        row = {col: getattr(r, col) for col in RECORD_COLUMNS}
        row.update(r.status_fields)
        rows.append(row)
    return pd.DataFrame(rows, columns=None if rows else RECORD_COLUMNS)


def pairs_frame(result: ReconciliationResult) -> pd.DataFrame:
    rows = [{
        "match_id": p.match_id,
        "left_source_id": p.left.source_id,
        "right_source_id": p.right.source_id,
        "method": p.method.value,
        "confidence": round(p.confidence, 4),
        "category": p.category.value,
        "discrepancy_count": len(p.discrepancies),
        "left_amount": p.left.amount,
        "right_amount": p.right.amount,
        "left_issue_date": p.left.issue_date,
        "right_issue_date": p.right.issue_date,
    } for p in result.pairs]
    return pd.DataFrame(rows, columns=[
        "match_id", "left_source_id", "right_source_id", "method", "confidence", "category",
        "discrepancy_count", "left_amount", "right_amount", "left_issue_date", "right_issue_date",
    ])


def discrepancies_frame(result: ReconciliationResult) -> pd.DataFrame:
    rows = [{
        "match_id": p.match_id,
        "field": d.field,
        "left_value": d.left_value,
        "right_value": d.right_value,
        "magnitude": str(d.magnitude),
    } for p in result.pairs for d in p.discrepancies]
    return pd.DataFrame(rows, columns=["match_id", "field", "left_value", "right_value", "magnitude"])


def insights_frame(insights: Sequence[HistoricalInsight]) -> pd.DataFrame:
    rows = [{
        "source_id": i.record.source_id,
        "historical_source_id": i.historical.source_id,
        "type": i.type,
        "severity": i.severity,
        "message": i.message,
    } for i in insights]
    return pd.DataFrame(rows, columns=["source_id", "historical_source_id", "type", "severity", "message"])


def write_outputs(outputs_dir: str,
                  result: ReconciliationResult,
                  exceptions: Optional[pd.DataFrame] = None,
                  suggestions: Optional[pd.DataFrame] = None,
                  insights: Sequence[HistoricalInsight] = ()) -> None:
    ensure_dir(outputs_dir)

    pairs_frame(result).to_csv(os.path.join(outputs_dir, "matched.csv"), index=False)
    discrepancies_frame(result).to_csv(os.path.join(outputs_dir, "discrepancies.csv"), index=False)
    records_frame(result.unmatched_left).to_csv(os.path.join(outputs_dir, "unmatched_left.csv"), index=False)
    records_frame(result.unmatched_right).to_csv(os.path.join(outputs_dir, "unmatched_right.csv"), index=False)
    if exceptions is not None:
        exceptions.to_csv(os.path.join(outputs_dir, "exceptions.csv"), index=False)
    if suggestions is not None:
        suggestions.to_csv(os.path.join(outputs_dir, "suggestions.csv"), index=False)
    insights_frame(insights).to_csv(os.path.join(outputs_dir, "insights.csv"), index=False)

    summary = result.summary.to_dict()
    summary["exceptions_rows"] = int(len(exceptions)) if exceptions is not None else 0
    summary["insights"] = len(insights)

    with open(os.path.join(outputs_dir, "recon_summary.json"), "w") as f:
        json.dump(summary, f, indent=2, default=str)
