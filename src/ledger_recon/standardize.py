from typing import List, Tuple

import pandas as pd
import structlog

from ledger_recon.ingest import OPTIONAL_COLS, STATUS_COLS
from ledger_recon.models import LedgerRecord
from ledger_recon.utils import normalize_amount, normalize_date

logger = structlog.get_logger(__name__)


def _cell(row: pd.Series, col: str):
    if col not in row.index:
        return None
    value = row[col]
    if pd.isna(value):
        return None
    value = str(value).strip()
    return value or None


def standardize(df: pd.DataFrame, side: str, dayfirst: bool = True) -> Tuple[List[LedgerRecord], pd.DataFrame]:
    """
    Turn canonical rows into LedgerRecords.

    Rows are never dropped: a field that cannot be parsed stays on the record
    as given (the engine treats it as absent) and the row is listed in the
    returned exceptions frame with the reasons.
    """
    records: List[LedgerRecord] = []
    problems = []

    for pos, (_, row) in enumerate(df.iterrows(), start=1):
        reasons = ""
        source_id = _cell(row, "source_id")
        if source_id is None:
            source_id = f"{side}-{pos}"
            reasons += "missing_source_id;"

        amount = _cell(row, "amount")
        if normalize_amount(amount) is None:
            reasons += "bad_amount;"

        fields = {col: _cell(row, col) for col in OPTIONAL_COLS}
        for col in ("issue_date", "due_date"):
            if fields[col] is not None and normalize_date(fields[col], dayfirst=dayfirst) is None:
                reasons += f"bad_{col};"

        statuses = {col: _cell(row, col) for col in STATUS_COLS}
        records.append(LedgerRecord(
            source_id=source_id,
            amount=amount,
            status_fields={k: v for k, v in statuses.items() if v is not None},
            **fields,
        ))

        if reasons:
            problems.append({"source": side, "row": pos, "source_id": source_id,
                             "exception_reason": reasons})

    exceptions = pd.DataFrame(problems, columns=["source", "row", "source_id", "exception_reason"])
    if len(exceptions):
        logger.warning("degraded_rows", side=side, rows=len(exceptions), total=len(records))
    return records, exceptions
