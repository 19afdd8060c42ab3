"""
Historical insights for right-side records left unmatched.

An unmatched payable often has a simple explanation in the counterparty's
history: it was already paid, part paid, voided, or only exists as a draft.
These lookups run after reconciliation and never alter its result.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

import structlog

from ledger_recon.models import LedgerRecord
from ledger_recon.utils import normalize_amount, normalize_date, normalize_key

logger = structlog.get_logger(__name__)

TRUTHY = {"true", "yes", "y", "1"}


@dataclass(frozen=True)
class HistoricalInsight:
    record: LedgerRecord
    historical: LedgerRecord
    type: str       # already_paid, partially_paid, voided, draft, found_in_history
    severity: str   # info, warning, error
    message: str


def _status(rec: LedgerRecord) -> str:
    return (normalize_key(rec.status_fields.get("status")) or "").upper()


def _flag(rec: LedgerRecord, name: str) -> bool:
    return (normalize_key(rec.status_fields.get(name)) or "") in TRUTHY


def is_paid(rec: LedgerRecord) -> bool:
    return _flag(rec, "is_paid") or _status(rec) == "PAID"


def is_voided(rec: LedgerRecord) -> bool:
    return _flag(rec, "is_voided") or _status(rec) == "VOIDED"


def is_partially_paid(rec: LedgerRecord) -> bool:
    return _flag(rec, "is_partially_paid") or _status(rec) == "PARTIALLY_PAID"


def _label(rec: LedgerRecord) -> str:
    return rec.primary_key or rec.secondary_key or rec.source_id


def _money(value) -> str:
    amount = normalize_amount(value)
    return "N/A" if amount is None else f"${amount:,.2f}"


def describe(rec: LedgerRecord, hist: LedgerRecord) -> HistoricalInsight:
    label = _label(rec)
    if is_paid(hist):
        paid_on = normalize_date(hist.status_fields.get("payment_date"))
        when = paid_on.strftime("%d/%m/%Y") if paid_on else "an unknown date"
        return HistoricalInsight(rec, hist, "already_paid", "warning",
                                 f"Invoice {label} appears to have been paid on {when}")
    if is_partially_paid(hist):
        return HistoricalInsight(
            rec, hist, "partially_paid", "warning",
            f"Invoice {label} is partially paid. "
            f"Original amount: {_money(hist.status_fields.get('original_amount'))}, "
            f"Paid: {_money(hist.status_fields.get('amount_paid'))}, "
            f"Outstanding: {_money(hist.amount)}")
    if is_voided(hist):
        return HistoricalInsight(rec, hist, "voided", "error", f"Invoice {label} was voided")
    if _status(hist) == "DRAFT":
        return HistoricalInsight(rec, hist, "draft", "info", f"Invoice {label} exists as a draft")
    return HistoricalInsight(
        rec, hist, "found_in_history", "info",
        f"Invoice {label} found in history with status: {hist.status_fields.get('status') or 'unknown'}")


def _history_sort_key(hist: LedgerRecord):
    # paid first, then most recent, undated last
    issued: Optional[date] = normalize_date(hist.issue_date)
    return (0 if is_paid(hist) else 1, -(issued.toordinal() if issued else 0))


def historical_insights(records: Sequence[LedgerRecord],
                        history: Sequence[LedgerRecord]) -> List[HistoricalInsight]:
    by_key: Dict[str, List[LedgerRecord]] = {}
    for hist in history:
        for key in {normalize_key(hist.primary_key), normalize_key(hist.secondary_key)}:
            if key is not None:
                by_key.setdefault(key, []).append(hist)

    out: List[HistoricalInsight] = []
    for rec in records:
        found: List[LedgerRecord] = []
        for key in (normalize_key(rec.primary_key), normalize_key(rec.secondary_key)):
            if key is None:
                continue
            for hist in by_key.get(key, ()):
                if not any(h is hist for h in found):
                    found.append(hist)
        if not found:
            continue
        best = sorted(found, key=_history_sort_key)[0]
        out.append(describe(rec, best))

    logger.info("historical_insights_built", checked=len(records), insights=len(out))
    return out
