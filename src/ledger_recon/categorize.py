import re
from typing import Any, Iterable, Sequence

from ledger_recon.models import Category, Discrepancy, LedgerRecord, StatusTag

_SEPARATORS = re.compile(r"[\s\-]+")

_STATUS_VOCABULARY = {
    "APPROVED": StatusTag.APPROVED,
    "PENDING_APPROVAL": StatusTag.PENDING_APPROVAL,
    "REQUIRES_APPROVAL": StatusTag.PENDING_APPROVAL,
    "PENDING": StatusTag.PENDING_APPROVAL,
}


def classify_status(value: Any) -> StatusTag:
    """Map a raw status string onto the closed status vocabulary."""
    if value is None:
        return StatusTag.UNRECOGNIZED
    key = _SEPARATORS.sub("_", str(value).strip()).upper()
    return _STATUS_VOCABULARY.get(key, StatusTag.UNRECOGNIZED)


def status_tags(records: Iterable[LedgerRecord]) -> set:
    return {classify_status(v) for rec in records for v in (rec.status_fields or {}).values()}


def categorize(discrepancies: Sequence[Discrepancy], left: LedgerRecord, right: LedgerRecord) -> Category:
    # top-down, first rule wins; unrecognised statuses are never approved
    if discrepancies:
        return Category.DISPUTED
    tags = status_tags((left, right))
    if StatusTag.APPROVED in tags:
        return Category.APPROVED
    if StatusTag.PENDING_APPROVAL in tags:
        return Category.PENDING_APPROVAL
    return Category.PENDING_APPROVAL
