from typing import Optional, Sequence

import structlog

from ledger_recon.categorize import categorize
from ledger_recon.config import MatchConfig
from ledger_recon.discrepancy import find_discrepancies
from ledger_recon.match import match_records
from ledger_recon.models import LedgerRecord, MatchPair, ReconciliationResult
from ledger_recon.summary import summarize
from ledger_recon.utils import normalize_record

logger = structlog.get_logger(__name__)


def reconcile(left: Sequence[LedgerRecord], right: Sequence[LedgerRecord],
              config: Optional[MatchConfig] = None) -> ReconciliationResult:
    """
    Pair records across two ledgers and classify every pair.

    `left` drives the matching. Every input record ends up in exactly one
    place: a pair, `unmatched_left` or `unmatched_right`. The result depends
    only on the inputs, their order and the config.

    Raises:
        ConfigError: config options out of range (raised when the
            MatchConfig is built, so before any matching happens).
        TypeError: `left` or `right` is None or config is not a MatchConfig.
    """
    if left is None or right is None:
        raise TypeError("reconcile() needs two record collections, got None")
    if config is None:
        config = MatchConfig()
    elif not isinstance(config, MatchConfig):
        raise TypeError(f"config must be a MatchConfig, got {type(config).__name__}")

    log = logger.bind(left_count=len(left), right_count=len(right))
    log.info("reconciliation_started",
             amount_tolerance=str(config.amount_tolerance),
             date_tolerance_days=config.date_tolerance_days,
             fuzzy_threshold=config.fuzzy_threshold)

    left_norm = [normalize_record(i, rec) for i, rec in enumerate(left)]
    right_norm = [normalize_record(i, rec) for i, rec in enumerate(right)]

    outcome = match_records(left_norm, right_norm, config)

    pairs = []
    for m in outcome.matches:
        discrepancies = find_discrepancies(m.left, m.right, config)
        pairs.append(MatchPair(
            left=m.left.record,
            right=m.right.record,
            method=m.method,
            confidence=m.confidence,
            discrepancies=tuple(discrepancies),
            category=categorize(discrepancies, m.left.record, m.right.record),
        ))

    unmatched_left = [r.record for r in outcome.unmatched_left]
    unmatched_right = [r.record for r in outcome.unmatched_right]
    summary = summarize(left, right, pairs, unmatched_left, unmatched_right)

    log.info("reconciliation_complete",
             matched=summary.matched,
             unmatched_left=summary.unmatched_left,
             unmatched_right=summary.unmatched_right,
             by_category=summary.by_category)

    return ReconciliationResult(
        pairs=pairs,
        unmatched_left=unmatched_left,
        unmatched_right=unmatched_right,
        summary=summary,
    )
