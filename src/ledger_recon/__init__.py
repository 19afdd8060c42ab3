"""Two-ledger reconciliation: progressive identifier and fuzzy matching with discrepancy checks."""

from ledger_recon.config import ConfigError, MatchConfig
from ledger_recon.models import (
    Category,
    Discrepancy,
    LedgerRecord,
    MatchMethod,
    MatchPair,
    ReconciliationResult,
    StatusTag,
    Summary,
)
from ledger_recon.reconcile import reconcile

__all__ = [
    "reconcile",
    "MatchConfig",
    "ConfigError",
    "LedgerRecord",
    "MatchPair",
    "Discrepancy",
    "ReconciliationResult",
    "Summary",
    "MatchMethod",
    "Category",
    "StatusTag",
]
