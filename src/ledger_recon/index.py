from typing import Callable, Dict, List, Optional, Sequence

from ledger_recon.utils import NormalizedRecord


def build_index(records: Sequence[NormalizedRecord],
                key: Callable[[NormalizedRecord], Optional[str]]) -> Dict[str, List[int]]:
    """
    Map each normalized key to the slots sharing it, in input order.

    Several records may share a key (amended or re-issued documents); records
    without a usable key are left out.
    """
    index: Dict[str, List[int]] = {}
    for rec in records:
        k = key(rec)
        if k is None:
            continue
        index.setdefault(k, []).append(rec.slot)
    return index


def by_primary_key(rec: NormalizedRecord) -> Optional[str]:
    return rec.primary_key


def by_secondary_key(rec: NormalizedRecord) -> Optional[str]:
    return rec.secondary_key
