"""
Progressive three-phase matcher.

Phase 1 pairs on the primary identifier, phase 2 on the secondary identifier,
phase 3 on a weighted fuzzy score. Each phase only sees records the earlier
phases left unconsumed. Selection is greedy and first-match-wins, driven by
the left collection in input order; it is not a globally optimal assignment.

Consumption is tracked as one boolean flag per input slot on each side and is
only ever written by the single loop in `PhaseMatcher.run`. Phase 3 scoring can
be fanned out to a thread pool because scanning the right-hand pool is
read-only; the winner for each left record is still picked sequentially.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import structlog

from ledger_recon.config import MatchConfig
from ledger_recon.index import build_index, by_primary_key, by_secondary_key
from ledger_recon.models import MatchMethod
from ledger_recon.scoring import fuzzy_score
from ledger_recon.utils import NormalizedRecord

logger = structlog.get_logger(__name__)

IDENTIFIER_CONFIDENCE = 1.0
SECONDARY_IDENTIFIER_CONFIDENCE = 0.9


@dataclass(frozen=True)
class RawMatch:
    left: NormalizedRecord
    right: NormalizedRecord
    method: MatchMethod
    confidence: float


@dataclass
class MatchOutcome:
    matches: List[RawMatch] = field(default_factory=list)
    unmatched_left: List[NormalizedRecord] = field(default_factory=list)
    unmatched_right: List[NormalizedRecord] = field(default_factory=list)


# (score, right slot) pairs, best first
RankedCandidates = List[Tuple[float, int]]


class PhaseMatcher:
    def __init__(self, left: Sequence[NormalizedRecord], right: Sequence[NormalizedRecord],
                 config: MatchConfig):
        self.left = list(left)
        self.right = list(right)
        self.config = config
        self.left_used = [False] * len(self.left)
        self.right_used = [False] * len(self.right)
        self.matches: List[RawMatch] = []

    def run(self) -> MatchOutcome:
        primary_index = build_index(self.right, by_primary_key)
        secondary_index = build_index(self.right, by_secondary_key)

        n = self._identifier_phase(primary_index, by_primary_key,
                                   MatchMethod.IDENTIFIER, IDENTIFIER_CONFIDENCE)
        logger.info("phase_complete", phase=1, method=MatchMethod.IDENTIFIER.value, matched=n)

        n = self._identifier_phase(secondary_index, by_secondary_key,
                                   MatchMethod.SECONDARY_IDENTIFIER, SECONDARY_IDENTIFIER_CONFIDENCE)
        logger.info("phase_complete", phase=2, method=MatchMethod.SECONDARY_IDENTIFIER.value, matched=n)

        n = self._fuzzy_phase()
        logger.info("phase_complete", phase=3, method=MatchMethod.FUZZY.value, matched=n,
                    threshold=self.config.fuzzy_threshold)

        return MatchOutcome(
            matches=self.matches,
            unmatched_left=[r for r in self.left if not self.left_used[r.slot]],
            unmatched_right=[r for r in self.right if not self.right_used[r.slot]],
        )

    def _consume(self, left: NormalizedRecord, right: NormalizedRecord,
                 method: MatchMethod, confidence: float) -> None:
        self.left_used[left.slot] = True
        self.right_used[right.slot] = True
        self.matches.append(RawMatch(left, right, method, confidence))

    def _identifier_phase(self, index: Dict[str, List[int]],
                          key: Callable[[NormalizedRecord], Optional[str]],
                          method: MatchMethod, confidence: float) -> int:
        matched = 0
        for rec in self.left:
            if self.left_used[rec.slot]:
                continue
            k = key(rec)
            if k is None:
                continue
            for slot in index.get(k, ()):
                if not self.right_used[slot]:
                    self._consume(rec, self.right[slot], method, confidence)
                    matched += 1
                    break  # first match wins
        return matched

    def _rank_candidates(self, rec: NormalizedRecord, pool: Sequence[NormalizedRecord]) -> RankedCandidates:
        threshold = self.config.fuzzy_threshold
        ranked = []
        for candidate in pool:
            score = fuzzy_score(rec, candidate, self.config)
            if score > threshold:
                ranked.append((score, candidate.slot))
        # highest score first; equal scores keep right-side input order
        ranked.sort(key=lambda item: (-item[0], item[1]))
        return ranked

    def _fuzzy_phase(self) -> int:
        pending = [r for r in self.left if not self.left_used[r.slot]]
        pool = [r for r in self.right if not self.right_used[r.slot]]
        if not pending or not pool:
            return 0

        if self.config.workers > 1 and len(pending) > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                rankings = list(executor.map(lambda rec: self._rank_candidates(rec, pool), pending))
        else:
            rankings = [self._rank_candidates(rec, pool) for rec in pending]

        matched = 0
        for rec, ranked in zip(pending, rankings):
            for score, slot in ranked:
                if not self.right_used[slot]:
                    self._consume(rec, self.right[slot], MatchMethod.FUZZY, score)
                    matched += 1
                    break
            else:
                logger.debug("fuzzy_no_candidate", source_id=rec.record.source_id,
                             candidates_above_threshold=len(ranked))
        return matched


def match_records(left: Sequence[NormalizedRecord], right: Sequence[NormalizedRecord],
                  config: MatchConfig) -> MatchOutcome:
    return PhaseMatcher(left, right, config).run()
