from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


class MatchMethod(str, Enum):
    IDENTIFIER = "IDENTIFIER"
    SECONDARY_IDENTIFIER = "SECONDARY_IDENTIFIER"
    FUZZY = "FUZZY"


class Category(str, Enum):
    APPROVED = "APPROVED"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    DISPUTED = "DISPUTED"


class StatusTag(str, Enum):
    """Business status vocabulary recognised on either ledger."""

    APPROVED = "APPROVED"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    UNRECOGNIZED = "UNRECOGNIZED"


@dataclass(frozen=True)
class LedgerRecord:
    """
    One financial document from either side of a reconciliation.

    Values may arrive dirty (amount strings with currency symbols, dates in
    several formats). The engine normalizes them internally and never
    mutates the record.
    """
    source_id: str
    amount: Any = None
    primary_key: Optional[str] = None
    secondary_key: Optional[str] = None
    counterparty_name: Optional[str] = None
    issue_date: Any = None
    due_date: Any = None
    document_type: Optional[str] = None
    status_fields: Mapping[str, str] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class Discrepancy:
    field: str
    left_value: Any
    right_value: Any
    magnitude: Union[Decimal, int]


@dataclass(frozen=True)
class MatchPair:
    left: LedgerRecord
    right: LedgerRecord
    method: MatchMethod
    confidence: float
    discrepancies: Tuple[Discrepancy, ...] = ()
    category: Category = Category.PENDING_APPROVAL

    @property
    def match_id(self) -> str:
        return f"{self.left.source_id}-{self.right.source_id}"

    @property
    def is_clean(self) -> bool:
        return not self.discrepancies


@dataclass(frozen=True)
class Summary:
    total_left: int = 0
    total_right: int = 0
    matched: int = 0
    unmatched_left: int = 0
    unmatched_right: int = 0
    by_method: Dict[str, int] = field(default_factory=dict)
    by_category: Dict[str, int] = field(default_factory=dict)
    match_rate: float = 0.0
    approval_rate: float = 0.0
    discrepancy_rate: float = 0.0
    credit_notes_left: int = 0
    credit_notes_right: int = 0
    left_total_amount: Decimal = Decimal("0")
    right_total_amount: Decimal = Decimal("0")
    variance: Decimal = Decimal("0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_left": self.total_left,
            "total_right": self.total_right,
            "matched": self.matched,
            "unmatched_left": self.unmatched_left,
            "unmatched_right": self.unmatched_right,
            "by_method": dict(self.by_method),
            "by_category": dict(self.by_category),
            "match_rate": self.match_rate,
            "approval_rate": self.approval_rate,
            "discrepancy_rate": self.discrepancy_rate,
            "credit_notes_left": self.credit_notes_left,
            "credit_notes_right": self.credit_notes_right,
            "left_total_amount": str(self.left_total_amount),
            "right_total_amount": str(self.right_total_amount),
            "variance": str(self.variance),
        }


@dataclass
class ReconciliationResult:
    pairs: List[MatchPair] = field(default_factory=list)
    unmatched_left: List[LedgerRecord] = field(default_factory=list)
    unmatched_right: List[LedgerRecord] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)

    def pairs_in(self, category: Category) -> List[MatchPair]:
        return [p for p in self.pairs if p.category == category]

    def pairs_by(self, method: MatchMethod) -> List[MatchPair]:
        return [p for p in self.pairs if p.method == method]
