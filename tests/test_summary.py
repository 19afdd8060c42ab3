from decimal import Decimal

from ledger_recon import LedgerRecord, MatchConfig, reconcile
from ledger_recon.summary import ledger_total, safe_ratio


def test_safe_ratio_zero_total():
    assert safe_ratio(0, 0) == 0.0
    assert safe_ratio(3, 0) == 0.0
    assert safe_ratio(1, 4) == 0.25


def test_ledger_total_skips_malformed_amounts():
    records = [LedgerRecord("a", amount="10.50"), LedgerRecord("b", amount="junk"),
               LedgerRecord("c", amount=-2)]
    assert ledger_total(records) == Decimal("8.50")


def test_summary_counts_and_rates():
    left = [
        LedgerRecord("L1", primary_key="A", amount=100, status_fields={"status": "APPROVED"}),
        LedgerRecord("L2", primary_key="B", amount=50),
        LedgerRecord("L3", primary_key="C", amount=10),
        LedgerRecord("L4", primary_key="Z", amount=5, document_type="ACCPAYCREDIT"),
    ]
    right = [
        LedgerRecord("R1", primary_key="A", amount=100),
        LedgerRecord("R2", primary_key="B", amount=70),
        LedgerRecord("R3", primary_key="C", amount=10),
        LedgerRecord("R4", primary_key="Y", amount=-3),
    ]

    s = reconcile(left, right, MatchConfig(fuzzy_threshold=1.0)).summary

    assert s.total_left == 4 and s.total_right == 4
    assert s.matched == 3
    assert s.unmatched_left == 1 and s.unmatched_right == 1
    assert s.by_method == {"IDENTIFIER": 3, "SECONDARY_IDENTIFIER": 0, "FUZZY": 0}
    assert s.by_category == {"APPROVED": 1, "PENDING_APPROVAL": 1, "DISPUTED": 1}
    assert s.match_rate == 0.75
    assert s.approval_rate == 1 / 3
    assert s.discrepancy_rate == 1 / 3
    assert s.credit_notes_left == 1
    assert s.credit_notes_right == 1
    assert s.left_total_amount == Decimal("165")
    assert s.right_total_amount == Decimal("177")
    assert s.variance == Decimal("12")


def test_summary_to_dict_is_json_friendly():
    s = reconcile([LedgerRecord("L1", amount=1)], []).summary
    d = s.to_dict()
    assert d["total_left"] == 1
    assert d["left_total_amount"] == "1"
    assert d["match_rate"] == 0.0
