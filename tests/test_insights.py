from ledger_recon.insights import historical_insights
from ledger_recon.models import LedgerRecord


def test_paid_history_preferred():
    unmatched = [LedgerRecord("R1", primary_key="INV-5", amount=100)]
    history = [
        LedgerRecord("H1", primary_key="INV-5", amount=100, issue_date="2024-02-01",
                     status_fields={"status": "DRAFT"}),
        LedgerRecord("H2", primary_key="inv-5", amount=100, issue_date="2024-01-01",
                     status_fields={"status": "PAID", "payment_date": "2024-01-20"}),
    ]

    insights = historical_insights(unmatched, history)

    assert len(insights) == 1
    i = insights[0]
    assert i.historical.source_id == "H2"
    assert i.type == "already_paid"
    assert i.severity == "warning"
    assert i.message == "Invoice INV-5 appears to have been paid on 20/01/2024"


def test_most_recent_when_none_paid():
    unmatched = [LedgerRecord("R1", secondary_key="PO-1", amount=1)]
    history = [
        LedgerRecord("H1", secondary_key="PO-1", amount=1, issue_date="2024-01-01",
                     status_fields={"is_voided": "true"}),
        LedgerRecord("H2", secondary_key="PO-1", amount=1, issue_date="2024-03-01",
                     status_fields={"status": "DRAFT"}),
    ]

    i = historical_insights(unmatched, history)[0]

    assert i.historical.source_id == "H2"
    assert (i.type, i.severity) == ("draft", "info")


def test_partially_paid_and_voided_messages():
    unmatched = [
        LedgerRecord("R1", primary_key="INV-1", amount=1),
        LedgerRecord("R2", primary_key="INV-2", amount=1),
        LedgerRecord("R3", primary_key="INV-3", amount=1),
        LedgerRecord("R4", primary_key="INV-4", amount=1),
    ]
    history = [
        LedgerRecord("H1", primary_key="INV-1", amount=40,
                     status_fields={"is_partially_paid": "yes", "original_amount": "100",
                                    "amount_paid": "60"}),
        LedgerRecord("H2", primary_key="INV-2", amount=1, status_fields={"status": "VOIDED"}),
        LedgerRecord("H3", primary_key="INV-3", amount=1, status_fields={"status": "AUTHORISED"}),
    ]

    insights = {i.record.source_id: i for i in historical_insights(unmatched, history)}

    assert set(insights) == {"R1", "R2", "R3"}
    assert insights["R1"].type == "partially_paid"
    assert "Original amount: $100.00, Paid: $60.00, Outstanding: $40.00" in insights["R1"].message
    assert (insights["R2"].type, insights["R2"].severity) == ("voided", "error")
    assert insights["R3"].type == "found_in_history"
    assert insights["R3"].message.endswith("status: AUTHORISED")
