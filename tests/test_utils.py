from datetime import date, datetime
from decimal import Decimal

import pandas as pd

from ledger_recon.models import LedgerRecord
from ledger_recon.utils import (
    is_credit_note,
    name_tokens,
    normalize_amount,
    normalize_date,
    normalize_key,
    normalize_record,
    signed_amount,
)


def test_normalize_key_trims_and_casefolds():
    assert normalize_key("  INV-001 ") == "inv-001"
    assert normalize_key("Straße") == "strasse"


def test_normalize_key_blank_is_absent():
    assert normalize_key("   ") is None
    assert normalize_key(None) is None
    assert normalize_key(float("nan")) is None


def test_normalize_amount_discards_sign():
    assert normalize_amount(-125.5) == Decimal("125.5")
    assert normalize_amount("(42.10)") == Decimal("42.10")


def test_normalize_amount_strips_currency_and_separators():
    assert normalize_amount("$1,234.56") == Decimal("1234.56")
    assert signed_amount("-£10") == Decimal("-10")
    assert normalize_amount("USD 2,500.00") == Decimal("2500.00")


def test_normalize_amount_reads_scientific_notation():
    assert normalize_amount("1.5E+03") == Decimal("1500")
    assert normalize_amount("1e3") == Decimal("1000")
    assert signed_amount("(2.5e2)") == Decimal("-250")


def test_malformed_amount_degrades_to_absent():
    assert normalize_amount("n/a") is None
    assert normalize_amount("") is None
    assert normalize_amount(True) is None
    assert normalize_amount(float("nan")) is None
    assert normalize_amount("12abc34") is None


def test_normalize_date_formats():
    assert normalize_date("2024-01-05") == date(2024, 1, 5)
    assert normalize_date("05/01/2024") == date(2024, 1, 5)
    assert normalize_date("05/01/2024", dayfirst=False) == date(2024, 5, 1)
    assert normalize_date("/Date(1704067200000+0000)/") == date(2024, 1, 1)
    assert normalize_date(datetime(2024, 3, 1, 15, 30)) == date(2024, 3, 1)
    assert normalize_date(pd.Timestamp("2024-03-02")) == date(2024, 3, 2)


def test_malformed_date_degrades_to_absent():
    assert normalize_date("not a date") is None
    assert normalize_date("2024-02-30") is None
    assert normalize_date("31/02/2024") is None
    assert normalize_date(None) is None


def test_relative_date_words_are_absent():
    # pandas would resolve these against the clock
    assert normalize_date("today") is None
    assert normalize_date("now") is None
    assert normalize_date("Tomorrow") is None


def test_name_tokens():
    assert name_tokens("  Acme   Corp ") == frozenset({"acme", "corp"})
    assert name_tokens(None) == frozenset()


def test_credit_note_detection():
    assert is_credit_note(LedgerRecord("a", amount=10, document_type="ACCPAYCREDIT"))
    assert is_credit_note(LedgerRecord("b", amount=-10))
    assert not is_credit_note(LedgerRecord("c", amount=10, document_type="ACCPAY"))


def test_normalize_record_keeps_slot_and_record():
    record = LedgerRecord("x", amount="oops", primary_key=" INV-9 ", issue_date="garbage")
    norm = normalize_record(4, record)
    assert norm.slot == 4
    assert norm.record is record
    assert norm.primary_key == "inv-9"
    assert norm.amount is None
    assert norm.issue_date is None
