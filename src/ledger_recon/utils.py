import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, FrozenSet, Optional

import pandas as pd

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_DOTNET_DATE = re.compile(r"^/Date\((-?\d+)([+-]\d{4})?\)/$")
_DMY_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_AMOUNT_DECOR = re.compile(r"[\s,'$€£¥]")
_CURRENCY_CODE = re.compile(r"^[A-Za-z]{3}|[A-Za-z]{3}$")
_HAS_DIGIT = re.compile(r"\d")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return value is pd.NaT or value is pd.NA


def normalize_key(value: Any) -> Optional[str]:
    """Trim and case-fold an identifier; blank or missing -> None."""
    if _is_missing(value):
        return None
    key = str(value).strip().casefold()
    return key or None


def name_tokens(value: Any) -> FrozenSet[str]:
    key = normalize_key(value)
    if key is None:
        return frozenset()
    return frozenset(key.split())


def signed_amount(value: Any) -> Optional[Decimal]:
    """
    Parse an amount keeping its sign. Currency symbols, three-letter currency
    codes, whitespace and thousands separators are dropped. What remains must
    be a decimal number (scientific notation included) or the amount is absent.
    """
    if _is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isinf(value):
            return None
        return Decimal(str(value))
    text = str(value).strip()
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]
    text = _CURRENCY_CODE.sub("", _AMOUNT_DECOR.sub("", text))
    if not text:
        return None
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return None
    if not parsed.is_finite():
        return None
    return -parsed if negative else parsed


def normalize_amount(value: Any) -> Optional[Decimal]:
    """Absolute amount used as a match key; sign is flow direction, not identity."""
    parsed = signed_amount(value)
    return abs(parsed) if parsed is not None else None


def normalize_date(value: Any, dayfirst: bool = True) -> Optional[date]:
    if _is_missing(value):
        return None
    if isinstance(value, datetime):  # includes pd.Timestamp
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    m = _DOTNET_DATE.match(text)
    if m:
        try:
            return datetime.fromtimestamp(int(m.group(1)) / 1000, tz=timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            return None

    m = _ISO_DATE.match(text)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None

    m = _DMY_DATE.match(text)
    if m:
        first, second, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
        day, month = (first, second) if dayfirst else (second, first)
        try:
            return date(year, month, day)
        except ValueError:
            return None

    # pandas reads "now"/"today" as the clock
    if not _HAS_DIGIT.search(text):
        return None
    parsed = pd.to_datetime(text, errors="coerce", dayfirst=dayfirst)
    if pd.isna(parsed):
        return None
    return parsed.date()


def is_credit_note(record) -> bool:
    """Credit notes carry a CREDIT document type (ACCRECCREDIT, ACCPAYCREDIT) or a negative amount."""
    if record.document_type and "CREDIT" in str(record.document_type).upper():
        return True
    amount = signed_amount(record.amount)
    return amount is not None and amount < 0


@dataclass(frozen=True)
class NormalizedRecord:
    """Match keys of one record, computed once per run. `slot` is the input position."""
    slot: int
    record: Any
    primary_key: Optional[str]
    secondary_key: Optional[str]
    name_tokens: FrozenSet[str]
    amount: Optional[Decimal]
    issue_date: Optional[date]
    due_date: Optional[date]


def normalize_record(slot: int, record, dayfirst: bool = True) -> NormalizedRecord:
    return NormalizedRecord(
        slot=slot,
        record=record,
        primary_key=normalize_key(record.primary_key),
        secondary_key=normalize_key(record.secondary_key),
        name_tokens=name_tokens(record.counterparty_name),
        amount=normalize_amount(record.amount),
        issue_date=normalize_date(record.issue_date, dayfirst=dayfirst),
        due_date=normalize_date(record.due_date, dayfirst=dayfirst),
    )
