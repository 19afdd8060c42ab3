import pandas as pd

REQUIRED_COLS = ["source_id", "amount"]
OPTIONAL_COLS = ["primary_key", "secondary_key", "counterparty_name",
                 "issue_date", "due_date", "document_type"]
STATUS_COLS = ["status", "approval_status", "is_paid", "is_voided", "is_partially_paid",
               "payment_date", "original_amount", "amount_paid"]


def load_csv(path: str) -> pd.DataFrame:
    # everything as text: identifiers like "00123" must survive, parsing happens in standardize
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns in {path}: {missing}")
    return df
