import pytest
import structlog

from ledger_recon.models import LedgerRecord


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo global structlog configuration done in-process (e.g. by run_recon.main),
    which binds the logger to pytest's per-test captured stderr."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def rec():
    """Build a LedgerRecord with a default id and amount."""
    counter = {"n": 0}

    def _make(source_id=None, **kwargs):
        counter["n"] += 1
        kwargs.setdefault("amount", 100)
        return LedgerRecord(source_id=source_id or f"R{counter['n']}", **kwargs)

    return _make
