import json
import os
import subprocess
import sys

LEFT = """source_id,primary_key,secondary_key,counterparty_name,amount,issue_date,status
L1,INV-1,,Acme Corp,100.00,2024-01-01,APPROVED
L2,,PO-9,Globex,50.00,2024-01-03,
L3,,,Initech,75.00,2024-01-05,PENDING_APPROVAL
L4,INV-4,,Hooli,999.00,2024-01-07,
"""

RIGHT = """source_id,primary_key,secondary_key,counterparty_name,amount,issue_date,status
R1,inv-1,,Acme Corp,100.00,2024-01-01,
R2,,PO-9,Globex,55.00,2024-01-03,
R3,,,Initech,75.00,2024-01-06,
R4,INV-8,,Vandelay,12.00,2024-01-09,
"""

HISTORY = """source_id,primary_key,amount,issue_date,status,payment_date
H1,INV-8,12.00,2023-12-01,PAID,2023-12-15
"""


def test_run_recon_smoke(tmp_path):
    (tmp_path / "left.csv").write_text(LEFT)
    (tmp_path / "right.csv").write_text(RIGHT)
    (tmp_path / "history.csv").write_text(HISTORY)
    (tmp_path / "rules.json").write_text(json.dumps({"fuzzy_threshold": 0.8, "top_k_suggestions": 2}))
    out = tmp_path / "outputs"

    result = subprocess.run(
        [sys.executable, "-m", "ledger_recon.run_recon",
         "--left", str(tmp_path / "left.csv"),
         "--right", str(tmp_path / "right.csv"),
         "--history", str(tmp_path / "history.csv"),
         "--rules", str(tmp_path / "rules.json"),
         "--out", str(out)],
        capture_output=True, text=True,
    )
    assert result.returncode == 0, result.stderr

    for name in ("matched.csv", "discrepancies.csv", "unmatched_left.csv", "unmatched_right.csv",
                 "suggestions.csv", "insights.csv", "exceptions.csv", "recon_summary.json"):
        assert os.path.exists(out / name), name

    summary = json.loads((out / "recon_summary.json").read_text())
    assert summary["matched"] == 3
    assert summary["by_method"] == {"IDENTIFIER": 1, "SECONDARY_IDENTIFIER": 1, "FUZZY": 1}
    assert summary["by_category"] == {"APPROVED": 1, "PENDING_APPROVAL": 1, "DISPUTED": 1}
    assert summary["unmatched_left"] == 1
    assert summary["unmatched_right"] == 1
    assert summary["insights"] == 1
    assert "Matched: 3" in result.stdout
