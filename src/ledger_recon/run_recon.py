import argparse
import json
import os
from typing import List, Optional

import pandas as pd

from ledger_recon.config import ConfigError, RunConfig
from ledger_recon.ingest import load_csv
from ledger_recon.insights import historical_insights
from ledger_recon.logging_config import configure_logging
from ledger_recon.reconcile import reconcile
from ledger_recon.report import write_outputs
from ledger_recon.rules import load_rules
from ledger_recon.standardize import standardize
from ledger_recon.suggest import build_suggestions


def parse_args(argv: Optional[List[str]] = None) -> RunConfig:
    defaults = RunConfig()
    p = argparse.ArgumentParser(prog="ledger-recon",
                                description="Reconcile two canonical ledger CSV files.")
    p.add_argument("--left", default=defaults.left_path, help="driving ledger CSV")
    p.add_argument("--right", default=defaults.right_path, help="counterparty ledger CSV")
    p.add_argument("--history", default=defaults.history_path,
                   help="optional historical ledger CSV used to explain unmatched right-side rows")
    p.add_argument("--rules", default=defaults.rules_path, help="matching rules JSON")
    p.add_argument("--out", default=defaults.outputs_dir, help="output directory")
    p.add_argument("--top-k", type=int, default=None, help="suggestions per unmatched left row")
    p.add_argument("--log-level", default="INFO")
    p.add_argument("--json-logs", action="store_true")
    args = p.parse_args(argv)

    configure_logging(args.log_level, json_logs=args.json_logs)

    top_k = args.top_k
    if top_k is None:
        top_k = _rules_top_k(args.rules, defaults.top_k_suggestions)
    return RunConfig(
        left_path=args.left,
        right_path=args.right,
        history_path=args.history,
        rules_path=args.rules,
        outputs_dir=args.out,
        top_k_suggestions=top_k,
    )


def _rules_top_k(path: str, default: int) -> int:
    with open(path, "r") as f:
        return int(json.load(f).get("top_k_suggestions", default))


def main(argv: Optional[List[str]] = None) -> int:
    cfg = parse_args(argv)
    try:
        rules = load_rules(cfg.rules_path)
    except ConfigError as e:
        print(f"Invalid rules in {cfg.rules_path}: {e}")
        return 2

    left, ex_l = standardize(load_csv(cfg.left_path), "left")
    right, ex_r = standardize(load_csv(cfg.right_path), "right")
    exceptions = pd.concat([ex_l, ex_r], ignore_index=True)

    result = reconcile(left, right, rules)

    suggestions = build_suggestions(result.unmatched_left, result.unmatched_right,
                                    rules, top_k=cfg.top_k_suggestions)

    insights = []
    if cfg.history_path:
        history, _ = standardize(load_csv(cfg.history_path), "history")
        insights = historical_insights(result.unmatched_right, history)

    write_outputs(cfg.outputs_dir, result, exceptions=exceptions,
                  suggestions=suggestions, insights=insights)

    s = result.summary
    print(f"Wrote outputs to {cfg.outputs_dir}{os.sep}")
    print(f"Matched: {s.matched} | Unmatched left: {s.unmatched_left} | "
          f"Unmatched right: {s.unmatched_right} | Exceptions: {len(exceptions)}")
    print(f"Match rate: {s.match_rate:.1%} | Approval rate: {s.approval_rate:.1%} | "
          f"Discrepancy rate: {s.discrepancy_rate:.1%}")
    print("Match breakdown:", s.by_method)
    print("Categories:", s.by_category)
    if insights:
        print(f"Historical insights: {len(insights)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
