import json
from typing import Any, Dict

from ledger_recon.config import ConfigError, MatchConfig

_DEFAULTS = {
    "amount_tolerance": "0.01",
    "date_tolerance_days": 3,
    "fuzzy_threshold": 0.8,
    "relative_amount_tolerance": None,
    "workers": 1,
}


def load_rules(path: str = "config/recon_config.json") -> MatchConfig:
    with open(path, "r") as f:
        raw: Dict[str, Any] = json.load(f)
    return rules_from_dict(raw)


def rules_from_dict(raw: Dict[str, Any]) -> MatchConfig:
    # values go to MatchConfig untouched so its validation sees what the file says
    if not isinstance(raw, dict):
        raise ConfigError(f"rules must be a JSON object, got {type(raw).__name__}")
    return MatchConfig(**{key: raw.get(key, default) for key, default in _DEFAULTS.items()})
