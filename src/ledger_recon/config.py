from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional


class ConfigError(ValueError):
    """Raised when matching options are out of range."""


def _as_decimal(value, name: str) -> Decimal:
    try:
        parsed = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    if not parsed.is_finite():
        raise ConfigError(f"{name} must be finite, got {value!r}")
    return parsed


@dataclass(frozen=True)
class MatchConfig:
    amount_tolerance: Decimal = Decimal("0.01")    # absolute amount tolerance
    date_tolerance_days: int = 3                   # allowed issue/due date difference
    fuzzy_threshold: float = 0.8                   # phase 3 score must be strictly above this
    relative_amount_tolerance: Optional[Decimal] = None  # fraction of the larger amount
    workers: int = 1                               # threads for phase 3 scoring

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "amount_tolerance",
                           _as_decimal(self.amount_tolerance, "amount_tolerance"))
        if self.relative_amount_tolerance is not None:
            object.__setattr__(self, "relative_amount_tolerance",
                               _as_decimal(self.relative_amount_tolerance, "relative_amount_tolerance"))

        if self.amount_tolerance < 0:
            raise ConfigError(f"amount_tolerance must be >= 0, got {self.amount_tolerance}")
        if self.relative_amount_tolerance is not None and self.relative_amount_tolerance < 0:
            raise ConfigError(
                f"relative_amount_tolerance must be >= 0, got {self.relative_amount_tolerance}")
        if isinstance(self.date_tolerance_days, bool) or not isinstance(self.date_tolerance_days, int):
            raise ConfigError(f"date_tolerance_days must be an integer, got {self.date_tolerance_days!r}")
        if self.date_tolerance_days < 0:
            raise ConfigError(f"date_tolerance_days must be >= 0, got {self.date_tolerance_days}")
        try:
            threshold = float(self.fuzzy_threshold)
        except (TypeError, ValueError):
            raise ConfigError(f"fuzzy_threshold must be a number, got {self.fuzzy_threshold!r}")
        if not 0.0 <= threshold <= 1.0:
            raise ConfigError(f"fuzzy_threshold must be within [0, 1], got {self.fuzzy_threshold}")
        object.__setattr__(self, "fuzzy_threshold", threshold)
        if isinstance(self.workers, bool) or not isinstance(self.workers, int) or self.workers < 1:
            raise ConfigError(f"workers must be a positive integer, got {self.workers!r}")

    def amount_tolerance_for(self, a: Decimal, b: Decimal) -> Decimal:
        """Effective tolerance for a pair of (absolute) amounts."""
        if self.relative_amount_tolerance is None:
            return self.amount_tolerance
        return max(self.amount_tolerance, self.relative_amount_tolerance * max(a, b))


@dataclass(frozen=True)
class RunConfig:
    left_path: str = "data/raw/left.csv"
    right_path: str = "data/raw/right.csv"
    history_path: Optional[str] = None
    rules_path: str = "config/recon_config.json"
    outputs_dir: str = "outputs"
    top_k_suggestions: int = 3
