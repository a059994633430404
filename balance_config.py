
"""Game configuration: defaults, the GameConfig structure and validation"""
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

CONFIG = {
    "CELL_SIZE": 30,
    "BOARD_COLS": 10,
    "BOARD_ROWS": 20,
    "NORMAL_DROP_MS": 500,
    "FAST_DROP_MS": 50,
    "BALANCE_BAND": (40, 60),
    "OVERDRAFT_FRACTION": 0.6,
    "EXCESS_FRACTION": 0.4,
    "GRACE_PERIOD_BLOCKS": 3,
    "WARNING_DURATION_MS": 20000,
    "START_BALANCE": 50,
    # presentation only
    "DAS_MS": 170,
    "ARR_MS": 60,
    "FPS": 60,
    "SEED": None,
}


class ConfigError(ValueError):
    """Raised when a configuration cannot produce a playable board."""


# camelCase names accepted by GameConfig.from_dict
ALIASES = {
    "boardCols": "board_cols",
    "boardRows": "board_rows",
    "cellSize": "cell_size",
    "normalDropMs": "normal_drop_ms",
    "fastDropMs": "fast_drop_ms",
    "balanceBand": "balance_band",
    "overdraftFraction": "overdraft_fraction",
    "excessFraction": "excess_fraction",
    "gracePeriodBlocks": "grace_period_blocks",
    "warningDurationMs": "warning_duration_ms",
    "startBalance": "start_balance",
}


@dataclass(frozen=True)
class GameConfig:
    board_cols: int = CONFIG["BOARD_COLS"]
    board_rows: int = CONFIG["BOARD_ROWS"]
    cell_size: int = CONFIG["CELL_SIZE"]
    normal_drop_ms: int = CONFIG["NORMAL_DROP_MS"]
    fast_drop_ms: int = CONFIG["FAST_DROP_MS"]
    # set => percentage balance rules, None => zone/timer rules
    balance_band: Optional[Tuple[float, float]] = CONFIG["BALANCE_BAND"]
    overdraft_fraction: float = CONFIG["OVERDRAFT_FRACTION"]
    excess_fraction: float = CONFIG["EXCESS_FRACTION"]
    grace_period_blocks: int = CONFIG["GRACE_PERIOD_BLOCKS"]
    warning_duration_ms: int = CONFIG["WARNING_DURATION_MS"]
    start_balance: float = CONFIG["START_BALANCE"]

    @property
    def board_width(self) -> int:
        return self.board_cols * self.cell_size

    @property
    def board_height(self) -> int:
        return self.board_rows * self.cell_size

    @property
    def overdraft_y(self) -> float:
        return self.board_height * self.overdraft_fraction

    @property
    def excess_y(self) -> float:
        return self.board_height * self.excess_fraction

    @property
    def overdraft_row(self) -> int:
        return int(self.overdraft_y // self.cell_size)

    @property
    def is_balance_variant(self) -> bool:
        return self.balance_band is not None

    @classmethod
    def balance_variant(cls, **overrides) -> "GameConfig":
        return replace(cls(), **overrides)

    @classmethod
    def zone_variant(cls, **overrides) -> "GameConfig":
        return replace(cls(balance_band=None), **overrides)

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "GameConfig":
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in options.items():
            name = ALIASES.get(key, key)
            if name not in known:
                raise ConfigError(f"unknown option: {key}")
            if name == "balance_band" and value is not None:
                value = tuple(value)
            kwargs[name] = value
        return cls(**kwargs)

    def validate(self, shapes: Iterable[Sequence[Sequence[int]]] = ()) -> "GameConfig":
        """Check the invariants the board relies on; return self for chaining."""
        for name in ("board_cols", "board_rows", "cell_size", "normal_drop_ms", "fast_drop_ms"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.grace_period_blocks < 0:
            raise ConfigError("grace_period_blocks must not be negative")
        if self.warning_duration_ms < 0:
            raise ConfigError("warning_duration_ms must not be negative")
        if self.balance_band is not None:
            if len(self.balance_band) != 2:
                raise ConfigError("balance_band must be a (low, high) pair")
            lo, hi = self.balance_band
            if not 0 <= lo <= hi <= 100:
                raise ConfigError(f"balance_band out of order: {self.balance_band}")
            if not lo <= self.start_balance <= hi:
                raise ConfigError("start_balance must lie inside balance_band")
        for name in ("overdraft_fraction", "excess_fraction"):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1]")
        if self.excess_fraction > self.overdraft_fraction:
            raise ConfigError("excess line must sit above the overdraft line")
        for shape in shapes:
            h, w = len(shape), len(shape[0])
            if w > self.board_cols or h > self.board_rows:
                raise ConfigError(f"shape {w}x{h} does not fit a {self.board_cols}x{self.board_rows} board")
        return self
