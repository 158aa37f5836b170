from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Tuple

from tracker.core.exceptions import InvalidConfigurationError

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from tracker.backtest.metrics import TradeStats


class Outcome(str, Enum):
    """A single simulated trade result."""

    WIN = "win"
    LOSS = "loss"
    BREAK_EVEN = "break_even"

    @classmethod
    def parse(cls, token: str) -> "Outcome":
        key = str(token).strip().lower().replace("-", "_")
        try:
            return _OUTCOME_ALIASES[key]
        except KeyError:
            raise InvalidConfigurationError(f"unknown outcome: {token!r}") from None


_OUTCOME_ALIASES: Dict[str, Outcome] = {
    "w": Outcome.WIN,
    "win": Outcome.WIN,
    "l": Outcome.LOSS,
    "loss": Outcome.LOSS,
    "b": Outcome.BREAK_EVEN,
    "be": Outcome.BREAK_EVEN,
    "breakeven": Outcome.BREAK_EVEN,
    "break_even": Outcome.BREAK_EVEN,
}


@dataclass(frozen=True)
class SimulationConfig:
    """
    Fixed risk/reward model for a session.

    Attributes:
        initial_balance (float): Starting balance; must be positive.
        risk_pct (float): Percent of the current balance lost on a loss.
        reward_pct (float): Percent of the current balance gained on a win.
    """

    initial_balance: float = 10_000.0
    risk_pct: float = 1.0
    reward_pct: float = 2.0

    def validate(self) -> "SimulationConfig":
        if not math.isfinite(self.initial_balance) or self.initial_balance <= 0:
            raise InvalidConfigurationError(
                f"initial_balance must be a positive number, got {self.initial_balance!r}"
            )
        for name in ("risk_pct", "reward_pct"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidConfigurationError(
                    f"{name} must be a non-negative number, got {value!r}"
                )
        return self

    @property
    def rr_ratio(self) -> float:
        """reward/risk; ``inf`` (or ``nan`` when both are zero) if risk is zero."""
        if self.risk_pct == 0:
            return math.inf if self.reward_pct > 0 else math.nan
        return self.reward_pct / self.risk_pct


@dataclass(frozen=True)
class HistoryPoint:
    step: int
    balance: float


@dataclass(frozen=True)
class Counters:
    wins: int = 0
    losses: int = 0
    break_evens: int = 0

    @property
    def total(self) -> int:
        return self.wins + self.losses + self.break_evens


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session handed to presentation layers."""

    config: SimulationConfig
    current_balance: float
    counters: Counters
    total_profit: float
    total_loss: float
    history: Tuple[HistoryPoint, ...]
    max_drawdown_pct: float
    sharpe_ratio: float
    stats: TradeStats

    @property
    def rr_ratio(self) -> float:
        return self.config.rr_ratio

    def as_dict(self) -> Dict[str, Any]:
        return {
            "config": asdict(self.config),
            "rr_ratio": self.rr_ratio,
            "current_balance": self.current_balance,
            "counters": asdict(self.counters),
            "total_profit": self.total_profit,
            "total_loss": self.total_loss,
            "history": [asdict(p) for p in self.history],
            "max_drawdown_pct": self.max_drawdown_pct,
            "sharpe_ratio": self.sharpe_ratio,
            "stats": asdict(self.stats),
        }


__all__ = [
    "Outcome",
    "SimulationConfig",
    "HistoryPoint",
    "Counters",
    "SessionSnapshot",
]
