from __future__ import annotations

import threading
from typing import Iterable, List, Optional, Tuple

from loguru import logger

from tracker.backtest import metrics
from tracker.backtest.model import (
    Counters,
    HistoryPoint,
    Outcome,
    SessionSnapshot,
    SimulationConfig,
)
from tracker.core.exceptions import InvalidConfigurationError
from tracker.settings import SimulationSettings, get_simulation_settings


class SimulationSession:
    """
    Running equity curve for a fixed risk/reward model.

    Every win/loss is sized against the *current* balance (compounding), so
    repeated losses with ``risk_pct > 100`` can drive the balance negative.
    Each mutation leaves ``history`` consistent with the counters and then
    recomputes drawdown and Sharpe from the full history. Mutations are
    serialized with a re-entrant lock.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        *,
        periods_per_year: Optional[int] = None,
        settings: Optional[SimulationSettings] = None,
    ) -> None:
        if config is None or periods_per_year is None:
            settings = settings or get_simulation_settings()
        if config is None:
            config = SimulationConfig(
                initial_balance=settings.initial_balance,
                risk_pct=settings.risk_pct,
                reward_pct=settings.reward_pct,
            )
        self._periods_per_year = metrics.check_periods_per_year(
            periods_per_year if periods_per_year is not None else settings.periods_per_year
        )
        self._lock = threading.RLock()
        self._config = self._checked(config)
        self.reset()

    # --- Configuration ---------------------------------------------------
    @staticmethod
    def _checked(config: SimulationConfig) -> SimulationConfig:
        config.validate()
        if config.risk_pct > 100:
            logger.warning(
                "[session] risk_pct={} exceeds 100%; a loss can push the balance below zero",
                config.risk_pct,
            )
        return config

    def configure(self, initial_balance: float, risk_pct: float, reward_pct: float) -> None:
        """Replace the configuration and reset. Invalid input leaves state untouched."""
        try:
            candidate = SimulationConfig(
                initial_balance=float(initial_balance),
                risk_pct=float(risk_pct),
                reward_pct=float(reward_pct),
            )
        except (TypeError, ValueError) as exc:
            raise InvalidConfigurationError(f"non-numeric configuration: {exc}") from exc
        with self._lock:
            self._config = self._checked(candidate)
            logger.info(
                "[session] configured balance={} risk={}% reward={}%",
                candidate.initial_balance,
                candidate.risk_pct,
                candidate.reward_pct,
            )
            self.reset()

    def reset(self) -> None:
        with self._lock:
            initial = self._config.initial_balance
            self._current_balance = initial
            self._wins = 0
            self._losses = 0
            self._break_evens = 0
            self._total_profit = 0.0
            self._total_loss = 0.0
            self._history: List[HistoryPoint] = [HistoryPoint(0, initial)]
            self._max_drawdown_pct = 0.0
            self._sharpe_ratio = 0.0
            logger.debug("[session] reset balance={}", initial)

    # --- Outcomes --------------------------------------------------------
    def apply_win(self) -> None:
        with self._lock:
            profit = self._current_balance * self._config.reward_pct / 100
            self._current_balance += profit
            self._wins += 1
            self._total_profit += abs(profit)
            self._append_and_recompute()

    def apply_loss(self) -> None:
        with self._lock:
            loss = self._current_balance * self._config.risk_pct / 100
            self._current_balance -= loss
            self._losses += 1
            # magnitudes only; the delta flips sign once the balance is negative
            self._total_loss += abs(loss)
            self._append_and_recompute()

    def apply_break_even(self) -> None:
        with self._lock:
            self._break_evens += 1
            self._append_and_recompute()

    def apply(self, outcome: Outcome | str) -> None:
        if not isinstance(outcome, Outcome):
            outcome = Outcome.parse(outcome)
        if outcome is Outcome.WIN:
            self.apply_win()
        elif outcome is Outcome.LOSS:
            self.apply_loss()
        else:
            self.apply_break_even()

    def apply_many(self, outcomes: Iterable[Outcome | str]) -> None:
        """Apply outcomes in order; tokens are parsed up front so a bad one applies nothing."""
        parsed = [o if isinstance(o, Outcome) else Outcome.parse(o) for o in outcomes]
        with self._lock:
            for outcome in parsed:
                self.apply(outcome)

    def _append_and_recompute(self) -> None:
        self._history.append(HistoryPoint(len(self._history), self._current_balance))
        self._recompute()

    def _recompute(self) -> None:
        self._max_drawdown_pct = metrics.max_drawdown_pct(
            self._history, self._config.initial_balance
        )
        self._sharpe_ratio = metrics.sharpe_ratio(
            self._history, periods_per_year=self._periods_per_year
        )
        logger.debug(
            "[session] step={} balance={:.2f} dd={:.4f}% sharpe={:.3f}",
            len(self._history) - 1,
            self._current_balance,
            self._max_drawdown_pct,
            self._sharpe_ratio,
        )

    # --- Read accessors --------------------------------------------------
    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def rr_ratio(self) -> float:
        return self._config.rr_ratio

    @property
    def periods_per_year(self) -> int:
        return self._periods_per_year

    @property
    def current_balance(self) -> float:
        return self._current_balance

    @property
    def counters(self) -> Counters:
        return Counters(self._wins, self._losses, self._break_evens)

    @property
    def total_profit(self) -> float:
        return self._total_profit

    @property
    def total_loss(self) -> float:
        return self._total_loss

    @property
    def history(self) -> Tuple[HistoryPoint, ...]:
        return tuple(self._history)

    @property
    def max_drawdown_pct(self) -> float:
        return self._max_drawdown_pct

    @property
    def sharpe_ratio(self) -> float:
        return self._sharpe_ratio

    @property
    def stats(self) -> metrics.TradeStats:
        return metrics.trade_stats(self.counters, self._total_profit, self._total_loss)

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                config=self._config,
                current_balance=self._current_balance,
                counters=self.counters,
                total_profit=self._total_profit,
                total_loss=self._total_loss,
                history=self.history,
                max_drawdown_pct=self._max_drawdown_pct,
                sharpe_ratio=self._sharpe_ratio,
                stats=self.stats,
            )


__all__ = ["SimulationSession"]
