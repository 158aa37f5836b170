# tracker/backtest/metrics.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Tuple

import numpy as np
import pandas as pd
from loguru import logger

from tracker.backtest.model import Counters
from tracker.core.exceptions import InvalidConfigurationError

TRADING_DAYS = 252
# std at or below this fraction of |mean| is float noise from identical returns
_DISPERSION_RTOL = 1e-9


# -------- Data classes --------
@dataclass(frozen=True)
class TradeStats:
    total_trades: int
    win_rate: float
    loss_rate: float
    break_even_rate: float
    net_profit: float
    average_win: float
    average_loss: float
    profit_factor: float
    expected_value: float
    total_profit: float
    total_loss: float


# -------- Internals --------
def _balances(history: Iterable[Any]) -> np.ndarray:
    """Accept HistoryPoint-like objects (``.balance``) or plain numbers."""
    values = [float(getattr(p, "balance", p)) for p in history]
    return np.asarray(values, dtype=float)


def _annualize_returns(
    mean_ret: float, std_ret: float, periods_per_year: int
) -> Tuple[float, float]:
    return mean_ret * periods_per_year, std_ret * math.sqrt(periods_per_year)


def _check_initial_balance(initial_balance: float) -> float:
    initial = float(initial_balance)
    if not initial > 0:
        raise InvalidConfigurationError(
            f"initial_balance must be positive, got {initial_balance!r}"
        )
    return initial


def check_periods_per_year(periods_per_year: int) -> int:
    if (
        isinstance(periods_per_year, bool)
        or not isinstance(periods_per_year, int)
        or periods_per_year <= 0
    ):
        raise InvalidConfigurationError(
            f"periods_per_year must be a positive integer, got {periods_per_year!r}"
        )
    return periods_per_year


# -------- Public API --------
def step_returns(history: Iterable[Any]) -> np.ndarray:
    """
    Simple per-step returns ``(b[i] - b[i-1]) / b[i-1]``.

    A step whose previous balance is zero or negative has no meaningful
    return and contributes ``0.0``; it stays in the sequence so the sample
    size still matches the number of applied outcomes.
    """
    b = _balances(history)
    if b.size < 2:
        return np.zeros(0, dtype=float)
    prev = b[:-1]
    delta = b[1:] - prev
    out = np.zeros_like(delta)
    np.divide(delta, prev, out=out, where=prev > 0)
    if np.any(prev <= 0):
        logger.debug(
            "[metrics] {} step(s) with non-positive prior balance scored as 0 return",
            int(np.sum(prev <= 0)),
        )
    return out


def drawdown_series(history: Iterable[Any], initial_balance: float) -> pd.Series:
    """Drawdown (percent) of every history point against the running peak.

    The peak starts at ``initial_balance`` and only ever rises, so each
    point is measured against the highest balance seen up to and including
    itself. No lookahead.
    """
    initial = _check_initial_balance(initial_balance)
    s = pd.Series(_balances(history), dtype=float)
    if s.empty:
        return pd.Series(dtype=float)
    peak = s.cummax().clip(lower=initial)
    return (peak - s) / peak * 100.0


def max_drawdown_pct(history: Iterable[Any], initial_balance: float) -> float:
    dd = drawdown_series(history, initial_balance)
    if dd.empty:
        return 0.0
    return max(0.0, float(dd.max()))


def max_drawdown_length(history: Iterable[Any], initial_balance: float) -> int:
    """Longest run of consecutive history points below the running peak."""
    dd = drawdown_series(history, initial_balance)
    max_run = run = 0
    for m in (dd > 0).to_numpy():
        if m:
            run += 1
            if run > max_run:
                max_run = run
        else:
            run = 0
    return int(max_run)


def sharpe_ratio(
    history: Iterable[Any], *, periods_per_year: int = TRADING_DAYS
) -> float:
    """
    Annualized mean step return over annualized population std of returns.

    Returns 0.0 with fewer than two history points or zero dispersion.
    """
    check_periods_per_year(periods_per_year)
    rets = step_returns(history)
    if rets.size == 0:
        return 0.0
    mean = float(rets.mean())
    std = float(rets.std(ddof=0))
    if std <= _DISPERSION_RTOL * abs(mean):
        std = 0.0
    ann_mean, ann_std = _annualize_returns(mean, std, periods_per_year)
    sharpe = ann_mean / ann_std if ann_std > 0 else 0.0

    logger.debug(
        "[metrics] n={} mean={:.6f} std={:.6f} ann_mean={:.4f} ann_std={:.4f} sharpe={:.3f}",
        rets.size,
        mean,
        std,
        ann_mean,
        ann_std,
        sharpe,
    )
    return sharpe


def trade_stats(counters: Counters, total_profit: float, total_loss: float) -> TradeStats:
    """Aggregate statistics derived from outcome counters and P/L magnitudes."""
    wins, losses, break_evens = counters.wins, counters.losses, counters.break_evens
    n = counters.total

    win_rate = wins / n * 100 if n > 0 else 0.0
    loss_rate = losses / n * 100 if n > 0 else 0.0
    break_even_rate = break_evens / n * 100 if n > 0 else 0.0
    average_win = total_profit / wins if wins > 0 else 0.0
    average_loss = total_loss / losses if losses > 0 else 0.0
    if total_loss > 0:
        profit_factor = total_profit / total_loss
    elif total_profit > 0:
        profit_factor = math.inf
    else:
        profit_factor = 0.0
    expected_value = (win_rate / 100 * average_win) - (loss_rate / 100 * average_loss)

    return TradeStats(
        total_trades=n,
        win_rate=win_rate,
        loss_rate=loss_rate,
        break_even_rate=break_even_rate,
        net_profit=total_profit - total_loss,
        average_win=average_win,
        average_loss=average_loss,
        profit_factor=profit_factor,
        expected_value=expected_value,
        total_profit=total_profit,
        total_loss=total_loss,
    )


__all__ = [
    "TRADING_DAYS",
    "TradeStats",
    "check_periods_per_year",
    "step_returns",
    "drawdown_series",
    "max_drawdown_pct",
    "max_drawdown_length",
    "sharpe_ratio",
    "trade_stats",
]
