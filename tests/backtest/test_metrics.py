from __future__ import annotations

import math

import numpy as np
import pytest

from tracker.backtest import metrics
from tracker.backtest.model import Counters, HistoryPoint
from tracker.core.exceptions import InvalidConfigurationError


def _history(values):
    return [HistoryPoint(i, float(v)) for i, v in enumerate(values)]


# -------- drawdown --------
def test_max_drawdown_single_point_is_zero():
    assert metrics.max_drawdown_pct(_history([10_000.0]), 10_000.0) == 0.0


def test_max_drawdown_empty_history_is_zero():
    assert metrics.max_drawdown_pct([], 10_000.0) == 0.0


def test_max_drawdown_two_losses_then_win():
    hist = _history([10_000.0, 9_900.0, 9_801.0, 9_997.02])

    result = metrics.max_drawdown_pct(hist, 10_000.0)

    assert result == pytest.approx((10_000.0 - 9_801.0) / 10_000.0 * 100)


def test_max_drawdown_measured_against_prior_peak_only():
    # the later, higher peak must not rescale the earlier dip
    hist = _history([100.0, 90.0, 200.0, 190.0])

    assert metrics.max_drawdown_pct(hist, 100.0) == pytest.approx(10.0)


def test_max_drawdown_peak_starts_at_initial_balance():
    # plain balances are accepted too; first point below the initial balance counts
    assert metrics.max_drawdown_pct([80.0, 90.0], 100.0) == pytest.approx(20.0)


def test_max_drawdown_does_not_decrease_when_lower_trough_appended():
    hist = _history([100.0, 95.0, 97.0])
    before = metrics.max_drawdown_pct(hist, 100.0)

    hist.append(HistoryPoint(len(hist), 90.0))
    after = metrics.max_drawdown_pct(hist, 100.0)

    assert after >= before
    assert after == pytest.approx(10.0)


def test_drawdown_series_and_length():
    hist = _history([100.0, 90.0, 95.0, 110.0, 100.0])

    dd = metrics.drawdown_series(hist, 100.0)

    assert dd.tolist() == pytest.approx([0.0, 10.0, 5.0, 0.0, 100.0 / 11.0])
    assert metrics.max_drawdown_length(hist, 100.0) == 2


def test_drawdown_rejects_non_positive_initial_balance():
    with pytest.raises(InvalidConfigurationError):
        metrics.max_drawdown_pct(_history([1.0]), 0.0)


# -------- returns / sharpe --------
def test_step_returns_simple_returns():
    rets = metrics.step_returns(_history([100.0, 110.0, 99.0]))

    np.testing.assert_allclose(rets, [0.10, -0.10])


def test_step_returns_zero_or_negative_prior_balance_scores_zero():
    rets = metrics.step_returns([100.0, 0.0, 5.0, -10.0, -20.0])

    assert rets.shape == (4,)
    assert rets[0] == pytest.approx(-1.0)
    assert rets[1] == 0.0
    assert rets[2] == pytest.approx(-3.0)
    assert rets[3] == 0.0
    assert np.all(np.isfinite(rets))


def test_sharpe_needs_two_points():
    assert metrics.sharpe_ratio(_history([100.0])) == 0.0
    assert metrics.sharpe_ratio([]) == 0.0


def test_sharpe_zero_dispersion_is_zero():
    assert metrics.sharpe_ratio(_history([100.0, 100.0, 100.0])) == 0.0


def test_sharpe_identical_compounded_returns_count_as_zero_dispersion():
    # 2% wins compounded: equal returns up to float rounding
    balances = [10_000.0 * 1.02**i for i in range(6)]

    assert metrics.sharpe_ratio(_history(balances)) == 0.0
    assert metrics.sharpe_ratio(_history([b * 0.99 for b in balances[::-1]])) == 0.0


@pytest.mark.parametrize("periods", [0, -5, 2.5, True])
def test_sharpe_rejects_invalid_periods_per_year(periods):
    with pytest.raises(InvalidConfigurationError, match="periods_per_year"):
        metrics.sharpe_ratio(_history([100.0, 101.0]), periods_per_year=periods)


def test_sharpe_matches_population_std_annualization():
    balances = [100.0, 102.0, 100.98, 100.98]
    rets = np.array(
        [(balances[i] - balances[i - 1]) / balances[i - 1] for i in range(1, 4)]
    )
    expected = (rets.mean() * 252) / (rets.std(ddof=0) * math.sqrt(252))

    assert metrics.sharpe_ratio(_history(balances)) == pytest.approx(expected)


def test_sharpe_respects_periods_per_year():
    hist = _history([100.0, 102.0, 100.98])
    daily = metrics.sharpe_ratio(hist, periods_per_year=252)
    weekly = metrics.sharpe_ratio(hist, periods_per_year=52)

    assert weekly == pytest.approx(daily * math.sqrt(52 / 252))


# -------- trade stats --------
def test_trade_stats_no_trades_is_all_zero():
    stats = metrics.trade_stats(Counters(), 0.0, 0.0)

    assert stats.total_trades == 0
    assert stats.win_rate == stats.loss_rate == stats.break_even_rate == 0.0
    assert stats.profit_factor == 0.0
    assert stats.expected_value == 0.0
    assert stats.average_win == stats.average_loss == 0.0


def test_trade_stats_all_wins_profit_factor_is_infinite():
    stats = metrics.trade_stats(Counters(wins=3), 612.08, 0.0)

    assert math.isinf(stats.profit_factor) and stats.profit_factor > 0
    assert stats.win_rate == pytest.approx(100.0)
    assert stats.average_win == pytest.approx(612.08 / 3)


def test_trade_stats_mixed():
    stats = metrics.trade_stats(Counters(wins=2, losses=1, break_evens=1), 400.0, 100.0)

    assert stats.total_trades == 4
    assert stats.win_rate == pytest.approx(50.0)
    assert stats.loss_rate == pytest.approx(25.0)
    assert stats.break_even_rate == pytest.approx(25.0)
    assert stats.net_profit == pytest.approx(300.0)
    assert stats.average_win == pytest.approx(200.0)
    assert stats.average_loss == pytest.approx(100.0)
    assert stats.profit_factor == pytest.approx(4.0)
    assert stats.expected_value == pytest.approx(0.5 * 200.0 - 0.25 * 100.0)


def test_trade_stats_losses_only_negative_net_and_ev():
    stats = metrics.trade_stats(Counters(losses=2), 0.0, 199.0)

    assert stats.profit_factor == 0.0
    assert stats.net_profit == pytest.approx(-199.0)
    assert stats.expected_value == pytest.approx(-99.5)
