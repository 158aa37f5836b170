# tracker/utils/formatting.py
"""Display helpers. Two-decimal rounding happens here and nowhere else."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Tuple

_MISSING = "n/a"


def _fixed(x: float) -> str:
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    return f"{x:.2f}"


def fmt_money(x) -> str:
    try:
        value = float(x)
    except (TypeError, ValueError):
        return _MISSING
    if not math.isfinite(value):
        return _fixed(value)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def fmt_pct(x) -> str:
    try:
        return f"{_fixed(float(x))}%"
    except (TypeError, ValueError):
        return _MISSING


def fmt_ratio(x) -> str:
    try:
        return _fixed(float(x))
    except (TypeError, ValueError):
        return _MISSING


def summary_rows(snapshot: Dict[str, Any]) -> List[Tuple[str, str]]:
    """Label/value pairs for a ``SessionSnapshot.as_dict()`` payload."""
    stats = snapshot["stats"]
    counters = snapshot["counters"]
    return [
        ("R:R Ratio", fmt_ratio(snapshot["rr_ratio"])),
        ("Current Balance", fmt_money(snapshot["current_balance"])),
        ("Wins", str(counters["wins"])),
        ("Losses", str(counters["losses"])),
        ("Break Even", str(counters["break_evens"])),
        ("Win Rate", fmt_pct(stats["win_rate"])),
        ("Loss Rate", fmt_pct(stats["loss_rate"])),
        ("Break Even Rate", fmt_pct(stats["break_even_rate"])),
        ("Net Profit", fmt_money(stats["net_profit"])),
        ("Avg Win", fmt_money(stats["average_win"])),
        ("Avg Loss", fmt_money(stats["average_loss"])),
        ("Profit Factor", fmt_ratio(stats["profit_factor"])),
        ("Expected Value", fmt_money(stats["expected_value"])),
        ("Total Profit", fmt_money(stats["total_profit"])),
        ("Total Loss", fmt_money(stats["total_loss"])),
        ("Max Drawdown", fmt_pct(snapshot["max_drawdown_pct"])),
        ("Sharpe Ratio", fmt_ratio(snapshot["sharpe_ratio"])),
    ]


def format_summary(snapshot: Dict[str, Any]) -> str:
    rows = summary_rows(snapshot)
    width = max(len(label) for label, _ in rows)
    return "\n".join(f"{label:<{width}}  {value}" for label, value in rows)


__all__ = ["fmt_money", "fmt_pct", "fmt_ratio", "summary_rows", "format_summary"]
