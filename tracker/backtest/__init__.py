"""Outcome-driven equity curve simulation and the metrics derived from it.
Provides the simulation session, pure metric functions, and a replay CLI.
"""

from tracker.backtest.model import (
    Counters,
    HistoryPoint,
    Outcome,
    SessionSnapshot,
    SimulationConfig,
)
from tracker.backtest.session import SimulationSession

__all__ = [
    "Counters",
    "HistoryPoint",
    "Outcome",
    "SessionSnapshot",
    "SimulationConfig",
    "SimulationSession",
]
