from __future__ import annotations

import os

import pytest

from tracker.backtest.model import SimulationConfig
from tracker.backtest.session import SimulationSession
from tracker.logging_utils import setup_test_logging

os.environ.setdefault("ENV", "test")


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    setup_test_logging(level=os.getenv("PYTEST_LOGLEVEL", "INFO"))
    yield


@pytest.fixture
def session() -> SimulationSession:
    """Session on the 10,000 / 1% risk / 2% reward model."""
    return SimulationSession(
        SimulationConfig(initial_balance=10_000.0, risk_pct=1.0, reward_pct=2.0),
        periods_per_year=252,
    )
