from __future__ import annotations

import argparse
import json
import math
import re
import sys
from typing import Any, List, Optional, Sequence

from loguru import logger

from tracker.backtest.model import Outcome, SimulationConfig
from tracker.backtest.session import SimulationSession
from tracker.core.exceptions import InvalidConfigurationError
from tracker.logging_utils import logging_context, setup_logging
from tracker.settings import get_simulation_settings
from tracker.utils.formatting import format_summary

_TOKEN_SPLIT = re.compile(r"[\s,;]+")


def parse_outcomes(raw: str) -> List[Outcome]:
    """Parse ``"W,L,B"``, ``"win loss be"`` or a compact ``"WWLB"`` string."""
    tokens = [t for t in _TOKEN_SPLIT.split(raw.strip()) if t]
    if len(tokens) == 1 and re.fullmatch(r"[WwLlBb]+", tokens[0]):
        tokens = list(tokens[0])
    return [Outcome.parse(t) for t in tokens]


def _json_safe(value: Any) -> Any:
    # inf/nan are not valid JSON numbers
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    return value


def run(
    outcomes: Sequence[Outcome | str],
    *,
    initial_balance: Optional[float] = None,
    risk_pct: Optional[float] = None,
    reward_pct: Optional[float] = None,
    periods_per_year: Optional[int] = None,
) -> SimulationSession:
    defaults = get_simulation_settings()
    config = SimulationConfig(
        initial_balance=defaults.initial_balance if initial_balance is None else initial_balance,
        risk_pct=defaults.risk_pct if risk_pct is None else risk_pct,
        reward_pct=defaults.reward_pct if reward_pct is None else reward_pct,
    )
    session = SimulationSession(
        config,
        periods_per_year=(
            defaults.periods_per_year if periods_per_year is None else periods_per_year
        ),
    )
    session.apply_many(outcomes)
    logger.debug(
        "[tracker] replayed n={} balance={:.2f} dd={:.2f}% sharpe={:.2f}",
        session.counters.total,
        session.current_balance,
        session.max_drawdown_pct,
        session.sharpe_ratio,
    )
    return session


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Replay a sequence of trade outcomes through a fixed risk/reward model"
    )
    ap.add_argument(
        "--outcomes",
        required=True,
        help='Outcome sequence, e.g. "W,L,B", "win loss be" or "WWLB"',
    )
    ap.add_argument("--initial-balance", type=float, default=None)
    ap.add_argument("--risk", type=float, default=None, help="Risk percent per loss")
    ap.add_argument("--reward", type=float, default=None, help="Reward percent per win")
    ap.add_argument("--periods-per-year", type=int, default=None)
    ap.add_argument("--json", action="store_true", help="Emit full-precision JSON")
    ap.add_argument("--log-level", default=None)
    args = ap.parse_args(argv)

    setup_logging(level=args.log_level or "WARNING")

    with logging_context(request_id="cli"):
        try:
            session = run(
                parse_outcomes(args.outcomes),
                initial_balance=args.initial_balance,
                risk_pct=args.risk,
                reward_pct=args.reward,
                periods_per_year=args.periods_per_year,
            )
        except InvalidConfigurationError as exc:
            ap.error(str(exc))

    payload = session.snapshot().as_dict()
    if args.json:
        print(json.dumps(_json_safe(payload), indent=2))
    else:
        print(format_summary(payload))
    return 0


if __name__ == "__main__":
    sys.exit(main())
