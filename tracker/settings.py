"""Simulation defaults powered by Pydantic.

Environment matrix:

| Section    | Environment Variable         | Default  | Purpose                                    |
|------------|------------------------------|----------|--------------------------------------------|
| Simulation | `TRACKER_INITIAL_BALANCE`    | `10000`  | Starting balance for a fresh session       |
| Simulation | `TRACKER_RISK_PCT`           | `1`      | Percent of current balance lost on a loss  |
| Simulation | `TRACKER_REWARD_PCT`         | `2`      | Percent of current balance gained on a win |
| Simulation | `TRACKER_PERIODS_PER_YEAR`   | `252`    | Annualization factor for the Sharpe ratio  |

Values are read from the environment (and `.env`, loaded by the package) at
instantiation time and are intended to be treated as read-only. Malformed
numbers fall back to the defaults rather than failing the import; range
checks belong to ``SimulationConfig.validate``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_INITIAL_BALANCE = 10_000.0
DEFAULT_RISK_PCT = 1.0
DEFAULT_REWARD_PCT = 2.0
DEFAULT_PERIODS_PER_YEAR = 252


class _SettingsBase(BaseSettings):
    """Common configuration for BaseSettings subclasses."""

    model_config = SettingsConfigDict(
        env_prefix="",
        populate_by_name=True,
        extra="ignore",
        case_sensitive=True,
        frozen=True,
    )


def _coerce_float(value: float | str | None, default: float) -> float:
    if value in (None, ""):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class SimulationSettings(_SettingsBase):
    """Default configuration applied when a session is created without one."""

    initial_balance: float = Field(
        default=DEFAULT_INITIAL_BALANCE, alias="TRACKER_INITIAL_BALANCE"
    )
    risk_pct: float = Field(default=DEFAULT_RISK_PCT, alias="TRACKER_RISK_PCT")
    reward_pct: float = Field(default=DEFAULT_REWARD_PCT, alias="TRACKER_REWARD_PCT")
    periods_per_year: int = Field(
        default=DEFAULT_PERIODS_PER_YEAR, alias="TRACKER_PERIODS_PER_YEAR"
    )

    @field_validator("initial_balance", mode="before")
    @classmethod
    def _coerce_initial_balance(cls, value: float | str | None) -> float:
        return _coerce_float(value, DEFAULT_INITIAL_BALANCE)

    @field_validator("risk_pct", mode="before")
    @classmethod
    def _coerce_risk(cls, value: float | str | None) -> float:
        return _coerce_float(value, DEFAULT_RISK_PCT)

    @field_validator("reward_pct", mode="before")
    @classmethod
    def _coerce_reward(cls, value: float | str | None) -> float:
        return _coerce_float(value, DEFAULT_REWARD_PCT)

    @field_validator("periods_per_year", mode="before")
    @classmethod
    def _coerce_periods(cls, value: int | str | None) -> int:
        if value in (None, ""):
            return DEFAULT_PERIODS_PER_YEAR
        try:
            periods = int(value)
        except (TypeError, ValueError):
            return DEFAULT_PERIODS_PER_YEAR
        return periods if periods > 0 else DEFAULT_PERIODS_PER_YEAR


class Settings(BaseModel):
    """Aggregate accessor for domain-specific settings."""

    simulation: SimulationSettings = Field(default_factory=SimulationSettings)

    model_config = {
        "frozen": True,
    }


def get_settings() -> Settings:
    """Instantiate settings from the current environment."""
    return Settings()


def reload_settings() -> Settings:
    """Alias for get_settings to maintain a consistent API."""
    return get_settings()


def get_simulation_settings() -> SimulationSettings:
    return get_settings().simulation


__all__ = [
    "Settings",
    "SimulationSettings",
    "get_settings",
    "reload_settings",
    "get_simulation_settings",
    "DEFAULT_INITIAL_BALANCE",
    "DEFAULT_RISK_PCT",
    "DEFAULT_REWARD_PCT",
    "DEFAULT_PERIODS_PER_YEAR",
]
