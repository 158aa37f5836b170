class TrackerError(Exception):
    """Base class for all backtest tracker exceptions."""


class ConfigError(TrackerError):
    """Raised for missing/malformed configuration."""


class InvalidConfigurationError(ConfigError, ValueError):
    """Raised when a simulation configuration or outcome is rejected."""


__all__ = [
    "TrackerError",
    "ConfigError",
    "InvalidConfigurationError",
]
