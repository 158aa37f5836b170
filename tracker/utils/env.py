from __future__ import annotations

import os

# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------


def get_str(name: str, default: str = "") -> str:
    """Return env var as a string with a sensible default."""
    value = os.getenv(name)
    return value if value not in (None, "") else default


def get_log_level(default: str = "INFO") -> str:
    return (get_str("LOG_LEVEL", default) or default).upper()


__all__ = ["get_str", "get_log_level"]
