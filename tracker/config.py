from __future__ import annotations

from dataclasses import dataclass, field

from tracker import APP_VERSION
from tracker.utils.env import get_log_level, get_str


@dataclass(frozen=True)
class Settings:
    """
    Process-level settings.

    Attributes:
        VERSION (str): The package/build version stamped into log records.
        environment (str): Deployment label (``ENV``), e.g. ``local`` or ``test``.
        log_level (str): Default log level (``LOG_LEVEL``).
    """

    VERSION: str = APP_VERSION
    environment: str = field(default_factory=lambda: get_str("ENV", "local"))
    log_level: str = field(default_factory=get_log_level)


settings = Settings()

__all__ = ["settings", "Settings"]
