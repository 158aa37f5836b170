from __future__ import annotations

from tracker.utils import env


def test_get_str_defaults_on_empty(monkeypatch):
    monkeypatch.setenv("TRACKER_X", "")
    assert env.get_str("TRACKER_X", "fallback") == "fallback"
    monkeypatch.setenv("TRACKER_X", "set")
    assert env.get_str("TRACKER_X", "fallback") == "set"


def test_get_log_level_upper(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert env.get_log_level() == "DEBUG"
    monkeypatch.delenv("LOG_LEVEL")
    assert env.get_log_level("warning") == "WARNING"
