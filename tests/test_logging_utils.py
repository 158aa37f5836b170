from __future__ import annotations

import logging
from contextlib import contextmanager

import pytest
from loguru import logger

from tracker.config import settings
from tracker.logging_utils import logging_context, setup_logging, setup_test_logging


@pytest.fixture(autouse=True)
def _reset_logging():
    setup_logging(force=True, level="INFO")
    yield
    setup_logging(force=True, level="INFO")


@contextmanager
def capture_records(level=logging.INFO):
    records = []

    class ListHandler(logging.Handler):
        def emit(self, record):
            records.append(record)

    handler = ListHandler()
    handler.setLevel(level)
    root = logging.getLogger()
    prev_level = root.level
    root.setLevel(level)
    root.addHandler(handler)
    try:
        yield records
    finally:
        root.removeHandler(handler)
        root.setLevel(prev_level)


def test_setup_logging_attaches_metadata(monkeypatch):
    monkeypatch.setenv("ENV", "staging")
    monkeypatch.setenv("GIT_SHA", "abc123")

    setup_logging(force=True, level="INFO")

    with capture_records() as records:
        logger.info("hello world")

    record = records[-1]
    assert record.getMessage() == "hello world"
    assert record.environment == "staging"
    assert record.git_sha == "abc123"
    assert record.service_version == settings.VERSION
    assert record.request_id == "-"


def test_logging_context_sets_request_id():
    with capture_records() as records:
        with logging_context(request_id="req-1"):
            logger.info("with request id")

    assert records[-1].request_id == "req-1"


def test_level_filters_debug():
    setup_logging(force=True, level="INFO")

    with capture_records(level=logging.DEBUG) as records:
        logger.debug("hidden")
        logger.warning("shown")

    messages = [r.getMessage() for r in records]
    assert "hidden" not in messages
    assert "shown" in messages


def test_setup_test_logging_writes_file(tmp_path):
    target = setup_test_logging(tmp_path, level="INFO")

    logger.info("to file")
    setup_logging(force=True, level="INFO")  # closes the file sink

    assert target == tmp_path / "pytest.log"
    assert "to file" in target.read_text()
