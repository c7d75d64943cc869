"""Unit tests for the structured logging configuration.

Verifies that ``configure_logging()`` produces well-formed output and that
structlog contextvars bound during a lookup reach stdlib log records.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from io import StringIO

import pytest
import structlog

from snapshot_resolver.core.logging_config import configure_logging


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _capture_log_output(log_level: str, message: str) -> str:
    """Emit a single INFO record and return the raw text the handler wrote.

    Args:
        log_level: Logging level string passed to ``configure_logging``.
        message: Log message to emit.
    """
    configure_logging(log_level)

    buffer = StringIO()
    root = logging.getLogger()
    original_streams = []
    for handler in root.handlers:
        if hasattr(handler, "stream"):
            original_streams.append((handler, handler.stream))
            handler.stream = buffer

    logging.getLogger("test.logging_config").info(message)

    for handler, stream in original_streams:
        handler.flush()
        handler.stream = stream

    return buffer.getvalue()


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


def test_info_level_emits_json() -> None:
    output = _capture_log_output("INFO", "hello snapshot")

    record = json.loads(output.strip().splitlines()[-1])
    assert record["event"] == "hello snapshot"
    assert record["level"] == "info"
    assert record["logger"] == "test.logging_config"
    assert "timestamp" in record


def test_bound_contextvars_are_merged() -> None:
    with structlog.contextvars.bound_contextvars(target_url="http://example.com"):
        output = _capture_log_output("INFO", "lookup")

    record = json.loads(output.strip().splitlines()[-1])
    assert record["target_url"] == "http://example.com"


def test_debug_level_uses_console_renderer() -> None:
    output = _capture_log_output("DEBUG", "dev message")

    assert "dev message" in output
    with pytest.raises(json.JSONDecodeError):
        json.loads(output.strip().splitlines()[-1])


def test_httpx_silenced_outside_debug() -> None:
    configure_logging("INFO")

    assert logging.getLogger("httpx").level == logging.WARNING


def test_configure_logging_is_idempotent() -> None:
    configure_logging("INFO")
    configure_logging("INFO")

    assert len(logging.getLogger().handlers) == 1


def test_records_go_to_stderr_not_stdout(capsys) -> None:
    configure_logging("INFO")
    logging.getLogger("test.logging_config").warning("to stderr")

    captured = capsys.readouterr()
    assert "to stderr" in captured.err
    assert captured.out == ""
