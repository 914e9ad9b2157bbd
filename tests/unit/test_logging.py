#
# tests/unit/test_logging.py
#
"""
Tests for structlog setup.
"""

import json
import logging
import sys
from pathlib import Path

import structlog

from tapstream.telemetry import setup_logging


class TestSetupLogging:
    """setup_logging() installs a stderr console handler and an optional JSON file."""

    def test_console_handler_writes_to_stderr(self) -> None:
        setup_logging(level=logging.DEBUG)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        (handler,) = root.handlers
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr

    def test_repeated_setup_replaces_handlers(self) -> None:
        setup_logging()
        setup_logging(level=logging.ERROR)

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.ERROR

    def test_log_file_receives_json(self, tmp_path: Path) -> None:
        log_file = tmp_path / "tapstream.log"
        setup_logging(level=logging.INFO, log_file=str(log_file))

        structlog.get_logger("tests.logging").info("Line streamed", pid=42)
        for handler in logging.getLogger().handlers:
            handler.flush()

        records = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert any(record.get("event", "").endswith("Line streamed") and record.get("pid") == 42 for record in records)
