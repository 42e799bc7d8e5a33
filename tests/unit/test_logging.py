"""Tests for build_metadata logging utilities."""

import json
import logging
import sys

import pytest

from build_metadata.lib.observability import JSONFormatter, setup_logging


def _record(msg="Test message", args=(), level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="build_metadata.lib.metadata",
        level=level,
        pathname="/test/file.py",
        lineno=42,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


class TestJSONFormatter:
    """Tests for JSONFormatter class."""

    def test_basic_format(self):
        """Should format log record as JSON."""
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "build_metadata.lib.metadata"
        assert data["message"] == "Test message"
        assert data["timestamp"].endswith("Z")

    def test_format_with_args(self):
        """Should format message with arguments."""
        data = json.loads(JSONFormatter().format(_record("Working sha %s", ("abc123",))))
        assert data["message"] == "Working sha abc123"

    def test_format_with_exception(self):
        """Should include exception info."""
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(_record(level=logging.ERROR, exc_info=exc_info)))
        assert "ValueError" in data["exception"]

    def test_format_with_extra(self):
        """Should include extra fields."""
        record = _record()
        record.error = {"error_type": "MissingRunIdentifier"}

        data = json.loads(JSONFormatter().format(record))
        assert data["extra"]["error"]["error_type"] == "MissingRunIdentifier"

    def test_source_location(self):
        """Should include source location."""
        data = json.loads(JSONFormatter().format(_record()))
        assert data["source"]["file"] == "/test/file.py"
        assert data["source"]["line"] == 42


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_default_setup(self, restore_root_logging):
        """Should configure logging with defaults."""
        setup_logging()
        assert restore_root_logging.level == logging.INFO
        assert len(restore_root_logging.handlers) == 1

    def test_verbose_setup(self, restore_root_logging):
        """Should configure debug level when verbose."""
        setup_logging(verbose=True)
        assert restore_root_logging.level == logging.DEBUG

    def test_json_format_setup(self, restore_root_logging):
        """Should use JSON formatter when json_format=True."""
        setup_logging(json_format=True)
        assert isinstance(restore_root_logging.handlers[0].formatter, JSONFormatter)

    def test_log_file(self, restore_root_logging, tmp_path):
        """Should also write to a log file."""
        log_file = tmp_path / "run.log"
        setup_logging(log_file=str(log_file))
        logging.getLogger("build_metadata").info("Working version 1.0.0")
        for handler in restore_root_logging.handlers:
            handler.flush()
        assert "Working version 1.0.0" in log_file.read_text()
