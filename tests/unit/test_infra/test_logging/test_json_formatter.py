"""Unit tests for JSON log formatting and logging setup."""
from __future__ import annotations

import json
import logging
import sys

import pytest

from push_service.infra.logging import JSONFormatter, configure_logging, shutdown
from push_service.infra.logging import config as logging_config


def make_record(msg: str = "Multicast finished", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="push_service.infra.push.multicast",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
class TestJSONFormatter:
    """Test suite for JSONFormatter."""

    def test_basic_fields(self):
        formatter = JSONFormatter(static={"service": "push-service"})
        data = json.loads(formatter.format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "push_service.infra.push.multicast"
        assert data["message"] == "Multicast finished"
        assert data["service"] == "push-service"
        assert data["timestamp"].endswith("Z")

    def test_extra_fields(self):
        formatter = JSONFormatter()
        data = json.loads(formatter.format(make_record(multicast_id=100, success=3)))

        assert data["multicast_id"] == 100
        assert data["success"] == 3
        assert "msg" not in data

    def test_message_args_interpolated(self):
        record = make_record("Sent %d messages")
        record.args = (3,)
        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "Sent 3 messages"

    def test_exception_on_one_line(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        output = JSONFormatter().format(record)

        assert "\n" not in output
        assert "ValueError: boom" in json.loads(output)["exception"]

    def test_non_serializable_extra(self):
        data = json.loads(JSONFormatter().format(make_record(path=object())))
        assert data["path"].startswith("<object object")


@pytest.mark.unit
class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_queue_handler_installed(self, tmp_path):
        log_file = tmp_path / "logs" / "push.jsonl"
        try:
            configure_logging(
                log_level="DEBUG",
                file_path=log_file,
                console_enabled=False,
                capture_warnings=False,
            )
            logging.getLogger("push_service.test").info("hello", extra={"attempt": 2})
            shutdown()

            lines = log_file.read_text(encoding="utf-8").splitlines()
            record = json.loads(lines[-1])
            assert record["message"] == "hello"
            assert record["attempt"] == 2
        finally:
            shutdown()

    def test_shutdown_is_idempotent(self):
        shutdown()
        shutdown()
        assert logging_config._listener is None
