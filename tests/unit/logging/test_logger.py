# tests/unit/logging/test_logger.py — v1
"""Tests for logging/logger.py: logger factory and formatters."""

from __future__ import annotations

import json
import logging
import sys

from actioncache.logging.context import action_context, clear_context
from actioncache.logging.logger import JsonFormatter, TextFormatter, get_logger, setup_logging


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record("Hello")))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        with action_context("posts.get", "req-1", "posts.get:5"):
            parsed = json.loads(JsonFormatter().format(_record("hit")))
        assert parsed["context"] == {
            "action": "posts.get",
            "request_id": "req-1",
            "cache_key": "posts.get:5",
        }

    def test_format_with_data(self):
        parsed = json.loads(JsonFormatter().format(_record("stored", data={"ttl": 30})))
        assert parsed["data"] == {"ttl": 30}

    def test_format_with_exception(self):
        try:
            raise RuntimeError("store down")
        except RuntimeError:
            record = logging.LogRecord(
                name="test", level=logging.WARNING, pathname="", lineno=0,
                msg="failed", args=(), exc_info=sys.exc_info(),
            )
        parsed = json.loads(JsonFormatter().format(record))
        assert "store down" in parsed["exception"]


class TestTextFormatter:
    def setup_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_format_with_action(self):
        with action_context("posts.get", "req-9"):
            output = TextFormatter().format(_record("miss"))
        assert "[posts.get]" in output
        assert "(req-9)" in output
        assert "key=" not in output

    def test_format_with_cache_key(self):
        with action_context("posts.get", "req-9", "posts.get:5"):
            output = TextFormatter().format(_record("hit"))
        assert "[posts.get] (req-9) {key=posts.get:5} - hit" in output


class TestGetLogger:
    def test_returns_logger(self):
        logger = get_logger("cacher")
        assert logger.name == "actioncache.cacher"


class TestSetupLogging:
    def teardown_method(self):
        root = logging.getLogger("actioncache")
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()

    def test_setup_json(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger("actioncache")
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_text(self):
        setup_logging(level="INFO", log_format="text")
        root = logging.getLogger("actioncache")
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_no_duplicate_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("actioncache").handlers) == 1

    def test_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "cacher.log"
        setup_logging(log_file=str(log_file))
        get_logger("cacher").warning("written")
        for handler in logging.getLogger("actioncache").handlers:
            handler.flush()
        assert "written" in log_file.read_text()
