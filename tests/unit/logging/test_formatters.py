"""Tests for log formatters."""

import json
import logging
import sys

from lambda_runtime.logging.context import set_extra_context, set_request_id
from lambda_runtime.logging.formatters import JSONFormatter, TextFormatter


def _make_record(message="test message", level=logging.INFO, exc_info=None):
    """Create a test log record."""
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=message,
        args=(),
        exc_info=exc_info,
    )


def _exc_info():
    try:
        raise ValueError("bad value")
    except ValueError:
        return sys.exc_info()


class TestJSONFormatter:
    def test_outputs_valid_json(self):
        parsed = json.loads(JSONFormatter().format(_make_record()))
        assert isinstance(parsed, dict)

    def test_core_fields(self):
        parsed = json.loads(JSONFormatter().format(_make_record("hello", logging.ERROR)))
        assert parsed["message"] == "hello"
        assert parsed["level"] == "ERROR"
        assert parsed["logger"] == "test.logger"
        assert parsed["service"] == "lambda-runtime"
        assert "timestamp" in parsed

    def test_excludes_timestamp_when_disabled(self):
        formatter = JSONFormatter(include_timestamp=False)
        assert "timestamp" not in json.loads(formatter.format(_make_record()))

    def test_includes_location_when_enabled(self):
        formatter = JSONFormatter(include_location=True)
        parsed = json.loads(formatter.format(_make_record()))
        assert parsed["line"] == 42
        assert "function" in parsed
        assert "module" in parsed

    def test_request_id_absent_between_invocations(self):
        assert "requestId" not in json.loads(JSONFormatter().format(_make_record()))

    def test_request_id_from_context(self):
        set_request_id("req-7")
        assert json.loads(JSONFormatter().format(_make_record()))["requestId"] == "req-7"

    def test_extra_context_included(self):
        set_extra_context(function_name="fn")
        assert json.loads(JSONFormatter().format(_make_record()))["function_name"] == "fn"

    def test_record_extras_included(self):
        record = _make_record()
        record.attempt = 3
        assert json.loads(JSONFormatter().format(record))["attempt"] == 3

    def test_exception_included(self):
        parsed = json.loads(JSONFormatter().format(_make_record(exc_info=_exc_info())))
        assert parsed["exception"]["type"] == "ValueError"
        assert parsed["exception"]["message"] == "bad value"
        assert parsed["exception"]["traceback"]

    def test_custom_service_name(self):
        formatter = JSONFormatter(service_name="svc")
        assert json.loads(formatter.format(_make_record()))["service"] == "svc"


class TestTextFormatter:
    def test_tab_separated_columns(self):
        set_request_id("req-9")
        columns = TextFormatter().format(_make_record("hello")).split("\t")
        assert columns[1:] == ["req-9", "INFO", "hello"]

    def test_dash_without_request_id(self):
        columns = TextFormatter().format(_make_record()).split("\t")
        assert columns[1] == "-"

    def test_context_appended_as_key_values(self):
        set_extra_context(function_name="fn")
        record = _make_record("hello")
        record.attempt = 2
        output = TextFormatter().format(record)
        assert output.endswith("hello function_name=fn attempt=2")

    def test_colors_when_enabled(self):
        output = TextFormatter(use_colors=True).format(_make_record())
        assert "\033[32mINFO\033[0m" in output

    def test_exception_traceback_appended(self):
        output = TextFormatter().format(_make_record(exc_info=_exc_info()))
        assert "ValueError: bad value" in output
