"""Tests for observability utilities."""

import json
import logging
import sys

from gharpey.observability.correlation import (
    bind_correlation_id,
    get_correlation_id,
    resolve_correlation_id,
    unbind_correlation_id,
)
from gharpey.observability.logging import JsonFormatter, get_logger
from gharpey.observability.redaction import (
    redact_string,
    redact_value,
    safe_log_context,
)


class TestRedaction:
    """Tests for redaction helpers."""

    def test_redact_indian_phone_number(self):
        result = redact_string("Call me at +91 98765 43210")
        assert "98765" not in result
        assert "[REDACTED]" in result

    def test_redact_bare_phone_digits(self):
        result = redact_string("from 919876543210")
        assert "919876543210" not in result

    def test_redact_email(self):
        result = redact_string("Email: priya.sharma@example.com")
        assert "priya.sharma@example.com" not in result
        assert "[REDACTED]" in result

    def test_short_numbers_kept(self):
        assert redact_string("limit 200") == "limit 200"

    def test_redact_value_dict_only_keys(self):
        result = redact_value({"password": "secret123", "user": "john"})
        assert "secret123" not in result
        assert "john" not in result
        assert "password" in result

    def test_redact_value_list_only_len(self):
        result = redact_value(["a", "b", "c"])
        assert result == "list(len=3)"

    def test_redact_value_scalars(self):
        assert redact_value(None) == "null"
        assert redact_value(True) == "true"
        assert redact_value(42) == "42"

    def test_safe_log_context(self):
        ctx = safe_log_context(sender="+919876543210", count=42)
        assert "[REDACTED]" in ctx["sender"]
        assert ctx["count"] == "42"

    def test_safe_log_context_hides_message_text(self):
        ctx = safe_log_context(content="Namaste, I need help", body="hello")
        assert ctx["content"] == "<text len=20>"
        assert ctx["body"] == "<text len=5>"


class TestCorrelation:
    def test_bind_and_unbind(self):
        token = bind_correlation_id("cid-1")
        assert get_correlation_id() == "cid-1"
        unbind_correlation_id(token)
        assert get_correlation_id() == ""

    def test_resolve_keeps_usable_incoming(self):
        assert resolve_correlation_id("  abc  ") == "abc"

    def test_resolve_mints_new_when_missing(self):
        first = resolve_correlation_id(None)
        second = resolve_correlation_id("")
        assert first and second and first != second


class TestJsonFormatter:
    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord(
            name="gharpey.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="message stored",
            args=(),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_renders_json_with_extra_fields(self):
        line = JsonFormatter().format(self._record(extra_fields={"message_id": "m-1"}))
        data = json.loads(line)
        assert data["service"] == "gharpey-api"
        assert data["level"] == "INFO"
        assert data["logger"] == "gharpey.test"
        assert data["message"] == "message stored"
        assert data["message_id"] == "m-1"

    def test_includes_bound_correlation_id(self):
        token = bind_correlation_id("cid-log")
        try:
            data = json.loads(JsonFormatter().format(self._record()))
        finally:
            unbind_correlation_id(token)
        assert data["correlationId"] == "cid-log"

    def test_includes_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = self._record()
            record.exc_info = sys.exc_info()
        data = json.loads(JsonFormatter().format(record))
        assert "ValueError: bad" in data["exception"]

    def test_get_logger_configured_once(self):
        first = get_logger("gharpey.test.once")
        second = get_logger("gharpey.test.once")
        assert first is second
        assert len(first.handlers) == 1
        assert first.propagate is False
