"""Tests for time utilities."""

from datetime import datetime, timezone

from gharpey.infra.time import from_epoch, to_iso, utc_now


class TestUtcNow:
    def test_returns_utc_datetime(self):
        assert utc_now().tzinfo == timezone.utc

    def test_returns_current_time(self):
        before = datetime.now(timezone.utc)
        now = utc_now()
        after = datetime.now(timezone.utc)
        assert before <= now <= after


class TestToIso:
    def test_none(self):
        assert to_iso(None) is None

    def test_datetime(self):
        value = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)
        assert to_iso(value) == "2026-10-19T09:30:00+00:00"


class TestFromEpoch:
    def test_parses_string_seconds(self):
        assert from_epoch("1700000000") == datetime.fromtimestamp(1700000000, timezone.utc)

    def test_falls_back_to_now(self):
        before = utc_now()
        assert from_epoch("not-a-number") >= before
        assert from_epoch(None) >= before
