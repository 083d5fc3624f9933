"""Tests for dashboard figures."""

from datetime import date

import pytest

from gharpey.domain.stats import (
    build_stats,
    compute_response_rate,
    daily_volume,
    distribution,
    percentage,
)


class TestPercentage:
    @pytest.mark.parametrize(
        "part,total,expected",
        [
            (0, 0, 0),
            (5, 0, 0),
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),  # 12.5 rounds up
            (1, 200, 1),  # 0.5 rounds up
            (4, 4, 100),
        ],
    )
    def test_rounding(self, part, total, expected):
        assert percentage(part, total) == expected

    def test_response_rate_no_messages(self):
        assert compute_response_rate(0, 0) == 0


class TestBuildStats:
    def test_shape(self):
        assert build_stats(total_messages=10, total_contacts=4, outbound_messages=3) == {
            "totalMessages": 10,
            "totalContacts": 4,
            "responseRate": 30,
            "avgResponseTime": "2.5h",
        }


class TestDistribution:
    def test_sorted_by_count_with_zero_keys(self):
        result = distribution({"email": 1, "whatsapp": 3}, ("whatsapp", "email"), key_name="channel")
        assert result == [
            {"channel": "whatsapp", "count": 3, "percentage": 75},
            {"channel": "email", "count": 1, "percentage": 25},
        ]

    def test_missing_keys_reported_as_zero(self):
        result = distribution({"kn": 2}, ("en", "hi", "kn", "ne"), key_name="language")
        assert result[0] == {"language": "kn", "count": 2, "percentage": 100}
        assert {item["language"] for item in result} == {"en", "hi", "kn", "ne"}
        assert all(item["count"] == 0 for item in result[1:])

    def test_empty(self):
        result = distribution({}, ("whatsapp", "email"), key_name="channel")
        assert [item["percentage"] for item in result] == [0, 0]


class TestDailyVolume:
    def test_seven_days_oldest_first(self):
        today = date(2026, 10, 19)  # Monday
        result = daily_volume({date(2026, 10, 19): 4, date(2026, 10, 13): 2}, today)

        assert len(result) == 7
        assert result[0] == {"date": "Tue", "day": "2026-10-13", "count": 2}
        assert result[-1] == {"date": "Mon", "day": "2026-10-19", "count": 4}
        assert sum(item["count"] for item in result) == 6
