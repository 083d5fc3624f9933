"""Dashboard figures derived from raw counts.

Percentages round half up (``round(2.5) == 3``), which is what the
dashboard has always shown; Python's ``round`` would give 2.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Iterable, Mapping

# Not measured yet; shown as a fixed figure on the dashboard.
AVG_RESPONSE_TIME_PLACEHOLDER = "2.5h"

VOLUME_DAYS = 7


def percentage(part: int, total: int) -> int:
    """``round(100 * part / total)`` with halves rounded up; 0 when total is 0."""
    if total <= 0:
        return 0
    return (200 * part + total) // (2 * total)


def compute_response_rate(outbound_count: int, total_count: int) -> int:
    return percentage(outbound_count, total_count)


def build_stats(*, total_messages: int, total_contacts: int, outbound_messages: int) -> dict[str, Any]:
    return {
        "totalMessages": total_messages,
        "totalContacts": total_contacts,
        "responseRate": compute_response_rate(outbound_messages, total_messages),
        "avgResponseTime": AVG_RESPONSE_TIME_PLACEHOLDER,
    }


def distribution(
    counts: Mapping[str, int], keys: Iterable[str], *, key_name: str
) -> list[dict[str, Any]]:
    """Share of each key in ``counts``; keys with no rows are reported as 0."""
    ordered = list(keys)
    total = sum(counts.get(k, 0) for k in ordered)
    items = [
        {key_name: k, "count": counts.get(k, 0), "percentage": percentage(counts.get(k, 0), total)}
        for k in ordered
    ]
    items.sort(key=lambda item: item["count"], reverse=True)
    return items


def daily_volume(
    counts_by_day: Mapping[date, int], today: date, days: int = VOLUME_DAYS
) -> list[dict[str, Any]]:
    """One entry per day ending today, oldest first, missing days as 0."""
    start = today - timedelta(days=days - 1)
    volume = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        volume.append(
            {
                "date": day.strftime("%a"),
                "day": day.isoformat(),
                "count": counts_by_day.get(day, 0),
            }
        )
    return volume
