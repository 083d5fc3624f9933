"""Aggregate queries behind /api/stats and /api/analytics."""

from datetime import date
from typing import Any

from psycopg2.extensions import cursor as PgCursor

from gharpey.domain import stats
from gharpey.domain.enums import CHANNELS, LANGUAGES
from gharpey.infra.db import fetchall, fetchone

TOP_CONTACTS_LIMIT = 5


def get_stats(cur: PgCursor) -> dict[str, Any]:
    total_messages, outbound, total_contacts = fetchone(
        cur,
        """
        SELECT
            (SELECT count(*) FROM messages)::int,
            (SELECT count(*) FROM messages WHERE direction = 'outbound')::int,
            (SELECT count(*) FROM contacts)::int
        """,
    )
    return stats.build_stats(
        total_messages=total_messages or 0,
        total_contacts=total_contacts or 0,
        outbound_messages=outbound or 0,
    )


def _grouped_counts(cur: PgCursor, column: str, where: str = "") -> dict[str, int]:
    rows = fetchall(
        cur, f"SELECT {column}, count(*)::int FROM messages {where} GROUP BY {column}"  # noqa: S608
    )
    return {str(key): count for key, count in rows if key is not None}


def get_analytics(cur: PgCursor, today: date) -> dict[str, Any]:
    """Dashboard analytics computed from stored messages."""
    cur.execute(
        """
        SELECT created_at::date AS day, count(*)::int
        FROM messages
        WHERE created_at >= %s::date - (%s - 1)
        GROUP BY day
        """,
        (today, stats.VOLUME_DAYS),
    )
    by_day = {row[0]: row[1] for row in cur.fetchall()}

    channel_counts = _grouped_counts(cur, "channel")
    language_counts = _grouped_counts(
        cur, "language", "WHERE direction = 'inbound' AND language IS NOT NULL"
    )

    cur.execute(
        """
        SELECT c.name, c.type, count(m.id)::int AS message_count
        FROM contacts c
        JOIN messages m ON m.contact_id = c.id
        GROUP BY c.id, c.name, c.type
        ORDER BY message_count DESC, c.name
        LIMIT %s
        """,
        (TOP_CONTACTS_LIMIT,),
    )
    top_contacts = [
        {"name": row[0], "type": row[1], "messageCount": row[2]} for row in cur.fetchall()
    ]

    summary = get_stats(cur)

    return {
        "messageVolume": stats.daily_volume(by_day, today),
        "channelDistribution": stats.distribution(channel_counts, CHANNELS, key_name="channel"),
        "languageDistribution": stats.distribution(language_counts, LANGUAGES, key_name="language"),
        "responseMetrics": {
            "avgResponseTime": summary["avgResponseTime"],
            "responseRate": summary["responseRate"],
        },
        "topContacts": top_contacts,
    }
