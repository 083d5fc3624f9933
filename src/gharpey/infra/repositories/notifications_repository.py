"""Operator notifications."""

from typing import Any

from psycopg2.extensions import cursor as PgCursor

from gharpey.infra.time import to_iso

NOTIFICATION_COLUMNS = "id, type, title, message, user_id, is_read, metadata, created_at"


def row_to_notification(row: tuple) -> dict[str, Any]:
    return {
        "id": str(row[0]),
        "type": row[1],
        "title": row[2],
        "message": row[3],
        "userId": str(row[4]) if row[4] else None,
        "isRead": row[5],
        "metadata": row[6],
        "createdAt": to_iso(row[7]),
    }


def list_notifications(cur: PgCursor, user_id: str | None = None) -> list[dict[str, Any]]:
    """Notifications newest first, optionally only those of one user."""
    cur.execute(
        f"""
        SELECT {NOTIFICATION_COLUMNS} FROM notifications
        WHERE %s::varchar IS NULL OR user_id = %s
        ORDER BY created_at DESC
        """,
        (user_id, user_id),
    )
    return [row_to_notification(r) for r in cur.fetchall()]


def mark_notification_read(cur: PgCursor, notification_id: str) -> bool:
    """Returns False when the notification does not exist."""
    cur.execute(
        "UPDATE notifications SET is_read = true WHERE id = %s RETURNING id",
        (notification_id,),
    )
    return cur.fetchone() is not None
