"""Conversations repository (raw SQL, caller-owned transaction)."""

from typing import Any

from psycopg2.extensions import cursor as PgCursor

from gharpey.infra.repositories.contacts_repository import CONTACT_COLUMNS, row_to_contact
from gharpey.infra.time import to_iso

CONVERSATION_COLUMNS = (
    "id, contact_id, channel, subject, last_message_at, unread_count, status, created_at"
)

_CONVERSATION_COUNT = 8

_WRITABLE = ("subject", "status")


def row_to_conversation(row: tuple) -> dict[str, Any]:
    return {
        "id": str(row[0]),
        "contactId": str(row[1]),
        "channel": row[2],
        "subject": row[3],
        "lastMessageAt": to_iso(row[4]),
        "unreadCount": row[5],
        "status": row[6],
        "createdAt": to_iso(row[7]),
    }


def _prefixed(alias: str, columns: str) -> str:
    return ", ".join(f"{alias}.{c.strip()}" for c in columns.split(","))


def list_conversations(cur: PgCursor) -> list[dict[str, Any]]:
    """Conversations with their contact, most recently active first."""
    cur.execute(
        f"""
        SELECT {_prefixed("cv", CONVERSATION_COLUMNS)}, {_prefixed("ct", CONTACT_COLUMNS)}
        FROM conversations cv
        LEFT JOIN contacts ct ON ct.id = cv.contact_id
        ORDER BY cv.last_message_at DESC
        """
    )
    result = []
    for row in cur.fetchall():
        conversation = row_to_conversation(row[:_CONVERSATION_COUNT])
        contact_row = row[_CONVERSATION_COUNT:]
        conversation["contact"] = row_to_contact(contact_row) if contact_row[0] else None
        result.append(conversation)
    return result


def get_conversation(cur: PgCursor, conversation_id: str) -> dict[str, Any] | None:
    cur.execute(
        f"SELECT {CONVERSATION_COLUMNS} FROM conversations WHERE id = %s",
        (conversation_id,),
    )
    row = cur.fetchone()
    return row_to_conversation(row) if row else None


def find_conversation(cur: PgCursor, contact_id: str, channel: str) -> dict[str, Any] | None:
    """Most recently active conversation of a contact on a channel."""
    cur.execute(
        f"""
        SELECT {CONVERSATION_COLUMNS} FROM conversations
        WHERE contact_id = %s AND channel = %s
        ORDER BY last_message_at DESC
        LIMIT 1
        """,
        (contact_id, channel),
    )
    row = cur.fetchone()
    return row_to_conversation(row) if row else None


def create_conversation(cur: PgCursor, data: dict[str, Any]) -> dict[str, Any]:
    cur.execute(
        f"""
        INSERT INTO conversations (contact_id, channel, subject, unread_count, status)
        VALUES (%s, %s, %s, %s, %s)
        RETURNING {CONVERSATION_COLUMNS}
        """,
        (
            data["contact_id"],
            data["channel"],
            data.get("subject"),
            data.get("unread_count", 0),
            data.get("status") or "active",
        ),
    )
    return row_to_conversation(cur.fetchone())


def update_conversation(
    cur: PgCursor, conversation_id: str, fields: dict[str, Any]
) -> dict[str, Any] | None:
    """Partial update of subject/status. Returns None when not found."""
    sets: list[str] = []
    params: list[Any] = []
    for column in _WRITABLE:
        if column in fields:
            sets.append(f"{column} = %s")
            params.append(fields[column])
    if not sets:
        return get_conversation(cur, conversation_id)
    params.append(conversation_id)

    cur.execute(
        f"""
        UPDATE conversations
        SET {", ".join(sets)}
        WHERE id = %s
        RETURNING {CONVERSATION_COLUMNS}
        """,  # noqa: S608 - whitelisted column names only
        params,
    )
    row = cur.fetchone()
    return row_to_conversation(row) if row else None


def touch_conversation(cur: PgCursor, conversation_id: str, *, inbound: bool) -> None:
    """Record a new message: bump last_message_at, count unread inbound ones.

    A single statement, so the counter is incremented atomically even when
    several messages land on the same conversation concurrently.
    """
    cur.execute(
        """
        UPDATE conversations
        SET last_message_at = now(),
            unread_count = unread_count + CASE WHEN %s THEN 1 ELSE 0 END
        WHERE id = %s
        """,
        (inbound, conversation_id),
    )


def mark_conversation_read(cur: PgCursor, conversation_id: str) -> dict[str, Any] | None:
    """Reset the unread counter and stamp read_at on its inbound messages."""
    cur.execute(
        f"""
        UPDATE conversations
        SET unread_count = 0
        WHERE id = %s
        RETURNING {CONVERSATION_COLUMNS}
        """,
        (conversation_id,),
    )
    row = cur.fetchone()
    if row is None:
        return None
    cur.execute(
        """
        UPDATE messages
        SET read_at = now()
        WHERE conversation_id = %s AND direction = 'inbound' AND read_at IS NULL
        """,
        (conversation_id,),
    )
    return row_to_conversation(row)
