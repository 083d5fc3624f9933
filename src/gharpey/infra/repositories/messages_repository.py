"""Messages repository (raw SQL, caller-owned transaction)."""

from typing import Any

from psycopg2.extensions import cursor as PgCursor
from psycopg2.extras import Json

from gharpey.infra.repositories.conversations_repository import touch_conversation
from gharpey.infra.time import to_iso

MESSAGE_COLUMNS = (
    "id, conversation_id, contact_id, direction, channel, content, language, "
    "translated_content, status, sentiment, intent, metadata, is_voice, voice_url, "
    "transcription, created_at, read_at"
)

DEFAULT_RECENT_LIMIT = 10
MAX_RECENT_LIMIT = 200


def row_to_message(row: tuple) -> dict[str, Any]:
    return {
        "id": str(row[0]),
        "conversationId": str(row[1]),
        "contactId": str(row[2]),
        "direction": row[3],
        "channel": row[4],
        "content": row[5],
        "language": row[6],
        "translatedContent": row[7],
        "status": row[8],
        "sentiment": row[9],
        "intent": row[10],
        "metadata": row[11],
        "isVoice": row[12],
        "voiceUrl": row[13],
        "transcription": row[14],
        "createdAt": to_iso(row[15]),
        "readAt": to_iso(row[16]),
    }


def list_messages(cur: PgCursor, conversation_id: str) -> list[dict[str, Any]]:
    """Messages of one conversation in chronological order."""
    cur.execute(
        f"""
        SELECT {MESSAGE_COLUMNS} FROM messages
        WHERE conversation_id = %s
        ORDER BY created_at
        """,
        (conversation_id,),
    )
    return [row_to_message(r) for r in cur.fetchall()]


def list_recent_messages(cur: PgCursor, limit: int = DEFAULT_RECENT_LIMIT) -> list[dict[str, Any]]:
    """Latest messages across all conversations, newest first."""
    limit = max(1, min(limit, MAX_RECENT_LIMIT))
    cur.execute(
        f"""
        SELECT {MESSAGE_COLUMNS} FROM messages
        ORDER BY created_at DESC
        LIMIT %s
        """,
        (limit,),
    )
    return [row_to_message(r) for r in cur.fetchall()]


def create_message(cur: PgCursor, data: dict[str, Any]) -> dict[str, Any]:
    """Insert a message and record it on its conversation.

    Both writes go through the caller's cursor, so they commit or roll back
    together with the surrounding ``txn()``.
    """
    metadata = data.get("metadata")
    cur.execute(
        f"""
        INSERT INTO messages (
            conversation_id, contact_id, direction, channel, content,
            language, translated_content, status, sentiment, intent,
            metadata, is_voice, voice_url, transcription
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        RETURNING {MESSAGE_COLUMNS}
        """,
        (
            data["conversation_id"],
            data["contact_id"],
            data["direction"],
            data["channel"],
            data["content"],
            data.get("language"),
            data.get("translated_content"),
            data.get("status") or "pending",
            data.get("sentiment"),
            data.get("intent"),
            Json(metadata) if metadata is not None else None,
            bool(data.get("is_voice", False)),
            data.get("voice_url"),
            data.get("transcription"),
        ),
    )
    message = row_to_message(cur.fetchone())

    touch_conversation(cur, data["conversation_id"], inbound=data["direction"] == "inbound")
    return message
