"""Contacts repository.

Uses raw SQL with psycopg2 (no ORM). Every function takes a cursor; the
caller owns the transaction (``with txn() as cur:``).
"""

from typing import Any

from psycopg2.extensions import cursor as PgCursor
from psycopg2.extras import Json

from gharpey.infra.time import to_iso

CONTACT_COLUMNS = (
    "id, name, phone, email, type, language, location, notes, metadata, "
    "created_at, updated_at"
)

# Columns a client may write, in request-model field names.
_WRITABLE = ("name", "phone", "email", "type", "language", "location", "notes", "metadata")


def row_to_contact(row: tuple) -> dict[str, Any]:
    return {
        "id": str(row[0]),
        "name": row[1],
        "phone": row[2],
        "email": row[3],
        "type": row[4],
        "language": row[5],
        "location": row[6],
        "notes": row[7],
        "metadata": row[8],
        "createdAt": to_iso(row[9]),
        "updatedAt": to_iso(row[10]),
    }


def _adapt(column: str, value: Any) -> Any:
    if column == "metadata" and value is not None:
        return Json(value)
    return value


def list_contacts(cur: PgCursor) -> list[dict[str, Any]]:
    """All contacts, newest first."""
    cur.execute(f"SELECT {CONTACT_COLUMNS} FROM contacts ORDER BY created_at DESC")
    return [row_to_contact(r) for r in cur.fetchall()]


def get_contact(cur: PgCursor, contact_id: str) -> dict[str, Any] | None:
    cur.execute(f"SELECT {CONTACT_COLUMNS} FROM contacts WHERE id = %s", (contact_id,))
    row = cur.fetchone()
    return row_to_contact(row) if row else None


def find_contact_by_phone(cur: PgCursor, phone: str) -> dict[str, Any] | None:
    """Oldest contact whose phone has the same digits, ignoring formatting."""
    cur.execute(
        f"""
        SELECT {CONTACT_COLUMNS} FROM contacts
        WHERE regexp_replace(phone, '[^0-9]', '', 'g')
            = regexp_replace(%s, '[^0-9]', '', 'g')
        ORDER BY created_at
        LIMIT 1
        """,
        (phone,),
    )
    row = cur.fetchone()
    return row_to_contact(row) if row else None


def find_contact_by_email(cur: PgCursor, email: str) -> dict[str, Any] | None:
    """Oldest contact registered with this e-mail (case-insensitive), if any."""
    cur.execute(
        f"""
        SELECT {CONTACT_COLUMNS} FROM contacts
        WHERE lower(email) = lower(%s)
        ORDER BY created_at
        LIMIT 1
        """,
        (email,),
    )
    row = cur.fetchone()
    return row_to_contact(row) if row else None


def create_contact(cur: PgCursor, data: dict[str, Any]) -> dict[str, Any]:
    """Insert a contact. ``data`` uses request-model field names."""
    cur.execute(
        f"""
        INSERT INTO contacts
            (name, phone, email, type, language, location, notes, metadata)
        VALUES
            (%s, %s, %s, %s, %s, %s, %s, %s)
        RETURNING {CONTACT_COLUMNS}
        """,
        (
            data["name"],
            data.get("phone"),
            data.get("email"),
            data["type"],
            data.get("language") or "en",
            data.get("location"),
            data.get("notes"),
            _adapt("metadata", data.get("metadata")),
        ),
    )
    return row_to_contact(cur.fetchone())


def update_contact(cur: PgCursor, contact_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
    """Partial update. Returns None when the contact does not exist."""
    sets: list[str] = ["updated_at = now()"]
    params: list[Any] = []
    for column in _WRITABLE:
        if column in fields:
            sets.append(f"{column} = %s")
            params.append(_adapt(column, fields[column]))
    params.append(contact_id)

    cur.execute(
        f"""
        UPDATE contacts
        SET {", ".join(sets)}
        WHERE id = %s
        RETURNING {CONTACT_COLUMNS}
        """,  # noqa: S608 - SET clause built from whitelisted column names only
        params,
    )
    row = cur.fetchone()
    return row_to_contact(row) if row else None


def delete_contact(cur: PgCursor, contact_id: str) -> bool:
    """Hard delete; conversations and messages cascade."""
    cur.execute("DELETE FROM contacts WHERE id = %s", (contact_id,))
    return cur.rowcount > 0


def lock_channel_address(cur: PgCursor, channel: str, address: str) -> None:
    """Serialize contact resolution for one address until the transaction ends.

    Two webhooks from the same unknown sender would otherwise both miss the
    lookup and create duplicate contacts.
    """
    cur.execute(
        "SELECT pg_advisory_xact_lock(hashtext(%s))",
        (f"contact:{channel}:{address}",),
    )
