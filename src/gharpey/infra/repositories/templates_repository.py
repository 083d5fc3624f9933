"""Templates repository.

Deleting a template only clears ``is_active``; the row stays so usage
history and references keep working. Inactive templates are hidden from
the listing but still readable by id.
"""

from typing import Any

from psycopg2.extensions import cursor as PgCursor
from psycopg2.extras import Json

from gharpey.infra.time import to_iso

TEMPLATE_COLUMNS = (
    "id, name, category, channel, content, variables, language, is_active, "
    "usage_count, created_at, updated_at"
)

_WRITABLE = ("name", "category", "channel", "content", "variables", "language", "is_active")


def row_to_template(row: tuple) -> dict[str, Any]:
    return {
        "id": str(row[0]),
        "name": row[1],
        "category": row[2],
        "channel": row[3],
        "content": row[4],
        "variables": row[5],
        "language": row[6],
        "isActive": row[7],
        "usageCount": row[8],
        "createdAt": to_iso(row[9]),
        "updatedAt": to_iso(row[10]),
    }


def _adapt(column: str, value: Any) -> Any:
    if column == "content" and value is not None:
        return Json(value)
    return value


def list_templates(cur: PgCursor) -> list[dict[str, Any]]:
    """Active templates, newest first."""
    cur.execute(
        f"""
        SELECT {TEMPLATE_COLUMNS} FROM templates
        WHERE is_active = true
        ORDER BY created_at DESC
        """
    )
    return [row_to_template(r) for r in cur.fetchall()]


def get_template(cur: PgCursor, template_id: str) -> dict[str, Any] | None:
    """Fetch by id whether or not the template is active."""
    cur.execute(f"SELECT {TEMPLATE_COLUMNS} FROM templates WHERE id = %s", (template_id,))
    row = cur.fetchone()
    return row_to_template(row) if row else None


def create_template(cur: PgCursor, data: dict[str, Any]) -> dict[str, Any]:
    cur.execute(
        f"""
        INSERT INTO templates
            (name, category, channel, content, variables, language, is_active)
        VALUES
            (%s, %s, %s, %s, %s, %s, %s)
        RETURNING {TEMPLATE_COLUMNS}
        """,
        (
            data["name"],
            data["category"],
            data["channel"],
            Json(data["content"]),
            data.get("variables"),
            data.get("language") or "en",
            data.get("is_active", True),
        ),
    )
    return row_to_template(cur.fetchone())


def update_template(cur: PgCursor, template_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
    """Partial update. Returns None when the template does not exist."""
    sets: list[str] = ["updated_at = now()"]
    params: list[Any] = []
    for column in _WRITABLE:
        if column in fields:
            sets.append(f"{column} = %s")
            params.append(_adapt(column, fields[column]))
    params.append(template_id)

    cur.execute(
        f"""
        UPDATE templates
        SET {", ".join(sets)}
        WHERE id = %s
        RETURNING {TEMPLATE_COLUMNS}
        """,  # noqa: S608 - whitelisted column names only
        params,
    )
    row = cur.fetchone()
    return row_to_template(row) if row else None


def deactivate_template(cur: PgCursor, template_id: str) -> bool:
    """Soft delete. Returns False when the template does not exist."""
    cur.execute(
        """
        UPDATE templates
        SET is_active = false, updated_at = now()
        WHERE id = %s
        RETURNING id
        """,
        (template_id,),
    )
    return cur.fetchone() is not None


def increment_template_usage(cur: PgCursor, template_id: str) -> bool:
    """Add one use. Returns False when the template does not exist."""
    cur.execute(
        """
        UPDATE templates
        SET usage_count = usage_count + 1
        WHERE id = %s
        RETURNING usage_count
        """,
        (template_id,),
    )
    return cur.fetchone() is not None
