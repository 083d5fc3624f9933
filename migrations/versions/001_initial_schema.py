"""Initial schema: contacts, conversations, messages, templates, workflows, notifications.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from pathlib import Path

from alembic import op


# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _read_sql() -> str:
    sql_path = Path(__file__).resolve().parents[1] / "sql" / "001_initial.sql"
    return sql_path.read_text(encoding="utf-8")


def upgrade() -> None:
    # Raw driver execution so the DO $$ ... $$ block is sent as-is.
    conn = op.get_bind()
    conn.exec_driver_sql(_read_sql())


def downgrade() -> None:
    for table in (
        "notifications",
        "workflow_instances",
        "workflows",
        "templates",
        "messages",
        "conversations",
        "contacts",
        "users",
    ):
        op.execute(f"DROP TABLE IF EXISTS {table}")
    for enum_type in (
        "workflow_status",
        "sentiment",
        "language",
        "message_direction",
        "message_status",
        "channel",
        "contact_type",
        "user_role",
    ):
        op.execute(f"DROP TYPE IF EXISTS {enum_type}")
