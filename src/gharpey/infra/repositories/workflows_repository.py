"""Workflows and their per-contact instances (read side only)."""

from typing import Any

from psycopg2.extensions import cursor as PgCursor

from gharpey.infra.time import to_iso

WORKFLOW_COLUMNS = (
    "id, name, description, trigger, conditions, actions, is_active, created_at, updated_at"
)
INSTANCE_COLUMNS = (
    "id, workflow_id, contact_id, status, current_step, data, started_at, completed_at, error"
)


def row_to_workflow(row: tuple) -> dict[str, Any]:
    return {
        "id": str(row[0]),
        "name": row[1],
        "description": row[2],
        "trigger": row[3],
        "conditions": row[4],
        "actions": row[5],
        "isActive": row[6],
        "createdAt": to_iso(row[7]),
        "updatedAt": to_iso(row[8]),
    }


def row_to_instance(row: tuple) -> dict[str, Any]:
    return {
        "id": str(row[0]),
        "workflowId": str(row[1]),
        "contactId": str(row[2]) if row[2] else None,
        "status": row[3],
        "currentStep": row[4],
        "data": row[5],
        "startedAt": to_iso(row[6]),
        "completedAt": to_iso(row[7]),
        "error": row[8],
    }


def list_workflows(cur: PgCursor) -> list[dict[str, Any]]:
    """Active workflows, newest first."""
    cur.execute(
        f"""
        SELECT {WORKFLOW_COLUMNS} FROM workflows
        WHERE is_active = true
        ORDER BY created_at DESC
        """
    )
    return [row_to_workflow(r) for r in cur.fetchall()]


def get_workflow(cur: PgCursor, workflow_id: str) -> dict[str, Any] | None:
    cur.execute(f"SELECT {WORKFLOW_COLUMNS} FROM workflows WHERE id = %s", (workflow_id,))
    row = cur.fetchone()
    return row_to_workflow(row) if row else None


def list_workflow_instances(cur: PgCursor, workflow_id: str | None = None) -> list[dict[str, Any]]:
    """Instances, most recently started first, optionally for one workflow."""
    cur.execute(
        f"""
        SELECT {INSTANCE_COLUMNS} FROM workflow_instances
        WHERE %s::varchar IS NULL OR workflow_id = %s
        ORDER BY started_at DESC
        """,
        (workflow_id, workflow_id),
    )
    return [row_to_instance(r) for r in cur.fetchall()]
