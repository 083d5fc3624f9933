"""Operator notification endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Path, Query

from gharpey.infra.db import txn
from gharpey.infra.repositories import notifications_repository

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("")
def list_notifications(user_id: str | None = Query(None, alias="userId")) -> list[dict]:
    with txn() as cur:
        return notifications_repository.list_notifications(cur, user_id)


@router.post("/{notification_id}/read")
def mark_notification_read(
    notification_id: str = Path(..., description="Notification ID"),
) -> dict:
    with txn() as cur:
        found = notifications_repository.mark_notification_read(cur, notification_id)
    if not found:
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True}
