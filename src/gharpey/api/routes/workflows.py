"""Workflow read endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Path

from gharpey.infra.db import txn
from gharpey.infra.repositories import workflows_repository

router = APIRouter(prefix="/api/workflows", tags=["workflows"])


@router.get("")
def list_workflows() -> list[dict]:
    with txn() as cur:
        return workflows_repository.list_workflows(cur)


@router.get("/{workflow_id}/instances")
def list_workflow_instances(workflow_id: str = Path(..., description="Workflow ID")) -> list[dict]:
    with txn() as cur:
        if workflows_repository.get_workflow(cur, workflow_id) is None:
            raise HTTPException(status_code=404, detail="Workflow not found")
        return workflows_repository.list_workflow_instances(cur, workflow_id)
