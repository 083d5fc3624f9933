"""Message templates endpoints.

GET    /api/templates            → active templates, newest first
POST   /api/templates            → create (201)
GET    /api/templates/{id}       → read (also inactive ones)
PUT    /api/templates/{id}       → partial update
DELETE /api/templates/{id}       → soft delete (is_active=false, 204)
POST   /api/templates/{id}/use   → count one use, return the template
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Path, Response
from psycopg2 import errors as pg_errors

from gharpey.domain.schemas import TemplateCreate, TemplateUpdate
from gharpey.infra.db import txn
from gharpey.infra.repositories import templates_repository

router = APIRouter(prefix="/api/templates", tags=["templates"])


@router.get("")
def list_templates() -> list[dict]:
    with txn() as cur:
        return templates_repository.list_templates(cur)


@router.post("", status_code=201)
def create_template(body: TemplateCreate) -> dict:
    with txn() as cur:
        return templates_repository.create_template(cur, body.model_dump())


@router.get("/{template_id}")
def get_template(template_id: str = Path(..., description="Template ID")) -> dict:
    with txn() as cur:
        template = templates_repository.get_template(cur, template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.put("/{template_id}")
def update_template(
    template_id: str = Path(..., description="Template ID"),
    body: TemplateUpdate = ...,
) -> dict:
    fields = body.provided_fields()
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        with txn() as cur:
            template = templates_repository.update_template(cur, template_id, fields)
    except pg_errors.NotNullViolation:
        raise HTTPException(status_code=400, detail="Invalid template data")

    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.delete("/{template_id}", status_code=204)
def delete_template(template_id: str = Path(..., description="Template ID")) -> Response:
    """Deactivate; the row stays readable by id."""
    with txn() as cur:
        found = templates_repository.deactivate_template(cur, template_id)
    if not found:
        raise HTTPException(status_code=404, detail="Template not found")
    return Response(status_code=204)


@router.post("/{template_id}/use")
def use_template(template_id: str = Path(..., description="Template ID")) -> dict:
    with txn() as cur:
        if not templates_repository.increment_template_usage(cur, template_id):
            raise HTTPException(status_code=404, detail="Template not found")
        return templates_repository.get_template(cur, template_id)
