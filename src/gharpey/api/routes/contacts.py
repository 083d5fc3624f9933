"""Contacts endpoints.

GET    /api/contacts          → list (newest first)
POST   /api/contacts          → create (201)
GET    /api/contacts/{id}     → read
PUT    /api/contacts/{id}     → partial update
DELETE /api/contacts/{id}     → delete (204, cascades to conversations/messages)
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Path, Response
from psycopg2 import errors as pg_errors

from gharpey.domain.schemas import ContactCreate, ContactUpdate
from gharpey.infra.db import txn
from gharpey.infra.repositories import contacts_repository
from gharpey.observability.logging import get_logger
from gharpey.observability.redaction import safe_log_context

router = APIRouter(prefix="/api/contacts", tags=["contacts"])

logger = get_logger(__name__)


@router.get("")
def list_contacts() -> list[dict]:
    with txn() as cur:
        return contacts_repository.list_contacts(cur)


@router.post("", status_code=201)
def create_contact(body: ContactCreate) -> dict:
    with txn() as cur:
        contact = contacts_repository.create_contact(cur, body.model_dump())

    logger.info(
        "contact created",
        extra={"extra_fields": safe_log_context(contact_id=contact["id"], type=contact["type"])},
    )
    return contact


@router.get("/{contact_id}")
def get_contact(contact_id: str = Path(..., description="Contact ID")) -> dict:
    with txn() as cur:
        contact = contacts_repository.get_contact(cur, contact_id)
    if contact is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


@router.put("/{contact_id}")
def update_contact(
    contact_id: str = Path(..., description="Contact ID"),
    body: ContactUpdate = ...,
) -> dict:
    """Change only the fields present in the body."""
    fields = body.provided_fields()
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        with txn() as cur:
            contact = contacts_repository.update_contact(cur, contact_id, fields)
    except pg_errors.NotNullViolation:
        raise HTTPException(status_code=400, detail="Invalid contact data")

    if contact is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


@router.delete("/{contact_id}", status_code=204)
def delete_contact(contact_id: str = Path(..., description="Contact ID")) -> Response:
    with txn() as cur:
        deleted = contacts_repository.delete_contact(cur, contact_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Contact not found")

    logger.info("contact deleted", extra={"extra_fields": safe_log_context(contact_id=contact_id)})
    return Response(status_code=204)
