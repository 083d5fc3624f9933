"""Unprefixed routes (health check)."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Liveness check; does not touch the database."""
    return {"status": "ok"}
