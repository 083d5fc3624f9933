"""Dashboard endpoints: headline stats and analytics."""

from __future__ import annotations

from fastapi import APIRouter

from gharpey.infra.db import txn
from gharpey.infra.repositories import stats_repository
from gharpey.infra.time import utc_now

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/stats")
def get_stats() -> dict:
    with txn() as cur:
        return stats_repository.get_stats(cur)


@router.get("/analytics")
def get_analytics() -> dict:
    """Volume for the last 7 days, channel/language split, top contacts."""
    with txn() as cur:
        return stats_repository.get_analytics(cur, utc_now().date())
