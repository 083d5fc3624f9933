"""Shared FastAPI dependencies."""

from fastapi import Request

from gharpey.enrichment.client import EnrichmentClient


def get_enrichment_client(request: Request) -> EnrichmentClient:
    """The enrichment client built by ``create_app`` for this process."""
    return request.app.state.enrichment_client
