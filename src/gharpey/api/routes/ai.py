"""AI utility endpoints used by the inbox composer.

Each response carries an ``enrichment`` block telling whether the value came
from the model, the disabled fallback or the failure fallback.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from gharpey.api.deps import get_enrichment_client
from gharpey.domain.schemas import GenerateResponseRequest, ProcessRequest, TranslateRequest
from gharpey.enrichment.client import EnrichmentClient

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/generate-response")
def generate_response(
    body: GenerateResponseRequest,
    client: EnrichmentClient = Depends(get_enrichment_client),
) -> dict:
    result = client.generate_reply(body.message_history, body.language or "en")
    return {"response": result.value, "enrichment": result.describe()}


@router.post("/translate")
def translate(
    body: TranslateRequest,
    client: EnrichmentClient = Depends(get_enrichment_client),
) -> dict:
    result = client.translate(body.content, body.target_language)
    return {"translatedContent": result.value, "enrichment": result.describe()}


@router.post("/process")
def process(
    body: ProcessRequest,
    client: EnrichmentClient = Depends(get_enrichment_client),
) -> dict:
    result = client.analyze(body.content, body.target_language)
    return {**result.value.to_dict(), "enrichment": result.describe()}
