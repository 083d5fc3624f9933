"""FastAPI application factory."""

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gharpey.enrichment.client import EnrichmentClient, create_enrichment_client
from gharpey.observability.correlation import (
    CORRELATION_ID_HEADER,
    bind_correlation_id,
    resolve_correlation_id,
    unbind_correlation_id,
)
from gharpey.observability.logging import get_logger
from gharpey.observability.redaction import safe_log_context

from .routers import public
from .routes import (
    ai,
    contacts,
    conversations,
    messages,
    notifications,
    stats,
    templates,
    webhooks,
    workflows,
)

logger = get_logger(__name__)

# First path segment under /api -> message used for 400 validation responses.
_VALIDATION_MESSAGES = {
    "contacts": "Invalid contact data",
    "conversations": "Invalid conversation data",
    "messages": "Invalid message data",
    "templates": "Invalid template data",
    "ai": "Invalid AI request",
    "webhooks": "Invalid webhook payload",
}


def _validation_message(path: str) -> str:
    parts = [p for p in path.split("/") if p]
    if len(parts) >= 2 and parts[0] == "api":
        return _VALIDATION_MESSAGES.get(parts[1], "Invalid request data")
    return "Invalid request data"


def create_app(enrichment_client: EnrichmentClient | None = None) -> FastAPI:
    """Create the console API.

    Args:
        enrichment_client: Explicit enrichment client. When None, one is built
            from the environment (disabled if OPENAI_API_KEY is not set).

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="GharPey Console API",
        docs_url=None,
        redoc_url=None,
    )
    app.state.enrichment_client = enrichment_client or create_enrichment_client()

    # Correlation ID + last-resort error mapping
    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = resolve_correlation_id(request.headers.get(CORRELATION_ID_HEADER))
        token = bind_correlation_id(cid)
        try:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    "unhandled error",
                    extra={
                        "extra_fields": safe_log_context(
                            method=request.method,
                            path=request.url.path,
                        )
                    },
                )
                response = JSONResponse(status_code=500, content={"detail": "Internal server error"})
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            unbind_correlation_id(token)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "detail": _validation_message(request.url.path),
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    app.include_router(public.router)
    app.include_router(contacts.router)
    app.include_router(conversations.router)
    app.include_router(messages.router)
    app.include_router(templates.router)
    app.include_router(ai.router)
    app.include_router(stats.router)
    app.include_router(webhooks.router)
    app.include_router(workflows.router)
    app.include_router(notifications.router)

    return app
