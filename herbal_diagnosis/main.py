"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Mount router with diagnosis endpoints under /v1 prefix
  - Expose health check endpoint

Collaborators:
  - FastAPI: ASGI web framework
  - routes.router: diagnosis, chat, history, questionnaire endpoints
  - container: knowledge store and generation service handles

Constraints:
  - No authentication, rate limiting or metrics
  - Health check reports local state only (no provider round trip)

Notes:
  - Env validation enforced at startup (via lifespan, not import time)
  - The knowledge store is warmed in lifespan; first request never pays the load
  - /healthz follows Kubernetes health check convention
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI

from . import __version__
from .config import get_settings
from .container import get_knowledge_store, get_llm_service
from .exception_handlers import register_exception_handlers
from .logger import logger
from .routes import router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and loads the corpus."""
    # This will raise ValidationError if env vars are missing/invalid
    settings = get_settings()

    store = get_knowledge_store()
    store.initialize()

    logger.info(
        "Herbal diagnosis API starting up",
        extra={
            "app_env": settings.app_env,
            "llm_provider": settings.llm_provider,
            "llm_model": settings.resolved_llm_model(),
            "rag_enabled": settings.rag_enabled,
            "prompt_version": settings.prompt_version,
            "documents": len(store.documents()),
            "failed_sources": list(store.failed_sources),
        },
    )
    yield

    close = getattr(get_llm_service(), "close", None)
    if callable(close):
        close()
    logger.info("Herbal diagnosis API shutting down")


def create_app() -> FastAPI:
    # R: Create FastAPI application instance with API metadata
    app = FastAPI(
        title="Herbal Diagnosis API",
        version=__version__,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "diagnosis", "description": "Questionnaire scoring and diagnosis"},
            {"name": "chat", "description": "Follow-up questions"},
            {"name": "history", "description": "Stored diagnoses per user"},
        ],
    )

    # R: Register API routes under /v1 prefix for versioning
    app.include_router(router, prefix="/v1")

    # R: Register exception handlers for structured error responses
    register_exception_handlers(app)

    # R: Health check endpoint for monitoring/orchestration
    @app.get("/healthz")
    def healthz():
        """
        R: Local health check.

        Returns:
            status: "ok" when the corpus is loaded, "degraded" otherwise
            services.rag: "ready" | "partial" | "not_loaded"
            services.llm: provider model id, or "unconfigured"
            timestamp: ISO-8601 UTC
        """
        store = get_knowledge_store()
        if not store.is_initialized:
            rag_status = "not_loaded"
        elif store.failed_sources:
            rag_status = "partial"
        else:
            rag_status = "ready"

        settings = get_settings()
        llm_status = (
            "unconfigured"
            if settings.llm_provider == "none"
            else get_llm_service().model_id
        )

        return {
            "status": "ok" if rag_status == "ready" else "degraded",
            "services": {"rag": rag_status, "llm": llm_status},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()
