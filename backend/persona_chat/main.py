"""
Persona Chat - FastAPI application.

Routers: /sessions, /personas, /chat. Services are wired once at startup by
init_services(); tests call init_services() themselves with in-memory storage.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import chat_router, init_services, personas_router, sessions_router
from .config import settings
from .core.logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings)
    store = init_services()

    info = await store.storage_info()
    logger.info(
        f"{settings.app_name} v{settings.app_version} ready",
        extra={"extra_fields": {
            "storage_path": settings.local_storage_path,
            "sessions": info.session_count,
            "llm_provider": settings.llm_provider,
            "llm_configured": bool(settings.llm_api_key),
            "debug": settings.debug,
        }}
    )
    if info.warning:
        logger.warning(f"Session storage at {info.usage_ratio:.0%} of its {info.total} byte budget")

    yield
    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Role-play chat with historical and literary personas",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Added last, so it is the outermost layer
if settings.log_api_requests:
    app.add_middleware(RequestLoggingMiddleware)

for router in (sessions_router, personas_router, chat_router):
    app.include_router(router)


@app.get("/")
async def root():
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Liveness probe; also reports whether chat can reach an LLM."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "llm_provider": settings.llm_provider,
        "llm_configured": bool(settings.llm_api_key),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("persona_chat.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
