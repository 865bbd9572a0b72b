# videotube/main.py
from __future__ import annotations

"""
# VideoTube API · Application Entrypoint (FastAPI)

## Layout
- **App factory** (`create_app`) with an explicit lifespan.
- Explicit **middleware order**: request id → security headers → CORS.
- Centralized exception handling (`videotube.core.exception_handlers`).

## Probes
- `/healthz`: liveness (process up).
- `/readyz`: readiness (store reachable).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator
import logging

from fastapi import FastAPI
from starlette.responses import JSONResponse

from videotube.api.v1.routers import build_v1_router
from videotube.core.config import settings
from videotube.core.exception_handlers import install_exception_handlers
from videotube.core.logger import setup_logging
from videotube.db.session import db_healthcheck, dispose_engine, init_models
from videotube.middleware.request_id import RequestIDMiddleware
from videotube.security_headers import configure_cors, install_security

logger = logging.getLogger("videotube")


# ─────────────────────────────────────────────────────────────────────────────
# 🔄 Lifespan: startup & shutdown
# ─────────────────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Startup:
        - Create missing tables when `DB_AUTO_CREATE` is on (dev only).

    Shutdown:
        - Dispose the async engine, if one was created.
    """
    logger.info("✅ %s starting up (%s)", settings.PROJECT_NAME, settings.ENV)
    if settings.DB_AUTO_CREATE and settings.STORE_BACKEND == "sql":
        await init_models()
        logger.info("🗄️ Database tables ensured")

    try:
        yield
    finally:
        await dispose_engine()
        logger.info("🛑 %s shutting down", settings.PROJECT_NAME)


# ─────────────────────────────────────────────────────────────────────────────
# 🏗️ App factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    """Build the FastAPI app with middleware, exception handlers, routers and probes."""
    setup_logging()

    docs_url = "/docs" if settings.ENABLE_DOCS else None
    redoc_url = "/redoc" if settings.ENABLE_DOCS else None
    openapi_url = "/openapi.json" if settings.ENABLE_DOCS else None

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
        lifespan=lifespan,
    )

    # ── Middlewares (added last runs first) ─────────────────────────────────
    configure_cors(app)
    install_security(app)
    app.add_middleware(RequestIDMiddleware)

    install_exception_handlers(app)

    # ── Routers (versioned API) ─────────────────────────────────────────────
    app.include_router(build_v1_router(), prefix=settings.API_V1_STR)

    # ── Meta endpoints ──────────────────────────────────────────────────────
    @app.get("/healthz", tags=["meta"])
    async def healthz() -> dict[str, bool]:
        """Liveness probe; no external checks."""
        return {"ok": True}

    @app.get("/readyz", tags=["meta"])
    async def readyz() -> JSONResponse:
        ready = await db_healthcheck()
        return JSONResponse({"ready": ready, "checks": {"store": ready}}, status_code=200 if ready else 503)

    return app


# ─────────────────────────────────────────────────────────────────────────────
# 🚀 Module-level ASGI app for Uvicorn/Gunicorn
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()
__all__ = ["create_app", "app"]


# Local dev runner (prefer: `uvicorn videotube.main:app --reload`)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("videotube.main:app", host="0.0.0.0", port=8000, reload=False)
