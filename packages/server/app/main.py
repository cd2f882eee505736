"""
Taskforge API server.

``create_app()`` wires logging, middleware, error handlers and the v1 routers.
"""

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1 import router as api_v1_router
from app.core.config import get_settings
from app.core.database import async_session_factory
from app.core.errors import error_response, register_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import SecurityHeadersMiddleware
from app.core.redis import close_redis

settings = get_settings()
log = structlog.get_logger()


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Taskforge",
        description="Tenant-scoped tasks, dependency graph, task statuses and sprints.",
        version="0.1.0",
    )

    app.add_middleware(SecurityHeadersMiddleware, hsts=not settings.debug)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Content-Type", settings.tenant_header],
    )
    register_exception_handlers(app)
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/health", tags=["System"])
    async def health_check():
        """Liveness: the process is up."""
        return {"status": "ok"}

    @app.get("/ready", tags=["System"])
    async def readiness_check():
        """Readiness: the database answers."""
        try:
            async with async_session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            log.warning("readiness.database_unavailable", error=str(exc))
            return error_response(503, "UNAVAILABLE", "Database unavailable")
        return {"status": "ready"}

    @app.on_event("startup")
    async def on_startup():
        log.info("taskforge.starting", debug=settings.debug, tenant_header=settings.tenant_header)

    @app.on_event("shutdown")
    async def on_shutdown():
        log.info("taskforge.stopping")
        await close_redis()

    return app


app = create_app()
