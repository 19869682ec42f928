"""FastAPI application factory for quota-gate."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quota_gate.common.config import get_settings
from quota_gate.common.handlers import register_error_handlers
from quota_gate.common.logging import setup_logging
from quota_gate.common.schemas import HealthResponse


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        from quota_gate.deps import get_db
        db = get_db()
        await db.init()
        await db.create_all()
        yield
        # Shutdown
        await db.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_error_handlers(app)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse(version=settings.api_version)

    # Mount routers
    from quota_gate.content.router import router as content_router
    from quota_gate.users.router import router as users_router

    prefix = settings.api_prefix
    app.include_router(content_router, prefix=prefix, tags=["content"])
    app.include_router(users_router, prefix=prefix, tags=["user"])

    return app
