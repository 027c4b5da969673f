import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dashboard_backend.application import build_services
from dashboard_backend.core.settings import Settings
from dashboard_backend.core.validation import DashboardError
from dashboard_backend.infrastructure import BlobStore
from dashboard_backend.routes import feedback, status, time_saved, upload, workflow_data

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: BlobStore | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    services = build_services(settings, store)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Storage backend: %s", settings.storage_backend)
        yield
        await services.notifier.drain()

    app = FastAPI(title="Pricing Workflow Dashboard API", version="0.1.0", lifespan=lifespan)
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(request: Request, exc: DashboardError) -> JSONResponse:
        level = logging.WARNING if exc.status_code < 500 else logging.ERROR
        logger.log(level, "%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(workflow_data.router, prefix="/api")
    app.include_router(upload.router, prefix="/api")
    app.include_router(time_saved.router, prefix="/api")
    app.include_router(feedback.router, prefix="/api")
    app.include_router(status.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Point health checks and browsers at the API docs and storage status."""
        return JSONResponse(
            {
                "message": "Pricing Workflow Dashboard API",
                "docs": "/docs",
                "health": "/api/storage-status",
            }
        )

    return app


app = create_app()
