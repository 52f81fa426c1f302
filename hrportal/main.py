"""HR Portal — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hrportal.attendance.router import router as attendance_router
from hrportal.calls.router import router as calls_router
from hrportal.common.clock import Clock, SystemClock
from hrportal.common.exceptions import register_exception_handlers
from hrportal.config import settings
from hrportal.core_hr.router import router as employees_router
from hrportal.holidays.router import router as holidays_router
from hrportal.leave.router import router as leave_router
from hrportal.storage import StoreProvider, build_store_provider

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(
    store_provider: Optional[StoreProvider] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The store provider is fixed for the life of the process: the SQL store
    unless ``STORAGE_BACKEND=memory`` or a provider is passed in.
    """
    configure_logging()

    provider = store_provider or build_store_provider(
        settings.STORAGE_BACKEND, settings.DATABASE_URL,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting HR Portal with %s store", type(provider).__name__)
        yield
        await provider.close()

    app = FastAPI(
        title="HR Portal",
        description="Employee directory, attendance, leave, holiday calendar and call-center performance tracking",
        version="1.0.0",
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )
    app.state.store_provider = provider
    app.state.clock = clock or SystemClock(settings.TIMEZONE)

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check (no auth)
    @app.get("/api/v1/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": "1.0.0",
            "environment": settings.ENVIRONMENT,
            "storage": settings.STORAGE_BACKEND if store_provider is None else "custom",
        }

    # Register routers
    app.include_router(employees_router, prefix="/api/v1/employees", tags=["employees"])
    app.include_router(attendance_router, prefix="/api/v1/attendance", tags=["attendance"])
    app.include_router(leave_router, prefix="/api/v1/leave", tags=["leave"])
    app.include_router(calls_router, prefix="/api/v1/calls", tags=["calls"])
    app.include_router(holidays_router, prefix="/api/v1/holidays", tags=["holidays"])

    return app


app = create_app()
