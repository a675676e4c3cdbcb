"""
FastAPI Application Entry Point.

This is the main application file for the FlowManager backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from flowmanager.app.core.config import settings
from flowmanager.app.api.router import router as api_router
from flowmanager.app.core.observability import ObservabilityMiddleware, configure_logging
from flowmanager.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from flowmanager.app.core.redis_client import ping_redis
from flowmanager.app.db.session import AsyncSessionLocal, engine

# Import models to ensure they are registered with Base
from flowmanager.app.models.registry import Base
from flowmanager.app.services.lookups import seed_lookups

configure_logging(settings.log_level)
logger = logging.getLogger("flowmanager.startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Creates database tables on startup.
    2. Makes sure the role, vacation and expense lookup rows exist.
    3. Disposes the engine on shutdown.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as db:
        added = await seed_lookups(db)
    if any(added.values()):
        logger.info("Seeded lookup rows: %s", added)
    logger.info("%s %s started", settings.app_name, settings.version)
    yield
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
    description="Project, time tracking and HR management backend",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.version,
        "redis": "connected" if await ping_redis() else "unavailable",
    }


app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Welcome to FlowManager API",
        "docs": "/docs",
        "health": "/health",
    }
