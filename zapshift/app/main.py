"""
FastAPI Application Entry Point.

This is the main application file for the Zap Shift backend.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from zapshift.app.api.router import router as api_router
from zapshift.app.core.config import settings
from zapshift.app.core.exceptions import (
    AppException,
    app_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from zapshift.app.core.observability import ObservabilityMiddleware, configure_logging
from zapshift.app.core.redis_client import ping_redis
from zapshift.app.db.session import Base, engine

# Import models to ensure they are registered with Base
from zapshift.app.models.account import Account
from zapshift.app.models.cashout import CashoutRequest
from zapshift.app.models.parcel import Parcel
from zapshift.app.models.payment import PaymentRecord
from zapshift.app.models.rider import Rider
from zapshift.app.models.tracking_event import TrackingEvent

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    Creates database tables on startup and disposes the engine on shutdown.
    """
    configure_logging(settings.log_level)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started", settings.app_name)
    yield
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Backend for the Zap Shift parcel delivery marketplace",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/", response_class=PlainTextResponse, tags=["Root"])
async def root():
    """Liveness text."""
    return "Zap shift server is running"


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status, application information and Redis reachability
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
        "redis": await ping_redis(),
    }


app.include_router(api_router)


def run():
    """Console entry point: serve the app on the configured port."""
    uvicorn.run("zapshift.app.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
