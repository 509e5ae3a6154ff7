"""Main FastAPI Application

ASGI entry point for the application lifecycle tracker. This module wires
middleware, global exception handlers, the activity recompute worker and
the API routers from `presentation`.

Run locally for development with:

    uvicorn main:socket_app --reload

Keep application logic in `application`, `domain` and `infrastructure`
to preserve a clean architecture.
"""
from contextlib import asynccontextmanager

import socketio
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from core.config import settings
from core.database import init_db, close_db, health_check
from core.logging_config import configure_logging
from core.exceptions import (
    DomainException,
    InvalidStateException,
    NoOpTransitionException,
    ValidationException,
    ResourceNotFoundException,
)
from application.services.recompute_worker import RecomputeWorker, set_recompute_worker
from infrastructure.realtime import sio
from presentation.api.v1.container import recompute_in_new_session
from presentation.api.v1.endpoints import (
    applications_router,
    conversations_router,
    interviews_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info(f"🚀 Starting {settings.APP_NAME} ({settings.ENVIRONMENT})...")

    await init_db()
    logger.info("✅ Database initialized")

    worker = None
    if settings.RECOMPUTE_WORKER_ENABLED:
        worker = RecomputeWorker(recompute_in_new_session)
        await worker.start()
        set_recompute_worker(worker)

    yield

    # Shutdown
    logger.info("👋 Shutting down gracefully...")
    if worker is not None:
        await worker.stop()
        set_recompute_worker(None)

    await close_db()
    logger.info("✅ Database connections closed")


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Job application stage tracking with derived activity timestamps",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global Exception Handler
@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    """Handle domain-level exceptions"""
    logger.warning(f"Domain exception: {str(exc)}")

    if isinstance(exc, ValidationException):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(exc, ResourceNotFoundException):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (InvalidStateException, NoOpTransitionException)):
        status_code = status.HTTP_409_CONFLICT
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    content = {"detail": str(exc), "error": type(exc).__name__}
    if isinstance(exc, ValidationException):
        content["field"] = exc.field

    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler"""
    logger.opt(exception=exc).error(f"Unhandled exception: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


# Include API routes
app.include_router(
    applications_router,
    prefix="/api/v1",
    tags=["Applications"]
)

app.include_router(
    interviews_router,
    prefix="/api/v1",
    tags=["Interview Rounds"]
)

app.include_router(
    conversations_router,
    prefix="/api/v1",
    tags=["Conversations"]
)


@app.get("/health", tags=["Health"])
async def health():
    """Liveness plus database reachability"""
    db_ok = await health_check()
    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "up" if db_ok else "down",
        "version": "1.0.0",
    }


# Wrap FastAPI with Socket.IO
socket_app = socketio.ASGIApp(
    sio,
    app,
    socketio_path='/socket.io'
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:socket_app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
