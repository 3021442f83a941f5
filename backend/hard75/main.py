"""75 Hard PMS-Safe - FastAPI Application Entry Point."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError

from hard75.config import get_settings
from hard75.database import engine, Base
from hard75.logging_config import setup_logging
from hard75.routers import (
    auth_router,
    dashboard_router,
    days_router,
    tasks_router,
    pms_safe_router,
    progress_router,
)


settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging()
    # Startup: Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("%s started", settings.app_name)
    yield


app = FastAPI(
    title="75 Hard PMS-Safe API",
    description="75 Hard challenge tracking with cycle-aware PMS-Safe mode",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        settings.frontend_url,
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Store failures surface as a generic, retryable error."""
    logger.error(
        "Database error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Something went wrong. Please try again."},
    )


# Include routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(dashboard_router, prefix="/api/v1")
app.include_router(days_router, prefix="/api/v1")
app.include_router(tasks_router, prefix="/api/v1")
app.include_router(pms_safe_router, prefix="/api/v1")
app.include_router(progress_router, prefix="/api/v1")


@app.get("/")
def root():
    """Root endpoint with API info."""
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}
