"""
Main FastAPI application for Serverless Spark Logs.

This module provides the FastAPI application with CORS, request logging,
error handling, and route registration for the batch and session endpoints.
"""

import sys
import traceback
from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from api.batches import router as batches_router
from api.operations import router as operations_router
from api.sessions import router as sessions_router
from config.settings import get_settings
from integrations.gcp_dataproc import get_dataproc_client
from integrations.gcp_logging import get_logging_client
from utils.exceptions import ServerlessSparkError

settings = get_settings()


def configure_logging() -> None:
    """Route loguru output to stderr and, if configured, a rotating file."""
    logger.remove()
    # JSON lines in production for the log collector
    logger.add(sys.stderr, level=settings.LOG_LEVEL, serialize=settings.is_production)
    if settings.LOG_FILE:
        logger.add(
            settings.LOG_FILE,
            rotation="100 MB",
            retention="30 days",
            level=settings.LOG_LEVEL,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}"
        )


def _error_body(request: Request, status_code: int, error: str, message: str) -> dict:
    return {
        "error": error,
        "status_code": status_code,
        "message": message,
        "timestamp": datetime.utcnow().isoformat(),
        "path": str(request.url.path)
    }


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging and timing."""

    async def dispatch(self, request: Request, call_next):
        start_time = datetime.utcnow()

        logger.info(
            f"Incoming request: {request.method} {request.url.path} "
            f"from {request.client.host if request.client else 'unknown'}"
        )

        try:
            response = await call_next(request)

            process_time = (datetime.utcnow() - start_time).total_seconds()
            response.headers["X-Process-Time"] = str(process_time)

            logger.info(
                f"Response: {request.method} {request.url.path} "
                f"-> {response.status_code} ({process_time:.3f}s)"
            )

            return response

        except Exception as e:
            process_time = (datetime.utcnow() - start_time).total_seconds()
            logger.error(
                f"Request failed: {request.method} {request.url.path} "
                f"-> ERROR ({process_time:.3f}s): {str(e)}"
            )
            raise


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for global error handling."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Unhandled exception in {request.method} {request.url.path}: {str(e)}")
            logger.error(f"Traceback: {traceback.format_exc()}")

            return JSONResponse(
                status_code=500,
                content=_error_body(request, 500, "Internal server error", "An unexpected error occurred")
            )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""

    configure_logging()
    logger.info(
        f"Starting {settings.APP_NAME} for project {settings.GCP_PROJECT_ID} "
        f"in {settings.GCP_LOCATION}..."
    )

    try:
        yield
    finally:
        logger.info(f"Shutting down {settings.APP_NAME}...")

        # Only close clients that were actually created
        if get_logging_client.cache_info().currsize:
            get_logging_client().close()
        if get_dataproc_client.cache_info().currsize:
            get_dataproc_client().close()

        logger.info("Application shutdown completed successfully")


app = FastAPI(
    title=settings.APP_NAME,
    description="Cloud Logging entries and console links for Serverless Spark batches and sessions",
    version=settings.VERSION,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url=None if settings.is_production else "/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Accept", "Content-Type", "Authorization"],
    expose_headers=["X-Process-Time"]
)

app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(ServerlessSparkError)
async def serverless_spark_error_handler(request: Request, exc: ServerlessSparkError):
    """Invalid input becomes 400; failed backend calls become 502."""

    if isinstance(exc, ValueError):
        logger.warning(f"Invalid request {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content=_error_body(request, 400, "Bad Request", str(exc)))

    logger.error(f"Backend failure in {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content=_error_body(request, 502, "Bad Gateway", str(exc)))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with structured error response."""

    logger.warning(
        f"HTTP exception in {request.method} {request.url.path}: "
        f"{exc.status_code} - {exc.detail}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, "HTTP Error", str(exc.detail))
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle ValueError exceptions."""

    logger.warning(f"ValueError in {request.method} {request.url.path}: {str(exc)}")

    return JSONResponse(status_code=400, content=_error_body(request, 400, "Bad Request", str(exc)))


@app.get("/health", tags=["Health"])
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": settings.VERSION,
        "service": settings.APP_NAME
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with basic API information."""
    return {
        "service": settings.APP_NAME,
        "version": settings.VERSION,
        "project": settings.GCP_PROJECT_ID,
        "location": settings.GCP_LOCATION,
        "health": "/health",
        "endpoints": {
            "batches": "/api/v1/batches",
            "sessions": "/api/v1/sessions",
            "operations": "/api/v1/operations"
        },
        "timestamp": datetime.utcnow().isoformat()
    }


app.include_router(
    batches_router,
    prefix="/api/v1/batches",
    tags=["Batches"]
)

app.include_router(
    sessions_router,
    prefix="/api/v1/sessions",
    tags=["Sessions"]
)

app.include_router(
    operations_router,
    prefix="/api/v1/operations",
    tags=["Operations"]
)


if __name__ == "__main__":
    configure_logging()

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info" if settings.DEBUG else "warning",
        access_log=settings.DEBUG,
        loop="asyncio"
    )
