"""
Pathfinder - FastAPI Application
Main entry point for the API server
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
import uvicorn
import structlog

from pathfinder.api.routes import auth, connections, device_data, devices, diary, health, logs, profile
from pathfinder.core.config import settings
from pathfinder.core.errors import AppError
from pathfinder.core.logs import LogBuffer, configure_logging

logger = structlog.get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Pathfinder API", environment=settings.environment)
    # Startup
    yield
    # Shutdown
    logger.info("Shutting down Pathfinder API")


def _error_body(request: Request, message: str, **diagnostics) -> dict:
    """``{"message": ...}``, plus diagnostics outside production"""
    body = {"message": message}
    if not settings.is_production:
        body["errorId"] = f"err-{uuid.uuid4().hex[:12]}"
        body["path"] = request.url.path
        body.update(diagnostics)
    return body


async def app_error_handler(request: Request, exc: AppError):
    """Render application errors with their own status"""
    logger.warning("Request failed", status_code=exc.status_code, error=exc.message, path=request.url.path)
    return JSONResponse(status_code=exc.status_code, content=_error_body(request, exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing request fields are a 400"""
    logger.warning("Invalid request data", path=request.url.path)
    return JSONResponse(
        status_code=400,
        content=_error_body(request, "Invalid request data", errors=jsonable_encoder(exc.errors())),
    )


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error("Unhandled exception", exc_info=exc, path=request.url.path)
    return JSONResponse(status_code=500, content=_error_body(request, "Internal server error"))


async def request_logger(request: Request, call_next):
    """Tag each request with an id and log how it went"""
    request_id = request.headers.get("x-request-id") or f"req-{uuid.uuid4().hex[:16]}"
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )

    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    response.headers["X-Request-ID"] = request_id

    if response.status_code >= 500:
        logger.error("Response sent", status_code=response.status_code, duration_ms=duration_ms)
    elif response.status_code >= 400:
        logger.warning("Response sent", status_code=response.status_code, duration_ms=duration_ms)
    else:
        logger.info("Response sent", status_code=response.status_code, duration_ms=duration_ms)
    return response


def create_app(log_buffer: Optional[LogBuffer] = None) -> FastAPI:
    """Build the application around an explicitly owned log buffer"""
    if log_buffer is None:
        log_buffer = LogBuffer(settings.log_buffer_capacity)
    configure_logging(settings.log_level, log_buffer)

    app = FastAPI(
        title="Pathfinder API",
        description="Life-tracking API: accounts, diary, connections and IoT device telemetry",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.log_buffer = log_buffer

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID", "x-api-key"],
    )
    app.middleware("http")(request_logger)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # Include routers
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(profile.router, prefix="/api", tags=["profile"])
    app.include_router(diary.router, prefix="/api", tags=["diary"])
    app.include_router(connections.router, prefix="/api", tags=["connections"])
    app.include_router(devices.router, prefix="/api", tags=["devices"])
    app.include_router(device_data.router, prefix="/api", tags=["device-data"])
    app.include_router(logs.router, prefix="/api", tags=["logs"])

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Pathfinder API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/api/health"
        }

    return app

app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "pathfinder.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info"
    )
