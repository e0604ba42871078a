"""FastAPI application entry point."""

import asyncio
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.logging import RequestLog, get_client_ip, log_request
from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import (
    admin_router,
    approvals_router,
    calendar_router,
    health_router,
    home_router,
    projects_router,
    timeline_router,
)
from core.backend_client import BackendError, close_http_client
from core.config import API_DEBUG, API_VERSION, BACKEND_URL, LOG_LEVEL, REQUEST_LOG_ENABLED
from core.validation import ValidationError

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    if not BACKEND_URL:
        logger.warning("BACKEND_URL is not set; every backend call will fail")

    yield

    # Shutdown: release pooled backend connections
    await close_http_client()


app = FastAPI(
    title="Kazador Dashboard API",
    description="Calendar, timeline and digest views over the Kazador backend",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _error_response(
    request: Request, status_code: int, error: ErrorResponse, headers: dict[str, str] | None = None
) -> JSONResponse:
    # Picked up by the request-log middleware
    request.state.error_code = error.code
    request.state.error_message = error.error
    request.state.error_details = error.details
    return JSONResponse(status_code=status_code, content=error.model_dump(), headers=headers)


@app.exception_handler(StarletteHTTPException)
async def error_detail_handler(request: Request, exc: StarletteHTTPException):
    """Flatten dict details raised by routes into the standard error body."""
    if isinstance(exc.detail, dict) and "code" in exc.detail:
        return _error_response(request, exc.status_code, ErrorResponse(**exc.detail), headers=exc.headers)
    return await http_exception_handler(request, exc)


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError):
    """Surface backend failures with the backend's own status and message."""
    status_code = exc.status_code if exc.status_code and exc.status_code >= 400 else 502
    logger.warning("Backend call failed (%s): %s", status_code, exc.message)
    return _error_response(
        request,
        status_code,
        ErrorResponse(error=exc.message, code=ErrorCodes.BACKEND_ERROR, details=[]),
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error_response(
        request,
        422,
        ErrorResponse(error="Validation failed", code=ErrorCodes.VALIDATION_ERROR, details=exc.errors),
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(
        request,
        500,
        ErrorResponse(error="Internal server error", code=ErrorCodes.INTERNAL_ERROR, details=[]),
    )


@app.middleware("http")
async def request_log_middleware(request: Request, call_next):
    """Record every request to the api_requests table when REQUEST_LOG_ENABLED."""
    if not REQUEST_LOG_ENABLED:
        return await call_next(request)

    start_time = time.time()
    request_log = RequestLog(
        endpoint=request.url.path,
        method=request.method,
        client_ip=get_client_ip(request),
        query_string=request.url.query or None,
    )
    request_log.status_code = 500
    try:
        response = await call_next(request)
        request_log.status_code = response.status_code
        return response
    except Exception:
        # The global handler runs outside this middleware
        request.state.error_code = ErrorCodes.INTERNAL_ERROR
        request.state.error_message = "Internal server error"
        raise
    finally:
        request_log.error_code = getattr(request.state, "error_code", None)
        request_log.error_message = getattr(request.state, "error_message", None)
        detail_type = "validation_error" if request_log.error_code == ErrorCodes.VALIDATION_ERROR else "backend_error"
        for detail in getattr(request.state, "error_details", []):
            request_log.details.append((detail_type, detail))
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        try:
            await asyncio.to_thread(log_request, request_log)
        except Exception as e:
            # Don't fail the request if logging fails
            logger.warning("Failed to write request log: %s", e)


# Include routers
app.include_router(health_router)
app.include_router(home_router)
app.include_router(calendar_router)
app.include_router(projects_router)
app.include_router(timeline_router)
app.include_router(approvals_router)
app.include_router(admin_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
