"""
Exception Handlers for the FastAPI Application.

``AppError`` raised by the service layer becomes a JSON body
``{"message", "code"}`` with the status mapped from its code. Failures of the
outbound integrations become 502 responses. Anything else is caught by the
global handler, which logs the full request context and returns a 500 with an
error ID that clients can quote when reporting issues.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from signflow.core.errors import AppError
from signflow.core.logging_config import get_logger
from signflow.integrations.laravel import LaravelApiError
from signflow.integrations.resident import ResidentServiceError

logger = get_logger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    status, body = exc.to_rest_api_error()
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
    else:
        logger.debug(f"{request.method} {request.url.path} -> {status}: {exc.message}")
    return JSONResponse(status_code=status, content={**body, "code": exc.code.value})


async def integration_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Upstream service failures (Laravel, resident service)."""
    logger.error(
        f"Upstream call failed in {request.method} {request.url.path}: {exc}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "error_type": type(exc).__name__,
            "upstream_status": getattr(exc, "status_code", None),
        },
    )
    return JSONResponse(
        status_code=502,
        content={"message": str(exc), "code": "UPSTREAM_ERROR"},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(LaravelApiError, integration_error_handler)
    app.add_exception_handler(ResidentServiceError, integration_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
