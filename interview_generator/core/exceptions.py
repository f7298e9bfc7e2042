"""
Custom exceptions for the AI Interview Generator.

This module defines a hierarchy of exceptions shared by the server routes
(checkout, export) and the client components (checkout initiator, job
lifecycle controller, export transport), plus the FastAPI handlers that turn
them into JSON error bodies.
"""
import logging
from typing import Optional
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ============================================================================
# Custom Exception Classes
# ============================================================================

class AppError(Exception):
    """Base exception for all application errors."""
    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(AppError):
    """Raised when required configuration (e.g. Stripe keys) is missing."""
    status_code = 500


class ExportValidationError(AppError):
    """Raised by the export encoder for bad tables, formats or record lists."""
    status_code = 400


class CheckoutError(AppError):
    """Raised when a checkout session cannot be created or redirected to."""
    status_code = 400


class ExportError(AppError):
    """Raised by the export transport when the export boundary answers non-2xx."""

    def __init__(self, status: int, message: Optional[str] = None, details: Optional[dict] = None):
        self.status = status
        super().__init__(message or f"Export failed with status: {status}", details)


class JobStartError(AppError):
    """Raised when the generation backend refuses to start a job."""
    pass


class JobStatusError(AppError):
    """Raised when a job status request fails or cannot be parsed."""
    pass


# ============================================================================
# FastAPI Exception Handlers
# ============================================================================

async def app_error_handler(request: Request, exc: AppError):
    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()) if part != 'body')}: {err.get('msg')}"
        for err in errors
    ) or "Invalid request"
    logger.warning(f"Request validation failed on {request.url.path}: {message}")
    return JSONResponse(
        status_code=422,
        content={"error": message},
    )

async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error", "error": str(exc)},
    )

async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning(f"HTTP exception: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
