"""
Exception handling for the HTTP API.

Maps the core exception hierarchy onto HTTP status codes and provides the
safe_endpoint decorator used by every router.
"""

import functools
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from core.exceptions import (
    DecodeError,
    EngineFailure,
    ImageNotFoundError,
    ImageScienceError,
    InvalidDimensionError,
    OutOfBoundsError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)

# Most specific classes first
ERROR_STATUS_CODES = (
    (ImageNotFoundError, 404),
    (DecodeError, 400),
    (InvalidDimensionError, 422),
    (OutOfBoundsError, 422),
    (UnsupportedFormatError, 415),
    (EngineFailure, 500),
)


class PayloadTooLargeException(HTTPException):
    """Uploaded image exceeds the configured size limit"""

    def __init__(self, size_mb: float, limit_mb: float):
        super().__init__(
            status_code=413,
            detail=f"Image payload is {size_mb:.1f} MB, limit is {limit_mb:.1f} MB",
        )


def status_code_for(exc: ImageScienceError) -> int:
    """HTTP status code for a core exception."""
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return 500


async def image_error_handler(request: Request, exc: ImageScienceError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers for the core exception hierarchy."""
    app.add_exception_handler(ImageScienceError, image_error_handler)


def safe_endpoint(func):
    """
    Wrap an async endpoint so unexpected errors become a logged 500.

    HTTP and core image exceptions pass through to their registered handlers.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (HTTPException, ImageScienceError):
            raise
        except Exception as e:
            logger.error(f"Unhandled error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return wrapper
