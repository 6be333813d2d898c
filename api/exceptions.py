"""
Exception handling for the HTTP API.

Toolkit errors are mapped to status codes by exception handlers registered on
the app; safe_endpoint turns anything unexpected into a logged 500.
"""

import functools
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from core.exceptions import ImageToolError, InvalidInput, InvalidParameter

logger = logging.getLogger(__name__)

# every other ImageToolError is a server error
CLIENT_ERRORS = (InvalidInput, InvalidParameter)


def status_code_for(error: ImageToolError) -> int:
    """HTTP status code for a toolkit error."""
    return 400 if isinstance(error, CLIENT_ERRORS) else 500


async def image_tool_error_handler(request: Request, exc: ImageToolError) -> JSONResponse:
    """Render a toolkit error as {"error", "type"} JSON."""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Register toolkit exception handlers on the app."""
    app.add_exception_handler(ImageToolError, image_tool_error_handler)


def safe_endpoint(func):
    """
    Decorator for async endpoints.

    Toolkit errors and HTTPExceptions propagate to their handlers; any other
    exception is logged with traceback and converted to a 500.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (HTTPException, ImageToolError):
            raise
        except Exception as e:
            logger.exception(f"Unexpected error in {func.__name__}: {e}")
            raise HTTPException(status_code=500, detail=f"Internal server error: {e}") from e

    return wrapper
