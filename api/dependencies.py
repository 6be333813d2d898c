"""
Shared FastAPI dependencies for the raster toolkit API.
"""

import logging

from fastapi import HTTPException, Request

from services.image_tool_service import ImageToolService

logger = logging.getLogger(__name__)


def get_image_tool_service(request: Request) -> ImageToolService:
    """
    Get the image tool service from app state.

    Args:
        request: FastAPI request object

    Returns:
        ImageToolService instance

    Raises:
        HTTPException: If the service is not initialized
    """
    service = getattr(request.app.state, "image_tool_service", None)
    if service is None:
        logger.error("Image tool service not initialized")
        raise HTTPException(status_code=500, detail="Image tool service not initialized")
    return service


def get_transform_settings(request: Request):
    """Transform defaults (output format, quality, compression) from app state."""
    settings = getattr(request.app.state, "transform_settings", None)
    if settings is None:
        raise HTTPException(status_code=500, detail="Settings not initialized")
    return settings
