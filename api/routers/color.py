"""
Color API Router - Average and dominant color extraction
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_image_tool_service
from api.exceptions import safe_endpoint
from core.image.converters import ImageConverters
from schemas import ColorRequest, ColorResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/average")
@safe_endpoint
async def average(request: ColorRequest, service=Depends(get_image_tool_service)) -> ColorResponse:
    """Average color of an image."""
    data = ImageConverters.base64_to_bytes(request.image)
    color = service.average_color(data, request.format)
    return ColorResponse(color=color, format=request.format)


@router.post("/dominant")
@safe_endpoint
async def dominant(request: ColorRequest, service=Depends(get_image_tool_service)) -> ColorResponse:
    """
    Dominant color of an image.

    The image is sampled at 100x100 and only the top-left quarter of the
    sample is counted.
    """
    data = ImageConverters.base64_to_bytes(request.image)
    color = service.dominant_color(data, request.format)
    return ColorResponse(color=color, format=request.format)
