"""
Transform API Router - Pipeline and autorotate on base64 images
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_image_tool_service, get_transform_settings
from api.exceptions import safe_endpoint
from core.image import codec
from core.image.converters import ImageConverters
from core.pixel_buffer import PixelBuffer
from schemas import AutorotateRequest, TransformRequest, TransformResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def decode_base64_image(value: str) -> PixelBuffer:
    """
    Resolve a watermark given inline in a request.

    Only base64 data is accepted over HTTP; file paths are never opened.
    """
    return codec.decode(ImageConverters.base64_to_bytes(value))


def encode_result(result, request, settings) -> TransformResponse:
    """
    Encode a service result for the response.

    The output format defaults to the input format, then to the configured
    default; quality and compression default to the configured values.
    """
    fmt = request.output_format or result.source_format or settings.default_output_format
    quality = request.quality if request.quality is not None else settings.jpeg_quality
    compression = (
        request.compression if request.compression is not None else settings.png_compression
    )

    data = codec.encode(result.buffer, fmt, quality=quality, compression=compression)

    return TransformResponse(
        image=ImageConverters.bytes_to_base64(data),
        width=result.width,
        height=result.height,
        format=fmt,
        processing_time_ms=result.processing_time_ms,
    )


@router.post("")
@safe_endpoint
async def transform(
    request: TransformRequest,
    service=Depends(get_image_tool_service),
    settings=Depends(get_transform_settings),
) -> TransformResponse:
    """
    Run a pipeline of steps over an image.

    Args:
        request: Base64 image, ordered steps and output encoding
        service: Image tool service dependency
        settings: Transform defaults

    Returns:
        TransformResponse with the encoded result
    """
    data = ImageConverters.base64_to_bytes(request.image)
    result = service.apply_steps(
        data,
        request.steps,
        resolve_input=decode_base64_image,
        target_format=request.output_format,
    )

    logger.info(f"Transform with {len(request.steps)} steps took {result.processing_time_ms} ms")
    return encode_result(result, request, settings)


@router.post("/autorotate")
@safe_endpoint
async def autorotate(
    request: AutorotateRequest,
    service=Depends(get_image_tool_service),
    settings=Depends(get_transform_settings),
) -> TransformResponse:
    """Rotate an image upright according to its EXIF orientation."""
    data = ImageConverters.base64_to_bytes(request.image)
    result = service.autorotate(data)
    return encode_result(result, request, settings)
