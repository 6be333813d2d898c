"""
Image transformation API models.

This module contains models for the HTTP surface:
- transform / autorotate requests and the encoded image response
- color analysis requests and responses
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from core.constants import ColorAnalysisConstants, OutputDefaults
from core.enums import ColorFormat, ImageFormat


class TransformRequest(BaseModel):
    """Request to run a pipeline of steps over one image"""

    image: str = Field(..., description="Base64 encoded image (data URL accepted)")
    steps: List[Dict[str, Any]] = Field(
        default_factory=list, description="Pipeline steps, each with an 'op' key"
    )
    output_format: Optional[ImageFormat] = Field(
        default=None, description="Encoding of the result; defaults to the input format"
    )
    quality: Optional[int] = Field(
        default=None,
        ge=OutputDefaults.MIN_QUALITY,
        le=OutputDefaults.MAX_QUALITY,
        description="JPEG/WEBP quality",
    )
    compression: Optional[int] = Field(
        default=None,
        ge=OutputDefaults.MIN_COMPRESSION,
        le=OutputDefaults.MAX_COMPRESSION,
        description="PNG compression level",
    )


class AutorotateRequest(BaseModel):
    """Request to undo the EXIF orientation of an image"""

    image: str = Field(..., description="Base64 encoded image")
    output_format: Optional[ImageFormat] = None
    quality: Optional[int] = Field(
        default=None, ge=OutputDefaults.MIN_QUALITY, le=OutputDefaults.MAX_QUALITY
    )
    compression: Optional[int] = Field(
        default=None, ge=OutputDefaults.MIN_COMPRESSION, le=OutputDefaults.MAX_COMPRESSION
    )


class TransformResponse(BaseModel):
    """Encoded result of a transform"""

    image: str = Field(..., description="Base64 encoded result")
    width: int
    height: int
    format: ImageFormat
    processing_time_ms: int


class ColorRequest(BaseModel):
    """Request to extract a color from an image"""

    image: str = Field(..., description="Base64 encoded image")
    format: ColorFormat = Field(
        default=ColorFormat(ColorAnalysisConstants.DEFAULT_FORMAT), description="int or hex"
    )


class ColorResponse(BaseModel):
    """Extracted color"""

    color: Union[int, str]
    format: ColorFormat
