"""
Core modules for the raster toolkit
"""

from .exceptions import (
    AllocationFailure,
    CompositingFailure,
    EncodingFailure,
    ImageToolError,
    InvalidInput,
    InvalidParameter,
    OutputPathError,
)
from .pixel_buffer import PixelBuffer, Rect

__all__ = [
    "PixelBuffer",
    "Rect",
    "ImageToolError",
    "InvalidInput",
    "InvalidParameter",
    "AllocationFailure",
    "CompositingFailure",
    "EncodingFailure",
    "OutputPathError",
]
