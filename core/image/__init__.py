"""
Image I/O utilities.

This package provides the collaborators around the pixel transforms:
- converters: PIL <-> PixelBuffer and base64 helpers
- codec: decoding, encoding, format inference and EXIF orientation
"""

from core.image import codec
from core.image.converters import ImageConverters

__all__ = ["ImageConverters", "codec"]
