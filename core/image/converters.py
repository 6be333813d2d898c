"""
Image format conversion utilities.

Handles conversions between different image representations:
- PixelBuffer (RGBA NumPy array)
- PIL Images (any mode)
- Base64 encoded strings
"""

import base64
import binascii
import io
import logging
import os

import numpy as np
from PIL import Image

from core.exceptions import InvalidInput
from core.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class ImageConverters:
    """Utilities for converting between image representations."""

    @staticmethod
    def pil_to_buffer(image: Image.Image) -> PixelBuffer:
        """
        Convert PIL Image to PixelBuffer.

        Palette, grayscale and CMYK images are converted to RGBA; palette
        transparency is preserved.

        Args:
            image: PIL Image in any mode

        Returns:
            PixelBuffer in RGBA order
        """
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return PixelBuffer(np.array(image, dtype=np.uint8))

    @staticmethod
    def buffer_to_pil(buffer: PixelBuffer, keep_alpha: bool = True) -> Image.Image:
        """
        Convert PixelBuffer to PIL Image.

        Args:
            buffer: Source buffer
            keep_alpha: If False, drop the alpha channel (RGB image)

        Returns:
            PIL Image in RGBA or RGB mode
        """
        if keep_alpha:
            return Image.fromarray(buffer.pixels)
        return Image.fromarray(np.ascontiguousarray(buffer.rgb))

    @staticmethod
    def bytes_to_base64(data: bytes) -> str:
        """Encode raw image bytes as base64 string."""
        return base64.b64encode(data).decode("utf-8")

    @staticmethod
    def base64_to_bytes(base64_string: str) -> bytes:
        """
        Decode base64 string (optionally a data URL) to raw bytes.

        Raises:
            InvalidInput: If the string is not valid base64
        """
        if base64_string.startswith("data:") and "," in base64_string:
            base64_string = base64_string.split(",", 1)[1]

        try:
            return base64.b64decode(base64_string, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error(f"Failed to decode base64 image: {e}")
            raise InvalidInput(f"Invalid base64 image data: {e}") from e

    @staticmethod
    def is_base64_image(value: str) -> bool:
        """
        Check whether a string holds an image rather than naming a file.

        Data URLs always count as images. Anything that names an existing file
        is a path; otherwise the string must decode as strict base64 into
        something Pillow recognizes.
        """
        if value.startswith("data:"):
            return True
        if os.path.isfile(value):
            return False
        try:
            data = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            return False
        try:
            with Image.open(io.BytesIO(data)):
                return True
        except Image.DecompressionBombError:
            return True
        except OSError:
            return False
