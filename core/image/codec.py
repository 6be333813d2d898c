"""
Pillow-backed image codec.

Decodes byte streams and files into PixelBuffers and encodes buffers back,
with JPEG/WEBP quality and PNG compression parameters. The output format is
chosen by file extension.
"""

import io
import logging
import os
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from core.constants import ErrorMessages, OrientationConstants, OutputDefaults
from core.enums import ImageFormat
from core.exceptions import EncodingFailure, InvalidInput, InvalidParameter
from core.image.converters import ImageConverters
from core.pixel_buffer import PixelBuffer
from core.utils.decorators import log_duration
from core.utils.filesystem import ensure_parent_dirs

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def format_from_path(path: Optional[PathLike]) -> Optional[ImageFormat]:
    """
    Infer image format from a file extension.

    Returns:
        ImageFormat or None if the path is empty or the extension unknown
    """
    if not path:
        return None
    extension = Path(path).suffix.lower().lstrip(".")
    extension = OutputDefaults.EXTENSION_ALIASES.get(extension, extension)
    try:
        return ImageFormat(extension)
    except ValueError:
        return None


def _open(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
        return image
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        logger.error(f"Failed to decode image: {e}")
        raise InvalidInput(ErrorMessages.UNREADABLE_IMAGE.format(error=e)) from e


@log_duration
def decode(data: bytes) -> PixelBuffer:
    """
    Decode an encoded image into an RGBA buffer.

    Raises:
        InvalidInput: If the bytes are not a readable image
    """
    if not data:
        raise InvalidInput(ErrorMessages.UNREADABLE_IMAGE.format(error="empty input"))
    return ImageConverters.pil_to_buffer(_open(data))


def detect_format(data: bytes) -> Optional[ImageFormat]:
    """Format of an encoded image, or None if it is not one of ImageFormat."""
    name = _open(data).format or ""
    value = OutputDefaults.PIL_FORMAT_NAMES.get(name.upper())
    return ImageFormat(value) if value else None


def read_orientation(data: bytes) -> Optional[int]:
    """
    Read the EXIF orientation tag.

    Returns:
        Orientation 1..8, or None if the image has no (valid) tag
    """
    image = _open(data)
    try:
        exif = image.getexif()
    except (OSError, ValueError, SyntaxError) as e:
        # corrupt EXIF block, the pixels are still usable
        logger.warning(f"Failed to read EXIF data: {e}")
        return None

    orientation = exif.get(OrientationConstants.EXIF_TAG)
    if orientation in OrientationConstants.VALID_VALUES:
        return int(orientation)
    return None


@log_duration
def encode(
    buffer: PixelBuffer,
    fmt: Union[ImageFormat, str],
    quality: int = OutputDefaults.QUALITY,
    compression: int = OutputDefaults.COMPRESSION,
) -> bytes:
    """
    Encode a buffer.

    Args:
        buffer: Pixels to encode
        fmt: Target format
        quality: 0..100, used by JPEG and WEBP
        compression: 0..9, used by PNG

    Returns:
        Encoded bytes

    Raises:
        InvalidParameter: If format, quality or compression is invalid
        EncodingFailure: If Pillow fails to encode
    """
    try:
        fmt = ImageFormat(fmt)
    except ValueError:
        raise InvalidParameter("format", fmt, "unsupported output format")
    if not OutputDefaults.MIN_QUALITY <= quality <= OutputDefaults.MAX_QUALITY:
        raise InvalidParameter("quality", quality, "must be within 0..100")
    if not OutputDefaults.MIN_COMPRESSION <= compression <= OutputDefaults.MAX_COMPRESSION:
        raise InvalidParameter("compression", compression, "must be within 0..9")

    image = ImageConverters.buffer_to_pil(buffer, keep_alpha=fmt.supports_alpha)
    save_kwargs = {"format": fmt.pil_format}

    if fmt in (ImageFormat.JPG, ImageFormat.WEBP):
        save_kwargs["quality"] = quality
    if fmt is ImageFormat.JPG:
        save_kwargs["optimize"] = True
    elif fmt is ImageFormat.PNG:
        save_kwargs["compress_level"] = compression

    output = io.BytesIO()
    try:
        image.save(output, **save_kwargs)
    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Failed to encode image as {fmt.value}: {e}")
        raise EncodingFailure(ErrorMessages.ENCODE_FAILED.format(format=fmt.value, error=e)) from e

    return output.getvalue()


def load(path: PathLike) -> PixelBuffer:
    """
    Read and decode an image file.

    Raises:
        InvalidInput: If the file is missing or not an image
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise InvalidInput(ErrorMessages.UNREADABLE_IMAGE.format(error=e)) from e
    return decode(data)


def save(
    buffer: PixelBuffer,
    path: PathLike,
    quality: int = OutputDefaults.QUALITY,
    compression: int = OutputDefaults.COMPRESSION,
) -> Path:
    """
    Encode a buffer and write it to path; format follows the extension.

    Raises:
        InvalidParameter: If the extension is not a supported format
        EncodingFailure: If encoding or writing fails
    """
    fmt = format_from_path(path)
    if fmt is None:
        raise InvalidParameter(
            "output", str(path), ErrorMessages.UNKNOWN_OUTPUT_FORMAT.format(path=path)
        )

    data = encode(buffer, fmt, quality=quality, compression=compression)
    ensure_parent_dirs(path)

    target = Path(path)
    try:
        target.write_bytes(data)
    except OSError as e:
        raise EncodingFailure(ErrorMessages.ENCODE_FAILED.format(format=fmt.value, error=e)) from e

    logger.info(f"Saved {buffer.width}x{buffer.height} image to {target}")
    return target
