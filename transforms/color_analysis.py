"""
Average and dominant color extraction.

Both work on a copy of the image composited over opaque black, so fully
transparent pixels count as black whatever color they carry; the input
buffer is never modified.
"""

import logging
from typing import Union

import numpy as np

from core.color_model import format_color, unpack_rgb
from core.compositor import flatten
from core.constants import BufferConstants, ColorAnalysisConstants
from core.enums import ColorFormat
from core.pixel_buffer import PixelBuffer
from core.resampler import block_means, resample

logger = logging.getLogger(__name__)

ColorResult = Union[int, str]


def _over_black(buffer: PixelBuffer) -> PixelBuffer:
    return flatten(buffer, BufferConstants.BLACK)


def average_color(
    buffer: PixelBuffer, fmt: Union[ColorFormat, str] = ColorFormat.INT
) -> ColorResult:
    """
    Average color of the whole image.

    The mean is exact and rounded half up, the same rounding pixelate uses.

    Args:
        buffer: Source buffer
        fmt: "int" for a packed 0xRRGGBB value, "hex" for 6 hex digits

    Returns:
        Packed int or hex string

    Raises:
        InvalidParameter: If fmt is unknown
    """
    opaque = _over_black(buffer)
    mean = block_means(opaque.rgb, max(opaque.width, opaque.height))[0, 0]
    return format_color(tuple(int(channel) for channel in mean), fmt)


def dominant_color(
    buffer: PixelBuffer, fmt: Union[ColorFormat, str] = ColorFormat.INT
) -> ColorResult:
    """
    Most frequent color of the image.

    The image is downsampled to 100x100 and only its top-left 50x50 quadrant
    is counted. Ties go to the color seen first in row-major order.

    Args:
        buffer: Source buffer
        fmt: "int" for a packed 0xRRGGBB value, "hex" for 6 hex digits

    Returns:
        Packed int or hex string

    Raises:
        InvalidParameter: If fmt is unknown
    """
    sample_size = ColorAnalysisConstants.DOMINANT_SAMPLE_SIZE
    region_size = ColorAnalysisConstants.DOMINANT_REGION_SIZE

    sample = resample(_over_black(buffer), sample_size, sample_size)
    region = sample.rgb[:region_size, :region_size].astype(np.int64)
    packed = (region[:, :, 0] << 16 | region[:, :, 1] << 8 | region[:, :, 2]).ravel()

    colors, first_seen, counts = np.unique(packed, return_index=True, return_counts=True)
    candidates = np.flatnonzero(counts == counts.max())
    winner = candidates[np.argmin(first_seen[candidates])]

    rgb = unpack_rgb(int(colors[winner]))
    logger.debug(f"Dominant color {rgb} ({counts[winner]} of {packed.size} samples)")
    return format_color(rgb, fmt)

