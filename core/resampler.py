"""
Area-averaged resampling.

Wraps cv2.resize(INTER_AREA), which averages all source pixels covered by
each destination pixel when downscaling. Color is resampled premultiplied by
alpha so fully transparent pixels do not bleed their (meaningless) color
into their neighbours.
"""

import logging
from typing import Optional, Sequence

import cv2
import numpy as np

from core.compositor import flatten
from core.constants import ErrorMessages
from core.exceptions import AllocationFailure, InvalidParameter
from core.pixel_buffer import PixelBuffer, Rect

logger = logging.getLogger(__name__)


def resample(
    buffer: PixelBuffer,
    dst_width: int,
    dst_height: int,
    src_rect: Optional[Rect] = None,
    background: Optional[Sequence[int]] = None,
) -> PixelBuffer:
    """
    Scale a region of a buffer to a new size.

    Args:
        buffer: Source buffer (read only)
        dst_width: Output width
        dst_height: Output height
        src_rect: Region of the source to scale (defaults to the whole buffer)
        background: Optional RGBA color the result is composited over

    Returns:
        New buffer of dst_width x dst_height

    Raises:
        InvalidParameter: If the output size is not positive or the region is empty
        AllocationFailure: If OpenCV cannot allocate the output
    """
    dst_width, dst_height = int(dst_width), int(dst_height)
    if dst_width <= 0 or dst_height <= 0:
        raise InvalidParameter("size", (dst_width, dst_height), "output size must be positive")

    rect = (src_rect or Rect(0, 0, buffer.width, buffer.height)).clip(buffer.width, buffer.height)
    if rect.is_empty:
        raise InvalidParameter("src_rect", src_rect, "source region lies outside the image")

    region = buffer.pixels[rect.y : rect.y2, rect.x : rect.x2].astype(np.float32)

    alpha = region[:, :, 3:4] / 255.0
    premultiplied = region.copy()
    premultiplied[:, :, :3] *= alpha

    try:
        scaled = cv2.resize(premultiplied, (dst_width, dst_height), interpolation=cv2.INTER_AREA)
    except (cv2.error, MemoryError) as e:
        raise AllocationFailure(
            ErrorMessages.ALLOCATION_FAILED.format(width=dst_width, height=dst_height, error=e)
        ) from e

    scaled_alpha = scaled[:, :, 3:4] / 255.0
    rgb = np.divide(
        scaled[:, :, :3], scaled_alpha, out=np.zeros_like(scaled[:, :, :3]), where=scaled_alpha > 0
    )
    scaled[:, :, :3] = rgb

    pixels = np.clip(np.floor(scaled + 0.5), 0, 255).astype(np.uint8)
    result = PixelBuffer(pixels)

    logger.debug(f"Resampled {rect.width}x{rect.height} region to {dst_width}x{dst_height}")

    if background is not None:
        return flatten(result, background)
    return result


def block_means(pixels: np.ndarray, blocksize: int) -> np.ndarray:
    """
    Exact mean of every blocksize x blocksize block, rounded half up.

    Blocks on the right and bottom edges may be partial; they are averaged
    over the pixels they actually contain. A block covering the whole image
    gives its average color.

    Args:
        pixels: (H, W, C) array
        blocksize: Block edge in pixels

    Returns:
        (ceil(H / blocksize), ceil(W / blocksize), C) int64 array
    """
    height, width = pixels.shape[:2]
    row_starts = np.arange(0, height, blocksize)
    col_starts = np.arange(0, width, blocksize)

    sums = np.add.reduceat(pixels.astype(np.int64), row_starts, axis=0)
    sums = np.add.reduceat(sums, col_starts, axis=1)

    block_heights = np.minimum(row_starts + blocksize, height) - row_starts
    block_widths = np.minimum(col_starts + blocksize, width) - col_starts
    counts = np.outer(block_heights, block_widths)[:, :, np.newaxis]

    return (sums + counts // 2) // counts
