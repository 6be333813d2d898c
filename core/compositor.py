"""
Alpha-aware compositing of one pixel buffer onto another.

All functions clip regions against both buffers silently. They read from
the source and write to the destination; when both share memory the
source is copied first so a blend never reads pixels it already wrote.
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from core.constants import ErrorMessages, WatermarkDefaults
from core.exceptions import CompositingFailure, InvalidParameter
from core.pixel_buffer import PixelBuffer, Rect

logger = logging.getLogger(__name__)


def _clip_region(
    dst: PixelBuffer,
    src: PixelBuffer,
    dst_x: int,
    dst_y: int,
    src_x: int,
    src_y: int,
    width: int,
    height: int,
) -> Optional[Tuple[Rect, Rect]]:
    """
    Clip a copy region against both buffers.

    Returns:
        (destination rect, source rect) of equal size, or None if nothing overlaps
    """
    if width < 0 or height < 0:
        raise CompositingFailure(ErrorMessages.INVALID_REGION.format(width=width, height=height))

    # shift the region so that both source and destination start inside
    dx = max(0, -dst_x, -src_x)
    dy = max(0, -dst_y, -src_y)
    dst_x, src_x, width = dst_x + dx, src_x + dx, width - dx
    dst_y, src_y, height = dst_y + dy, src_y + dy, height - dy

    width = min(width, dst.width - dst_x, src.width - src_x)
    height = min(height, dst.height - dst_y, src.height - src_y)

    if width <= 0 or height <= 0:
        return None

    return Rect(dst_x, dst_y, width, height), Rect(src_x, src_y, width, height)


def _detached(dst: PixelBuffer, src: PixelBuffer) -> PixelBuffer:
    if np.shares_memory(dst.pixels, src.pixels):
        return src.copy()
    return src


def blend(
    dst: PixelBuffer,
    src: PixelBuffer,
    dst_x: int,
    dst_y: int,
    src_x: int = 0,
    src_y: int = 0,
    width: Optional[int] = None,
    height: Optional[int] = None,
    opacity: float = WatermarkDefaults.OPACITY,
) -> bool:
    """
    Merge a region of src onto dst, honouring the source alpha channel.

    For every pixel the blend factor is opacity/100 * src_alpha/255; color
    channels are interpolated linearly and the destination alpha becomes
    max(dst_alpha, src_alpha * opacity/100).

    Args:
        dst: Destination buffer (modified in place)
        src: Source buffer (read only)
        dst_x: Destination x of the region
        dst_y: Destination y of the region
        src_x: Source x of the region
        src_y: Source y of the region
        width: Region width (defaults to the source width)
        height: Region height (defaults to the source height)
        opacity: Opacity percentage, 0..100

    Returns:
        True if any pixel was written, False if the region was clipped away

    Raises:
        InvalidParameter: If opacity is outside 0..100
        CompositingFailure: If the region size is negative
    """
    if not WatermarkDefaults.MIN_OPACITY <= opacity <= WatermarkDefaults.MAX_OPACITY:
        raise InvalidParameter("opacity", opacity, "must be within 0..100")

    width = src.width if width is None else int(width)
    height = src.height if height is None else int(height)
    region = _clip_region(dst, src, int(dst_x), int(dst_y), int(src_x), int(src_y), width, height)
    if region is None:
        return False

    src = _detached(dst, src)
    d, s = region
    dst_view = dst.pixels[d.y : d.y2, d.x : d.x2]
    src_view = src.pixels[s.y : s.y2, s.x : s.x2]

    src_alpha = src_view[:, :, 3:4].astype(np.float32)
    factor = (opacity / 100.0) * (src_alpha / 255.0)

    dst_rgb = dst_view[:, :, :3].astype(np.float32)
    src_rgb = src_view[:, :, :3].astype(np.float32)
    merged = dst_rgb + (src_rgb - dst_rgb) * factor

    effective_alpha = np.floor(src_alpha[:, :, 0] * (opacity / 100.0) + 0.5)
    new_alpha = np.maximum(dst_view[:, :, 3].astype(np.float32), effective_alpha)

    dst_view[:, :, :3] = np.clip(np.floor(merged + 0.5), 0, 255).astype(np.uint8)
    dst_view[:, :, 3] = np.clip(new_alpha, 0, 255).astype(np.uint8)
    return True


def paste(dst: PixelBuffer, src: PixelBuffer, x: int, y: int) -> bool:
    """
    Copy src onto dst at (x, y) without blending.

    Returns:
        True if any pixel was written
    """
    region = _clip_region(dst, src, int(x), int(y), 0, 0, src.width, src.height)
    if region is None:
        return False

    src = _detached(dst, src)
    d, s = region
    dst.pixels[d.y : d.y2, d.x : d.x2] = src.pixels[s.y : s.y2, s.x : s.x2]
    return True


def flatten(buffer: PixelBuffer, background: Sequence[int]) -> PixelBuffer:
    """
    Composite a buffer over a uniform RGBA background.

    A fully transparent background leaves the buffer unchanged.

    Returns:
        New buffer
    """
    bg = np.asarray(background, dtype=np.float32)
    if bg.shape != (4,):
        raise InvalidParameter("background", background, "background must be RGBA")
    if bg[3] == 0:
        return buffer.copy()

    fg_alpha = buffer.pixels[:, :, 3:4].astype(np.float32) / 255.0
    bg_alpha = bg[3] / 255.0

    out_alpha = fg_alpha + bg_alpha * (1.0 - fg_alpha)
    fg_rgb = buffer.pixels[:, :, :3].astype(np.float32)
    weighted = fg_rgb * fg_alpha + bg[:3] * bg_alpha * (1.0 - fg_alpha)
    out_rgb = np.divide(weighted, out_alpha, out=np.zeros_like(weighted), where=out_alpha > 0)

    pixels = np.empty_like(buffer.pixels)
    pixels[:, :, :3] = np.clip(np.floor(out_rgb + 0.5), 0, 255).astype(np.uint8)
    pixels[:, :, 3] = np.clip(np.floor(out_alpha[:, :, 0] * 255.0 + 0.5), 0, 255).astype(np.uint8)
    return PixelBuffer(pixels)
