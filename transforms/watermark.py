"""
Watermark compositing.

Places one or more copies of a watermark buffer onto an image: scaled to the
image, at a named anchor or explicit position, or tiled. Copies are
alpha-blended with the requested opacity.
"""

import logging
from typing import Any, Mapping, Optional, Union

from core.compositor import blend
from core.geometry import plan_watermark
from core.pixel_buffer import PixelBuffer
from core.resampler import resample
from core.utils.params_processor import prepare_params
from schemas.options import WatermarkOptions

logger = logging.getLogger(__name__)


def watermark(
    buffer: PixelBuffer,
    mark: PixelBuffer,
    options: Optional[Union[WatermarkOptions, Mapping[str, Any]]] = None,
) -> PixelBuffer:
    """
    Composite a watermark onto a copy of buffer.

    Args:
        buffer: Image to mark (not modified)
        mark: Watermark image (not modified)
        options: WatermarkOptions or a mapping of its fields

    Returns:
        New buffer of the same size as buffer

    Raises:
        InvalidParameter: If the options are invalid
        AllocationFailure: If the scaled watermark cannot be allocated
    """
    options = prepare_params(options, WatermarkOptions)

    rects = plan_watermark(
        buffer.width,
        buffer.height,
        mark.width,
        mark.height,
        scale=options.scale,
        stretch=options.stretch,
        repeat=options.repeat,
        position=options.position,
    )

    result = buffer.copy()
    source = mark
    if options.scale:
        # a single rect; scale the mark to it once
        rect = rects[0]
        source = resample(mark, rect.width, rect.height)

    written = 0
    for rect in rects:
        if blend(result, source, rect.x, rect.y, opacity=options.opacity):
            written += 1

    logger.debug(
        f"Placed {written} of {len(rects)} watermark copies on {buffer.width}x{buffer.height} image"
    )
    return result
