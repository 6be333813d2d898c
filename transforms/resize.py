"""
Resize with optional crop and letterboxing.

The geometry is planned by core.geometry.plan_resize; this module allocates
the destination, resamples and pads.
"""

import logging
from typing import Any, Mapping, Optional, Union

from core.compositor import paste
from core.constants import BufferConstants
from core.geometry import plan_resize
from core.pixel_buffer import PixelBuffer
from core.resampler import resample
from core.utils.params_processor import prepare_params
from schemas.options import ResizeOptions

logger = logging.getLogger(__name__)


def _keeps_alpha(options: ResizeOptions) -> bool:
    """
    Check whether the resized image can stay transparent.

    Unknown formats (in-memory use) keep alpha; otherwise both the source
    and the target format must support it.
    """
    if options.source_format is None or options.target_format is None:
        return True
    return options.source_format.supports_alpha and options.target_format.supports_alpha


def resize(
    buffer: PixelBuffer, options: Optional[Union[ResizeOptions, Mapping[str, Any]]] = None
) -> PixelBuffer:
    """
    Resize a buffer.

    Args:
        buffer: Source buffer (not modified)
        options: ResizeOptions or a mapping of its fields

    Returns:
        New buffer; its size is the requested box when letterboxing applies,
        otherwise the planned destination size

    Raises:
        InvalidParameter: If the options are invalid
        AllocationFailure: If the destination cannot be allocated

    Example:
        >>> thumb = resize(buffer, {"width": 100, "height": 100, "keep_ratio": True})
    """
    options = prepare_params(options, ResizeOptions)

    plan = plan_resize(
        buffer.width,
        buffer.height,
        width=options.width,
        height=options.height,
        units=options.units,
        keep_ratio=options.keep_ratio,
        paddings=options.padding_color is not None,
        enlarge=options.enlarge,
        crop=options.crop,
    )

    background = BufferConstants.TRANSPARENT if _keeps_alpha(options) else BufferConstants.WHITE
    result = resample(buffer, plan.dst_width, plan.dst_height, plan.src_rect, background)

    if plan.needs_padding:
        canvas = PixelBuffer.blank(*plan.canvas, color=options.padding_color)
        paste(canvas, result, *plan.offset)
        result = canvas

    logger.debug(f"Resized {buffer.width}x{buffer.height} to {result.width}x{result.height}")
    return result
