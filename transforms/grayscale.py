"""
Grayscale conversion.
"""

import logging
from typing import Any, Mapping, Optional, Union

import numpy as np

from core.color_model import luma_array
from core.pixel_buffer import PixelBuffer
from core.utils.params_processor import prepare_params
from schemas.options import GrayscaleOptions

logger = logging.getLogger(__name__)


def grayscale(
    buffer: PixelBuffer, options: Optional[Union[GrayscaleOptions, Mapping[str, Any]]] = None
) -> PixelBuffer:
    """
    Replace every pixel's RGB with its luma, preserving alpha.

    Uses Y = (299R + 587G + 114B) // 1000, so gray pixels map to
    themselves and the conversion is idempotent.

    Args:
        buffer: Buffer to convert (modified in place)
        options: Accepted for a uniform signature; grayscale has no options

    Returns:
        The same buffer
    """
    prepare_params(options, GrayscaleOptions)

    y = luma_array(buffer.rgb)
    buffer.pixels[:, :, :3] = y[:, :, np.newaxis]

    logger.debug(f"Converted {buffer.width}x{buffer.height} buffer to grayscale")
    return buffer
