"""
Block effects: pixelate and meshify.

Both filters modify the buffer they are given and return it.
"""

import logging
from typing import Any, Mapping, Optional, Union

import numpy as np

from core.pixel_buffer import PixelBuffer
from core.resampler import block_means
from core.utils.params_processor import prepare_params
from schemas.options import MeshifyOptions, PixelateOptions

logger = logging.getLogger(__name__)


def pixelate(
    buffer: PixelBuffer, options: Optional[Union[PixelateOptions, Mapping[str, Any]]] = None
) -> PixelBuffer:
    """
    Replace every block with its average color (R, G, B and A averaged
    independently).

    Args:
        buffer: Buffer to pixelate (modified in place)
        options: PixelateOptions or a mapping of its fields

    Returns:
        The same buffer
    """
    options = prepare_params(options, PixelateOptions)
    size = options.blocksize

    means = block_means(buffer.pixels, size).astype(np.uint8)
    expanded = np.repeat(np.repeat(means, size, axis=0), size, axis=1)
    buffer.pixels[:, :] = expanded[: buffer.height, : buffer.width]

    logger.debug(f"Pixelated {buffer.width}x{buffer.height} buffer with {size}px blocks")
    return buffer


def meshify(
    buffer: PixelBuffer, options: Optional[Union[MeshifyOptions, Mapping[str, Any]]] = None
) -> PixelBuffer:
    """
    Draw an opaque dot at every pixel whose x and y are multiples of blocksize.

    Args:
        buffer: Buffer to draw on (modified in place)
        options: MeshifyOptions or a mapping of its fields

    Returns:
        The same buffer
    """
    options = prepare_params(options, MeshifyOptions)
    size = options.blocksize

    buffer.pixels[::size, ::size] = (*options.color, 255)

    logger.debug(f"Meshified {buffer.width}x{buffer.height} buffer every {size}px")
    return buffer
