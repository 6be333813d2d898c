"""
Lossless geometric transforms: 90-degree rotations, flips and EXIF autorotate.

All functions return a new buffer (or the input itself for identity
transforms) and never write to their input.
"""

import logging
from typing import Optional, Union

import numpy as np

from core.enums import FlipMode
from core.exceptions import InvalidParameter
from core.pixel_buffer import PixelBuffer
from core.utils.enum_converter import parse_enum
from core.utils.params_processor import prepare_params
from schemas.options import RotateOptions

logger = logging.getLogger(__name__)

# clockwise quarter turns -> np.rot90 k (positive k turns counterclockwise)
_ROT90_K = {90: -1, 180: 2, 270: 1}

# EXIF orientation -> (flip mode, clockwise degrees)
ORIENTATION_TRANSFORMS = {
    2: (FlipMode.HORIZONTAL, 0),
    3: (None, 180),
    4: (FlipMode.VERTICAL, 0),
    5: (FlipMode.VERTICAL, 90),
    6: (None, 90),
    7: (FlipMode.HORIZONTAL, 90),
    8: (None, 270),
}


def rotate(buffer: PixelBuffer, degrees: Union[int, RotateOptions]) -> PixelBuffer:
    """
    Rotate clockwise by a multiple of 90 degrees.

    Args:
        buffer: Source buffer
        degrees: Clockwise angle; normalized modulo 360 so -90 equals 270

    Returns:
        New rotated buffer, or the input itself for 0/360

    Raises:
        InvalidParameter: If degrees is not a multiple of 90
    """
    if not isinstance(degrees, RotateOptions):
        degrees = prepare_params({"degrees": degrees}, RotateOptions)
    angle = degrees.degrees % 360

    if angle == 0:
        return buffer

    pixels = np.ascontiguousarray(np.rot90(buffer.pixels, k=_ROT90_K[angle]))
    logger.debug(f"Rotated {buffer.width}x{buffer.height} buffer by {angle} degrees")
    return PixelBuffer(pixels)


def flip(buffer: PixelBuffer, mode: Union[FlipMode, str] = FlipMode.HORIZONTAL) -> PixelBuffer:
    """
    Mirror a buffer.

    Args:
        buffer: Source buffer
        mode: "horizontal" (x -> w-1-x), "vertical" (y -> h-1-y) or "both"

    Returns:
        New flipped buffer

    Raises:
        InvalidParameter: If mode is not a FlipMode
    """
    mode = parse_enum(mode, FlipMode, "mode", normalize=True)

    if mode is FlipMode.HORIZONTAL:
        pixels = buffer.pixels[:, ::-1]
    elif mode is FlipMode.VERTICAL:
        pixels = buffer.pixels[::-1, :]
    else:
        pixels = buffer.pixels[::-1, ::-1]

    return PixelBuffer(np.ascontiguousarray(pixels))


def autorotate(buffer: PixelBuffer, orientation: Optional[int]) -> PixelBuffer:
    """
    Undo the camera orientation recorded in EXIF.

    The flip (if any) is applied first and the rotation is applied to the
    flipped buffer. Orientation 1, None or an unknown value is a no-op.

    Args:
        buffer: Source buffer
        orientation: EXIF orientation tag value 1..8

    Returns:
        Upright buffer (the input itself when nothing has to change)
    """
    if isinstance(orientation, bool):
        raise InvalidParameter("orientation", orientation, "must be an integer")

    transform = ORIENTATION_TRANSFORMS.get(orientation)
    if transform is None:
        return buffer

    mode, degrees = transform
    result = buffer
    if mode is not None:
        result = flip(result, mode)
    if degrees:
        result = rotate(result, degrees)

    logger.debug(f"Autorotated buffer for EXIF orientation {orientation}")
    return result
