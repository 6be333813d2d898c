"""
Color parsing and conversion utilities.

Colors are handled as (r, g, b) tuples of 8-bit ints. They can be read from
hex strings ("#fff", "ffffff"), packed integers (0xRRGGBB) or explicit
triples.
"""

import string
from typing import Sequence, Tuple, Union

import numpy as np

from core.constants import LumaWeights
from core.enums import ColorFormat
from core.exceptions import InvalidParameter
from core.utils.enum_converter import parse_enum

RGB = Tuple[int, int, int]
ColorValue = Union[str, int, Sequence[int]]

MAX_PACKED = 0xFFFFFF


def hex2rgb(color: str) -> RGB:
    """
    Convert a hex color to RGB.

    Args:
        color: 3 or 6 hex digits, optionally prefixed with '#'

    Returns:
        (r, g, b) tuple

    Raises:
        InvalidParameter: If the string has the wrong length or non-hex digits
    """
    if not isinstance(color, str):
        raise InvalidParameter("color", color, "hex color must be a string")

    digits = color[1:] if color.startswith("#") else color

    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    elif len(digits) != 6:
        raise InvalidParameter("color", color, "hex color must have 3 or 6 digits")

    if any(c not in string.hexdigits for c in digits):
        raise InvalidParameter("color", color, "not a hex color")

    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def rgb2hex(rgb: Sequence[int]) -> str:
    """Convert (r, g, b) to a 6-digit lowercase hex string without '#'."""
    return "{:06x}".format(pack_rgb(*rgb[:3]))


def pack_rgb(r: int, g: int, b: int) -> int:
    """Pack channels into 0xRRGGBB."""
    return (int(r) << 16) | (int(g) << 8) | int(b)


def unpack_rgb(value: int) -> RGB:
    """Unpack 0xRRGGBB into (r, g, b)."""
    if not 0 <= value <= MAX_PACKED:
        raise InvalidParameter("color", value, "packed color must be within 0..0xFFFFFF")
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def read_color(color: ColorValue) -> RGB:
    """
    Read a color given in any supported notation.

    Args:
        color: Hex string, packed int or (r, g, b) sequence

    Returns:
        (r, g, b) tuple

    Raises:
        InvalidParameter: If the color is malformed
    """
    if isinstance(color, bool):
        raise InvalidParameter("color", color, "boolean is not a color")

    if isinstance(color, str):
        return hex2rgb(color)

    if isinstance(color, (int, np.integer)):
        return unpack_rgb(int(color))

    if isinstance(color, (list, tuple, np.ndarray)):
        if len(color) != 3:
            raise InvalidParameter("color", color, "RGB color needs exactly 3 channels")
        channels = []
        for channel in color:
            if isinstance(channel, bool) or not isinstance(channel, (int, np.integer)):
                raise InvalidParameter("color", color, "channels must be integers")
            if not 0 <= channel <= 255:
                raise InvalidParameter("color", color, "channels must be within 0..255")
            channels.append(int(channel))
        return channels[0], channels[1], channels[2]

    raise InvalidParameter("color", color, "unsupported color notation")


def luma(r: int, g: int, b: int) -> int:
    """Truncated BT.601 luma of one pixel."""
    weighted = LumaWeights.RED * r + LumaWeights.GREEN * g + LumaWeights.BLUE * b
    return weighted // LumaWeights.LUMA_DIVISOR


def luma_array(rgb: np.ndarray) -> np.ndarray:
    """
    Luma of every pixel of an (..., 3) uint8 array.

    Integer arithmetic keeps gray pixels fixed: luma(v, v, v) == v.
    """
    channels = rgb.astype(np.int32)
    weighted = (
        LumaWeights.RED * channels[..., 0]
        + LumaWeights.GREEN * channels[..., 1]
        + LumaWeights.BLUE * channels[..., 2]
    )
    return (weighted // LumaWeights.LUMA_DIVISOR).astype(np.uint8)


def format_color(
    rgb: Sequence[int], fmt: Union[ColorFormat, str] = ColorFormat.INT
) -> Union[int, str]:
    """
    Format a color as a packed int or a zero-padded hex string.

    Raises:
        InvalidParameter: If fmt is not a known ColorFormat
    """
    fmt = parse_enum(fmt, ColorFormat, "format", normalize=True)
    value = pack_rgb(*rgb[:3])
    if fmt is ColorFormat.HEX:
        return "{:06x}".format(value)
    return value
