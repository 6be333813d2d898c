"""
Pixel buffer and rectangle primitives.

A PixelBuffer wraps a NumPy array of shape (height, width, 4), dtype uint8,
in RGBA order. Every transform in the toolkit takes and returns one.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from core.constants import BufferConstants, ErrorMessages
from core.exceptions import AllocationFailure, InvalidInput

logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle in pixel units.

    Coordinates may be negative while a placement is being planned; call
    clip() to get the part that lies inside a buffer.
    """

    x: int
    y: int
    width: int
    height: int

    @property
    def x2(self) -> int:
        """Get right edge coordinate (exclusive)."""
        return self.x + self.width

    @property
    def y2(self) -> int:
        """Get bottom edge coordinate (exclusive)."""
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def intersection(self, other: "Rect") -> Optional["Rect"]:
        """Get intersection with another rect, or None if they do not overlap."""
        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        x2 = min(self.x2, other.x2)
        y2 = min(self.y2, other.y2)
        if x2 <= x1 or y2 <= y1:
            return None
        return Rect(x1, y1, x2 - x1, y2 - y1)

    def clip(self, width: int, height: int) -> "Rect":
        """
        Clip rect to the bounds of a width x height buffer.

        Returns an empty rect at the origin if nothing remains.
        """
        clipped = self.intersection(Rect(0, 0, width, height))
        return clipped if clipped is not None else Rect(0, 0, 0, 0)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass
class PixelBuffer:
    """
    RGBA pixel data, row-major.

    pixels[y, x] is the (r, g, b, a) sample at column x, row y.
    """

    pixels: np.ndarray

    def __post_init__(self):
        pixels = self.pixels
        if (
            not isinstance(pixels, np.ndarray)
            or pixels.ndim != 3
            or pixels.shape[2] != BufferConstants.CHANNELS
            or pixels.dtype != np.uint8
        ):
            shape = getattr(pixels, "shape", None)
            dtype = getattr(pixels, "dtype", type(pixels).__name__)
            raise InvalidInput(ErrorMessages.INVALID_BUFFER.format(shape=shape, dtype=dtype))
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise InvalidInput(
                f"Pixel buffer must not be empty, got {pixels.shape[1]}x{pixels.shape[0]}"
            )

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height)"""
        return self.width, self.height

    @property
    def rgb(self) -> np.ndarray:
        """View of the color channels."""
        return self.pixels[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        """View of the alpha channel."""
        return self.pixels[:, :, 3]

    @classmethod
    def blank(
        cls, width: int, height: int, color: Sequence[int] = BufferConstants.WHITE
    ) -> "PixelBuffer":
        """
        Allocate a buffer filled with a single color.

        Args:
            width: Buffer width in pixels
            height: Buffer height in pixels
            color: RGB or RGBA fill color (alpha defaults to opaque)

        Returns:
            New PixelBuffer

        Raises:
            AllocationFailure: If the size is not positive or memory runs out
        """
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise AllocationFailure(
                ErrorMessages.ALLOCATION_FAILED.format(
                    width=width, height=height, error="size must be positive"
                )
            )

        fill = tuple(color)
        if len(fill) == 3:
            fill += (BufferConstants.MAX_CHANNEL_VALUE,)
        try:
            pixels = np.empty((height, width, BufferConstants.CHANNELS), dtype=np.uint8)
        except (MemoryError, ValueError) as e:
            raise AllocationFailure(
                ErrorMessages.ALLOCATION_FAILED.format(width=width, height=height, error=e)
            ) from e
        pixels[:, :] = fill
        return cls(pixels)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """
        Build a buffer from a grayscale, RGB or RGBA uint8 array.

        The array is copied, so the caller keeps ownership of it.
        """
        if not isinstance(array, np.ndarray) or array.dtype != np.uint8:
            raise InvalidInput(
                ErrorMessages.INVALID_BUFFER.format(
                    shape=getattr(array, "shape", None),
                    dtype=getattr(array, "dtype", type(array).__name__),
                )
            )

        if array.ndim == 2:
            array = array[:, :, np.newaxis].repeat(3, axis=2)

        if array.ndim == 3 and array.shape[2] == 3:
            opaque = np.full(
                array.shape[:2] + (1,), BufferConstants.MAX_CHANNEL_VALUE, dtype=np.uint8
            )
            return cls(np.concatenate([array, opaque], axis=2))

        return cls(np.array(array, dtype=np.uint8, copy=True))

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels.copy())

    def contains(self, x: int, y: int) -> bool:
        """Check if (x, y) is a valid coordinate."""
        return 0 <= x < self.width and 0 <= y < self.height

    def get_pixel(self, x: int, y: int) -> RGBA:
        if not self.contains(x, y):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def set_pixel(self, x: int, y: int, color: Sequence[int]) -> None:
        if not self.contains(x, y):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        if len(color) == 3:
            color = tuple(color) + (BufferConstants.MAX_CHANNEL_VALUE,)
        self.pixels[y, x] = color

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return bool(np.array_equal(self.pixels, other.pixels))

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"
