"""
Enumerations shared across the toolkit.

String enums so that option models and API payloads can use the plain
lowercase names.
"""

from enum import Enum


class Units(str, Enum):
    """Units for resize width/height."""

    PX = "px"
    PERCENT = "%"


class Position(str, Enum):
    """Named watermark anchors."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_RIGHT = "bottom-right"
    BOTTOM_LEFT = "bottom-left"
    CENTER = "center"


class FlipMode(str, Enum):
    """Flip directions."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"


class ColorFormat(str, Enum):
    """Output format of extracted colors."""

    INT = "int"
    HEX = "hex"


class ImageFormat(str, Enum):
    """Encodable image formats."""

    JPG = "jpg"
    PNG = "png"
    GIF = "gif"
    WEBP = "webp"

    @property
    def supports_alpha(self) -> bool:
        return self in (ImageFormat.PNG, ImageFormat.GIF, ImageFormat.WEBP)

    @property
    def pil_format(self) -> str:
        """Format name understood by Pillow."""
        return "JPEG" if self is ImageFormat.JPG else self.value.upper()
