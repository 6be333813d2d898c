"""
Transform option models.

One immutable pydantic model per operation. Defaults mirror the constants in
core.constants; unknown fields are rejected. Color fields accept hex
strings, packed ints or RGB triples and are normalized to (r, g, b) tuples.
"""

from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.color_model import read_color
from core.constants import (
    BlockDefaults,
    OutputDefaults,
    ResizeDefaults,
    UnsharpMaskDefaults,
    WatermarkDefaults,
)
from core.enums import FlipMode, ImageFormat, Position, Units
from core.exceptions import InvalidParameter

RGBTuple = Tuple[int, int, int]


class TransformOptions(BaseModel):
    """Base class for all option records."""

    model_config = ConfigDict(frozen=True, extra="forbid", use_enum_values=False)


class ResizeOptions(TransformOptions):
    """Options for resize."""

    width: Optional[float] = Field(default=None, gt=0, description="Output width (px or %)")
    height: Optional[float] = Field(default=None, gt=0, description="Output height (px or %)")
    units: Units = Field(default=Units(ResizeDefaults.UNITS), description="Units of width/height")
    keep_ratio: bool = Field(
        default=ResizeDefaults.KEEP_RATIO,
        description="Fit inside width x height keeping the input aspect ratio",
    )
    paddings: Union[bool, RGBTuple] = Field(
        default=ResizeDefaults.PADDINGS,
        description="Letterbox into the requested box; True = white, or a padding color",
    )
    enlarge: bool = Field(default=ResizeDefaults.ENLARGE, description="Allow upscaling")
    crop: bool = Field(
        default=ResizeDefaults.CROP, description="Trim excess source to fill the requested box"
    )
    source_format: Optional[ImageFormat] = Field(
        default=None, description="Format the input was decoded from"
    )
    target_format: Optional[ImageFormat] = Field(
        default=None, description="Format the output will be encoded to"
    )

    @field_validator("paddings", mode="before")
    @classmethod
    def _read_padding_color(cls, value):
        if isinstance(value, bool):
            return value
        return read_color(value)

    @property
    def padding_color(self) -> Optional[RGBTuple]:
        """Resolved letterbox color, or None if padding is disabled."""
        if self.paddings is False:
            return None
        if self.paddings is True:
            return ResizeDefaults.PADDING_COLOR
        return self.paddings


class WatermarkOptions(TransformOptions):
    """Options for watermark placement."""

    scale: bool = Field(
        default=WatermarkDefaults.SCALE,
        description="Scale watermark to the image (position/repeat ignored)",
    )
    stretch: bool = Field(
        default=WatermarkDefaults.STRETCH,
        description="With scale, cover the whole image ignoring aspect ratio",
    )
    repeat: bool = Field(default=WatermarkDefaults.REPEAT, description="Tile the watermark")
    position: Union[Position, Tuple[int, int]] = Field(
        default=Position(WatermarkDefaults.POSITION),
        description="Named anchor or explicit (x, y)",
    )
    opacity: float = Field(
        default=WatermarkDefaults.OPACITY,
        ge=WatermarkDefaults.MIN_OPACITY,
        le=WatermarkDefaults.MAX_OPACITY,
        description="Watermark opacity in percent",
    )


class UnsharpMaskOptions(TransformOptions):
    """Options for unsharp mask (Photoshop-like units before calibration)."""

    amount: float = Field(default=UnsharpMaskDefaults.AMOUNT, ge=0, description="Strength, 0..500")
    radius: float = Field(default=UnsharpMaskDefaults.RADIUS, description="Blur radius, 0..50")
    threshold: float = Field(
        default=UnsharpMaskDefaults.THRESHOLD,
        ge=0,
        description="Minimum channel difference, 0..255",
    )


class RotateOptions(TransformOptions):
    """Options for rotate."""

    degrees: int = Field(..., description="Clockwise rotation, a multiple of 90")

    @field_validator("degrees")
    @classmethod
    def _multiple_of_90(cls, value: int) -> int:
        if value % 90 != 0:
            raise InvalidParameter("degrees", value, "only multiples of 90 are supported")
        return value


class FlipOptions(TransformOptions):
    """Options for flip."""

    mode: FlipMode = Field(default=FlipMode.HORIZONTAL, description="horizontal, vertical or both")


class AutorotateOptions(TransformOptions):
    """Options for autorotate."""

    orientation: Optional[int] = Field(
        default=None, description="EXIF orientation 1..8; None reads nothing and is a no-op"
    )


class PixelateOptions(TransformOptions):
    """Options for pixelate."""

    blocksize: int = Field(
        default=BlockDefaults.PIXELATE_BLOCKSIZE, ge=1, description="Block edge in pixels"
    )


class MeshifyOptions(TransformOptions):
    """Options for meshify."""

    blocksize: int = Field(
        default=BlockDefaults.MESHIFY_BLOCKSIZE, ge=1, description="Distance between dots"
    )
    color: RGBTuple = Field(default=BlockDefaults.MESH_COLOR, description="Mesh color")

    @field_validator("color", mode="before")
    @classmethod
    def _read_mesh_color(cls, value):
        return read_color(value)


class GrayscaleOptions(TransformOptions):
    """Grayscale has no options."""


class OutputOptions(TransformOptions):
    """Options for saving a transform result."""

    quality: int = Field(
        default=OutputDefaults.QUALITY,
        ge=OutputDefaults.MIN_QUALITY,
        le=OutputDefaults.MAX_QUALITY,
        description="JPEG/WEBP quality",
    )
    compression: int = Field(
        default=OutputDefaults.COMPRESSION,
        ge=OutputDefaults.MIN_COMPRESSION,
        le=OutputDefaults.MAX_COMPRESSION,
        description="PNG compression level",
    )
    chmod: Optional[int] = Field(
        default=None, ge=0, le=0o7777, description="Permission bits for the output file"
    )
