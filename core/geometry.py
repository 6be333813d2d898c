"""
Placement geometry for resize and watermark.

Pure functions: they take sizes and policy flags and return rectangles.
No pixels are touched here.

Rounding follows "half away from zero" throughout, and fractional sizes
produced by aspect-ratio math are truncated only when a buffer of that size
is allocated.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from core.enums import Position, Units
from core.exceptions import InvalidParameter
from core.pixel_buffer import Rect
from core.utils.enum_converter import parse_enum

logger = logging.getLogger(__name__)

PositionValue = Union[Position, str, Sequence[int]]


def round_half_away(value: float) -> int:
    """Round to nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _truncate(value: float) -> int:
    # 399.99999999 from ratio math is 400 pixels, not 399
    return int(value + 1e-9)


@dataclass(frozen=True)
class ResizePlan:
    """
    Resample instruction produced by plan_resize.

    src_rect is resampled to dst_width x dst_height. When canvas is set, the
    result is centered at offset on a canvas of that size (letterboxing).
    """

    src_rect: Rect
    dst_width: int
    dst_height: int
    canvas: Optional[Tuple[int, int]] = None
    offset: Tuple[int, int] = (0, 0)

    @property
    def needs_padding(self) -> bool:
        return self.canvas is not None

    @property
    def output_size(self) -> Tuple[int, int]:
        """Size of the buffer the resize finally returns."""
        return self.canvas if self.canvas is not None else (self.dst_width, self.dst_height)


def plan_resize(
    input_width: int,
    input_height: int,
    width: Optional[float] = None,
    height: Optional[float] = None,
    units: Union[Units, str] = Units.PX,
    keep_ratio: bool = False,
    paddings: bool = True,
    enlarge: bool = True,
    crop: bool = True,
) -> ResizePlan:
    """
    Compute source rectangle and destination size for a resize.

    Args:
        input_width: Source width
        input_height: Source height
        width: Requested width (None = derive from height)
        height: Requested height (None = derive from width)
        units: "px" or "%" (percent of the input size)
        keep_ratio: Fit inside the requested box preserving input aspect
        paddings: Letterbox the fitted result into the requested box
        enlarge: Allow output larger than input
        crop: Trim source symmetrically so the requested box is filled

    Returns:
        ResizePlan

    Raises:
        InvalidParameter: If the sizes are not positive
    """
    units = parse_enum(units, Units, "units")
    if input_width <= 0 or input_height <= 0:
        raise InvalidParameter("input_size", (input_width, input_height), "input must not be empty")
    for name, value in (("width", width), ("height", height)):
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, numbers.Real) or value <= 0:
            raise InvalidParameter(name, value, "must be a positive number")

    # turn % into px
    if units is Units.PERCENT:
        if height is not None:
            height = round_half_away(input_height * height / 100)
        if width is not None:
            width = round_half_away(input_width * width / 100)
        if width == 0 or height == 0:
            raise InvalidParameter("size", (width, height), "percentage rounds to zero pixels")

    original_size: Optional[Tuple[float, float]] = None

    if keep_ratio and width is not None and height is not None:
        original_size = (width, height)
        if input_width / input_height > width / height:
            height = input_height * width / input_width
        else:
            width = input_width * height / input_height

    # calculate missing width/height
    if width is None and height is None:
        width, height = input_width, input_height
    elif height is None:
        height = round_half_away(width * input_height / input_width)
    elif width is None:
        width = round_half_away(height * input_width / input_height)

    src_x, src_y = 0, 0
    src_w, src_h = float(input_width), float(input_height)

    if not enlarge and (width > input_width or height > input_height):
        width, height = input_width, input_height
    elif crop:
        if input_width / input_height > width / height:
            ratio = input_height / height
            src_w = ratio * width
            src_x = round_half_away((input_width - src_w) / 2)
        else:
            ratio = input_width / width
            src_h = ratio * height
            src_y = round_half_away((input_height - src_h) / 2)

    dst_width, dst_height = _truncate(width), _truncate(height)
    if dst_width < 1 or dst_height < 1:
        raise InvalidParameter("size", (width, height), "resulting size is smaller than one pixel")

    src_rect = Rect(src_x, src_y, max(1, _truncate(src_w)), max(1, _truncate(src_h))).clip(
        input_width, input_height
    )

    canvas = None
    offset = (0, 0)
    if keep_ratio and paddings and original_size is not None:
        orig_w, orig_h = original_size
        if width != orig_w or height != orig_h:
            canvas = (int(orig_w), int(orig_h))
            offset = (round_half_away((orig_w - width) / 2), round_half_away((orig_h - height) / 2))

    plan = ResizePlan(src_rect, dst_width, dst_height, canvas, offset)
    logger.debug(f"Resize plan for {input_width}x{input_height}: {plan}")
    return plan


def anchor_offset(
    position: Position, image_width: int, image_height: int, mark_width: int, mark_height: int
) -> Tuple[int, int]:
    """Top-left corner of a watermark placed at a named anchor."""
    if position is Position.TOP_LEFT:
        return 0, 0
    if position is Position.TOP_RIGHT:
        return image_width - mark_width, 0
    if position is Position.BOTTOM_RIGHT:
        return image_width - mark_width, image_height - mark_height
    if position is Position.BOTTOM_LEFT:
        return 0, image_height - mark_height
    return (
        round_half_away((image_width - mark_width) / 2),
        round_half_away((image_height - mark_height) / 2),
    )


def fit_rect(image_width: int, image_height: int, mark_width: int, mark_height: int) -> Rect:
    """Largest rect of the mark's aspect ratio that fits the image, centered."""
    if image_width / image_height > mark_width / mark_height:
        ratio = image_height / mark_height
        w = ratio * mark_width
        return Rect(round_half_away((image_width - w) / 2), 0, _truncate(w), image_height)

    ratio = image_width / mark_width
    h = ratio * mark_height
    return Rect(0, round_half_away((image_height - h) / 2), image_width, _truncate(h))


def _tile_starts(extent: int, step: int, from_end: bool) -> List[int]:
    """Tile origins along one axis, flush with the start or the end."""
    if from_end:
        starts = []
        pos = extent - step
        while pos > -step:
            starts.append(pos)
            pos -= step
        return starts
    return list(range(0, extent, step))


def tile_rects(
    position: Position, image_width: int, image_height: int, mark_width: int, mark_height: int
) -> List[Rect]:
    """
    Destination rects tiling the image with the mark.

    One tile edge is flush with the named corner; for center the pattern is
    shifted so the leftover is split between both sides.
    """
    if position is Position.CENTER:
        origin_x = -int((image_width % mark_width) / 2)
        origin_y = -int((image_height % mark_height) / 2)
        xs = list(range(origin_x, image_width, mark_width))
        ys = list(range(origin_y, image_height, mark_height))
    else:
        from_right = position in (Position.TOP_RIGHT, Position.BOTTOM_RIGHT)
        from_bottom = position in (Position.BOTTOM_LEFT, Position.BOTTOM_RIGHT)
        xs = _tile_starts(image_width, mark_width, from_right)
        ys = _tile_starts(image_height, mark_height, from_bottom)

    return [Rect(x, y, mark_width, mark_height) for y in ys for x in xs]


def plan_watermark(
    image_width: int,
    image_height: int,
    mark_width: int,
    mark_height: int,
    scale: bool = False,
    stretch: bool = False,
    repeat: bool = False,
    position: PositionValue = Position.CENTER,
) -> List[Rect]:
    """
    Compute where copies of a watermark go.

    Args:
        image_width: Canvas width
        image_height: Canvas height
        mark_width: Watermark width
        mark_height: Watermark height
        scale: Scale the mark to the canvas (position/repeat ignored)
        stretch: With scale, cover the whole canvas ignoring aspect ratio
        repeat: Tile the mark over the canvas
        position: Named anchor or explicit (x, y)

    Returns:
        Destination rects; rect size differs from the mark size only when scaling
    """
    if min(image_width, image_height, mark_width, mark_height) <= 0:
        raise InvalidParameter(
            "size", (image_width, image_height, mark_width, mark_height), "sizes must be positive"
        )

    if scale:
        if stretch:
            return [Rect(0, 0, image_width, image_height)]
        return [fit_rect(image_width, image_height, mark_width, mark_height)]

    explicit = not isinstance(position, (Position, str))
    if explicit:
        if len(position) != 2:
            raise InvalidParameter("position", position, "explicit position needs (x, y)")
        anchor = Position.CENTER
    else:
        anchor = parse_enum(position, Position, "position", normalize=True)

    if repeat:
        rects = tile_rects(anchor, image_width, image_height, mark_width, mark_height)
        bounds = Rect(0, 0, image_width, image_height)
        return [r for r in rects if r.intersection(bounds) is not None]

    if explicit:
        x, y = int(position[0]), int(position[1])
    else:
        x, y = anchor_offset(anchor, image_width, image_height, mark_width, mark_height)

    return [Rect(x, y, mark_width, mark_height)]
