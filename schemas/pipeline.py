"""
Pipeline step models.

A pipeline is an ordered list of steps applied to one buffer after the main
operation. Every step is its operation's options model plus an "op"
discriminator, so a step list can be validated straight from JSON.
"""

from typing import Annotated, List, Literal, Union

from pydantic import Field, InstanceOf, TypeAdapter

from core.pixel_buffer import PixelBuffer
from schemas.options import (
    AutorotateOptions,
    FlipOptions,
    GrayscaleOptions,
    MeshifyOptions,
    PixelateOptions,
    ResizeOptions,
    RotateOptions,
    UnsharpMaskOptions,
    WatermarkOptions,
)


class ResizeStep(ResizeOptions):
    op: Literal["resize"] = "resize"


class WatermarkStep(WatermarkOptions):
    """
    Watermark step.

    The watermark is either a buffer or a string (path or base64 image) that
    the pipeline runner resolves into one.
    """

    op: Literal["watermark"] = "watermark"
    watermark: Union[InstanceOf[PixelBuffer], str] = Field(
        ..., description="Watermark buffer or source"
    )


class UnsharpMaskStep(UnsharpMaskOptions):
    op: Literal["unsharp_mask"] = "unsharp_mask"


class RotateStep(RotateOptions):
    op: Literal["rotate"] = "rotate"


class FlipStep(FlipOptions):
    op: Literal["flip"] = "flip"


class AutorotateStep(AutorotateOptions):
    op: Literal["autorotate"] = "autorotate"


class PixelateStep(PixelateOptions):
    op: Literal["pixelate"] = "pixelate"


class MeshifyStep(MeshifyOptions):
    op: Literal["meshify"] = "meshify"


class GrayscaleStep(GrayscaleOptions):
    op: Literal["grayscale"] = "grayscale"


PipelineStep = Annotated[
    Union[
        ResizeStep,
        WatermarkStep,
        UnsharpMaskStep,
        RotateStep,
        FlipStep,
        AutorotateStep,
        PixelateStep,
        MeshifyStep,
        GrayscaleStep,
    ],
    Field(discriminator="op"),
]

_steps_adapter = TypeAdapter(List[PipelineStep])


def parse_steps(data) -> List[PipelineStep]:
    """Validate a list of step dicts (or step models) into step models."""
    return _steps_adapter.validate_python(data)
