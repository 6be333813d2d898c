"""
Schemas Package

This package contains all Pydantic schemas for validation and serialization:
- options: one immutable options model per transform
- pipeline: step models and the discriminated step union
- image: HTTP request and response models
"""

from .image import (
    AutorotateRequest,
    ColorRequest,
    ColorResponse,
    TransformRequest,
    TransformResponse,
)
from .options import (
    AutorotateOptions,
    FlipOptions,
    GrayscaleOptions,
    MeshifyOptions,
    OutputOptions,
    PixelateOptions,
    ResizeOptions,
    RotateOptions,
    TransformOptions,
    UnsharpMaskOptions,
    WatermarkOptions,
)
from .pipeline import PipelineStep, parse_steps

__all__ = [
    # Options
    "TransformOptions",
    "ResizeOptions",
    "WatermarkOptions",
    "UnsharpMaskOptions",
    "RotateOptions",
    "FlipOptions",
    "AutorotateOptions",
    "PixelateOptions",
    "MeshifyOptions",
    "GrayscaleOptions",
    "OutputOptions",
    # Pipeline
    "PipelineStep",
    "parse_steps",
    # API
    "TransformRequest",
    "AutorotateRequest",
    "TransformResponse",
    "ColorRequest",
    "ColorResponse",
]
