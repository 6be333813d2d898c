"""
Ordered application of transform steps.

Used for the "after" steps of the service operations and for the
/api/transform endpoint.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from core.constants import ErrorMessages
from core.enums import ImageFormat
from core.exceptions import InvalidInput
from core.pixel_buffer import PixelBuffer
from core.utils.params_processor import validation_to_invalid_parameter
from schemas.pipeline import (
    AutorotateStep,
    FlipStep,
    GrayscaleStep,
    MeshifyStep,
    PipelineStep,
    PixelateStep,
    ResizeStep,
    RotateStep,
    UnsharpMaskStep,
    WatermarkStep,
    parse_steps,
)
from transforms.geometric import autorotate, flip, rotate
from transforms.grayscale import grayscale
from transforms.pixelate import meshify, pixelate
from transforms.resize import resize
from transforms.unsharp_mask import unsharp_mask
from transforms.watermark import watermark

logger = logging.getLogger(__name__)

InputResolver = Callable[[str], PixelBuffer]
StepInput = Union[PipelineStep, Mapping[str, Any]]


def _run_watermark(
    buffer: PixelBuffer, step: WatermarkStep, resolve_input: Optional[InputResolver]
) -> PixelBuffer:
    mark = step.watermark
    if isinstance(mark, str):
        if resolve_input is None:
            raise InvalidInput(ErrorMessages.UNRESOLVED_WATERMARK.format(source=mark[:64]))
        mark = resolve_input(mark)
    return watermark(buffer, mark, step)


_HANDLERS: Dict[type, Callable[[PixelBuffer, Any], PixelBuffer]] = {
    UnsharpMaskStep: unsharp_mask,
    RotateStep: rotate,
    FlipStep: lambda buffer, step: flip(buffer, step.mode),
    AutorotateStep: lambda buffer, step: autorotate(buffer, step.orientation),
    PixelateStep: pixelate,
    MeshifyStep: meshify,
    GrayscaleStep: grayscale,
}


def validate_steps(steps: Optional[Iterable[StepInput]]) -> List[PipelineStep]:
    """
    Validate raw step dicts into step models.

    Raises:
        InvalidParameter: If a step has an unknown op or invalid options
    """
    if not steps:
        return []
    try:
        return parse_steps(list(steps))
    except ValidationError as e:
        raise validation_to_invalid_parameter(e) from e


def _with_formats(
    step: ResizeStep, source_format: Optional[ImageFormat], target_format: Optional[ImageFormat]
) -> ResizeStep:
    update = {}
    if step.source_format is None and source_format is not None:
        update["source_format"] = source_format
    if step.target_format is None and target_format is not None:
        update["target_format"] = target_format
    return step.model_copy(update=update) if update else step


def run_pipeline(
    buffer: PixelBuffer,
    steps: Optional[Iterable[StepInput]],
    resolve_input: Optional[InputResolver] = None,
    source_format: Optional[ImageFormat] = None,
    target_format: Optional[ImageFormat] = None,
) -> PixelBuffer:
    """
    Apply steps to a buffer in order.

    The input buffer is copied first, so a step failing halfway leaves the
    caller's buffer untouched and no partial result is returned.

    Args:
        buffer: Source buffer (not modified)
        steps: Step models or step dicts with an "op" key
        resolve_input: Turns a watermark string (path or base64) into a buffer
        source_format: Format the buffer was decoded from, filled into resize
            steps that do not set one
        target_format: Format the result will be encoded to, likewise

    Returns:
        Result of the last step, or a copy of buffer if there are no steps

    Raises:
        InvalidParameter: If a step is invalid
        InvalidInput: If a watermark source cannot be resolved
        ImageToolError: Whatever a step raises
    """
    validated = validate_steps(steps)
    result = buffer.copy()

    for index, step in enumerate(validated):
        if isinstance(step, WatermarkStep):
            result = _run_watermark(result, step, resolve_input)
        elif isinstance(step, ResizeStep):
            result = resize(result, _with_formats(step, source_format, target_format))
        else:
            result = _HANDLERS[type(step)](result, step)
        logger.debug(f"Pipeline step {index} ({step.op}) -> {result.width}x{result.height}")

    return result
