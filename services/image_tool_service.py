"""
Image Tool Service - Business logic for file and byte level transforms.

This service wraps the pixel transforms with everything around them:
loading the input (path, encoded bytes or buffer), running the "after"
pipeline steps, and saving the result with quality, compression and
permission bits.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from core.constants import ErrorMessages, OutputDefaults
from core.enums import ColorFormat, FlipMode, ImageFormat
from core.exceptions import InvalidInput
from core.image import codec
from core.image.converters import ImageConverters
from core.pixel_buffer import PixelBuffer
from core.utils.decorators import timer
from core.utils.filesystem import apply_permissions
from core.utils.params_processor import prepare_params
from schemas.options import (
    AutorotateOptions,
    MeshifyOptions,
    OutputOptions,
    PixelateOptions,
    ResizeOptions,
    UnsharpMaskOptions,
    WatermarkOptions,
)
from transforms.color_analysis import average_color, dominant_color
from transforms.geometric import autorotate, flip, rotate
from transforms.grayscale import grayscale
from transforms.pipeline import StepInput, run_pipeline
from transforms.pixelate import meshify, pixelate
from transforms.resize import resize
from transforms.unsharp_mask import unsharp_mask
from transforms.watermark import watermark

logger = logging.getLogger(__name__)

ImageInput = Union[str, os.PathLike, bytes, PixelBuffer]
OutputPath = Optional[Union[str, os.PathLike]]
Steps = Optional[Iterable[StepInput]]


@dataclass
class LoadedImage:
    """Decoded input together with what is known about its origin."""

    buffer: PixelBuffer
    data: Optional[bytes] = None
    format: Optional[ImageFormat] = None


@dataclass
class TransformResult:
    """Outcome of a service operation."""

    buffer: PixelBuffer
    output_path: Optional[Path] = None
    source_format: Optional[ImageFormat] = None
    warnings: List[str] = field(default_factory=list)
    processing_time_ms: int = 0

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height


class ImageToolService:
    """
    Service for transforming images from files, bytes or buffers.

    Every transform method follows the same flow: load the input, run the
    operation, run the optional after-steps, and save when an output path is
    given. Buffers passed in are never modified; the service works on a
    copy.
    """

    def __init__(
        self,
        default_quality: int = OutputDefaults.QUALITY,
        default_compression: int = OutputDefaults.COMPRESSION,
    ):
        """
        Initialize image tool service.

        Args:
            default_quality: JPEG/WEBP quality used when a call does not set one
            default_compression: PNG compression used when a call does not set one
        """
        self.default_output = OutputOptions(
            quality=default_quality, compression=default_compression
        )

    # Input handling

    def load(self, source: ImageInput) -> LoadedImage:
        """
        Load an input into a buffer.

        Strings naming an existing file are paths. Other strings are base64
        when they are data URLs or decode to an image, and paths otherwise.

        Raises:
            InvalidInput: If the input cannot be read or decoded
        """
        if isinstance(source, PixelBuffer):
            return LoadedImage(source.copy())

        if isinstance(source, (bytes, bytearray)):
            data = bytes(source)
            return LoadedImage(codec.decode(data), data, codec.detect_format(data))

        if isinstance(source, str) and ImageConverters.is_base64_image(source):
            return self.load(ImageConverters.base64_to_bytes(source))

        if isinstance(source, (str, os.PathLike)):
            try:
                data = Path(source).read_bytes()
            except OSError as e:
                logger.error(f"Failed to read image {source}: {e}")
                raise InvalidInput(ErrorMessages.UNREADABLE_IMAGE.format(error=e)) from e
            fmt = codec.format_from_path(source) or codec.detect_format(data)
            return LoadedImage(codec.decode(data), data, fmt)

        raise InvalidInput(ErrorMessages.UNSUPPORTED_INPUT.format(type=type(source).__name__))

    def resolve_buffer(self, source: ImageInput) -> PixelBuffer:
        """Load an input and return only its buffer (used for watermark sources)."""
        return self.load(source).buffer

    # Template method

    def _execute(
        self,
        source: ImageInput,
        operation: Callable[[LoadedImage], PixelBuffer],
        output: OutputPath = None,
        after: Steps = None,
        output_options: Optional[Union[OutputOptions, Mapping[str, Any]]] = None,
        name: str = "transform",
    ) -> TransformResult:
        """
        Run one operation with the common load / after-steps / save flow.

        Args:
            source: Input image
            operation: Receives the loaded input, returns the result buffer
            output: Where to save the result; None keeps it in memory only
            after: Pipeline steps applied to the result
            output_options: quality, compression and chmod for saving
            name: Operation name for logging

        Returns:
            TransformResult
        """
        output_options = self._output_options(output_options)
        warnings: List[str] = []
        output_path = None

        with timer() as t:
            loaded = self.load(source)
            result = operation(loaded)

            if after:
                result = run_pipeline(
                    result,
                    after,
                    resolve_input=self.resolve_buffer,
                    source_format=loaded.format,
                    target_format=self._target_format(output),
                )

            if output:
                output_path = codec.save(
                    result,
                    output,
                    quality=output_options.quality,
                    compression=output_options.compression,
                )
                if not apply_permissions(output_path, output_options.chmod):
                    warnings.append(
                        f"Could not apply permissions {oct(output_options.chmod)} to {output_path}"
                    )

        logger.info(
            f"{name}: {loaded.buffer.width}x{loaded.buffer.height} -> "
            f"{result.width}x{result.height} in {t['ms']} ms"
        )
        return TransformResult(
            buffer=result,
            output_path=output_path,
            source_format=loaded.format,
            warnings=warnings,
            processing_time_ms=t["ms"],
        )

    @staticmethod
    def _target_format(output: OutputPath) -> Optional[ImageFormat]:
        """Format a result will be saved as, None when it stays in memory."""
        return codec.format_from_path(output) if output else None

    def _output_options(
        self, options: Optional[Union[OutputOptions, Mapping[str, Any]]]
    ) -> OutputOptions:
        if options is None:
            return self.default_output
        if isinstance(options, OutputOptions):
            return options
        merged = {**self.default_output.model_dump(), **dict(options)}
        return prepare_params(merged, OutputOptions)

    # Transforms

    def resize(
        self,
        source: ImageInput,
        options: Optional[Union[ResizeOptions, Mapping[str, Any]]] = None,
        output: OutputPath = None,
        after: Steps = None,
        output_options: Optional[Union[OutputOptions, Mapping[str, Any]]] = None,
    ) -> TransformResult:
        """
        Resize an image.

        Source and target formats are taken from the input and the output
        path unless the options set them; they decide whether transparency
        survives the resize.

        Example:
            >>> service.resize("in.jpg", {"width": 200}, output="out/thumb.png")
        """
        options = prepare_params(options, ResizeOptions)

        def operation(loaded: LoadedImage) -> PixelBuffer:
            update = {}
            if options.source_format is None and loaded.format is not None:
                update["source_format"] = loaded.format
            target = self._target_format(output)
            if options.target_format is None and target is not None:
                update["target_format"] = target
            return resize(loaded.buffer, options.model_copy(update=update))

        return self._execute(source, operation, output, after, output_options, "resize")

    def watermark(
        self,
        source: ImageInput,
        mark: ImageInput,
        options: Optional[Union[WatermarkOptions, Mapping[str, Any]]] = None,
        output: OutputPath = None,
        after: Steps = None,
        output_options: Optional[Union[OutputOptions, Mapping[str, Any]]] = None,
    ) -> TransformResult:
        """
        Composite a watermark onto an image.

        Raises:
            InvalidInput: If the image or the watermark cannot be read
        """
        options = prepare_params(options, WatermarkOptions)
        mark_buffer = self.resolve_buffer(mark)

        def operation(loaded: LoadedImage) -> PixelBuffer:
            return watermark(loaded.buffer, mark_buffer, options)

        return self._execute(source, operation, output, after, output_options, "watermark")

    def unsharp_mask(
        self,
        source: ImageInput,
        options: Optional[Union[UnsharpMaskOptions, Mapping[str, Any]]] = None,
        output: OutputPath = None,
        after: Steps = None,
        output_options: Optional[Union[OutputOptions, Mapping[str, Any]]] = None,
    ) -> TransformResult:
        """Sharpen an image."""
        options = prepare_params(options, UnsharpMaskOptions)
        return self._execute(
            source,
            lambda loaded: unsharp_mask(loaded.buffer, options),
            output,
            after,
            output_options,
            "unsharp_mask",
        )

    def rotate(
        self,
        source: ImageInput,
        degrees: int,
        output: OutputPath = None,
        after: Steps = None,
        output_options: Optional[Union[OutputOptions, Mapping[str, Any]]] = None,
    ) -> TransformResult:
        """Rotate an image clockwise by a multiple of 90 degrees."""
        return self._execute(
            source,
            lambda loaded: rotate(loaded.buffer, degrees),
            output,
            after,
            output_options,
            "rotate",
        )

    def flip(
        self,
        source: ImageInput,
        mode: Union[FlipMode, str] = FlipMode.HORIZONTAL,
        output: OutputPath = None,
        after: Steps = None,
        output_options: Optional[Union[OutputOptions, Mapping[str, Any]]] = None,
    ) -> TransformResult:
        """Mirror an image horizontally, vertically or both."""
        return self._execute(
            source,
            lambda loaded: flip(loaded.buffer, mode),
            output,
            after,
            output_options,
            "flip",
        )

    def autorotate(
        self,
        source: ImageInput,
        options: Optional[Union[AutorotateOptions, Mapping[str, Any]]] = None,
        output: OutputPath = None,
        after: Steps = None,
        output_options: Optional[Union[OutputOptions, Mapping[str, Any]]] = None,
    ) -> TransformResult:
        """
        Rotate an image upright according to its EXIF orientation.

        The orientation is read from the encoded input unless the options
        set one explicitly. Buffers carry no EXIF data, so for them this is
        a no-op unless an orientation is given.
        """
        options = prepare_params(options, AutorotateOptions)

        def operation(loaded: LoadedImage) -> PixelBuffer:
            orientation = options.orientation
            if orientation is None and loaded.data is not None:
                orientation = codec.read_orientation(loaded.data)
            return autorotate(loaded.buffer, orientation)

        return self._execute(source, operation, output, after, output_options, "autorotate")

    def pixelate(
        self,
        source: ImageInput,
        options: Optional[Union[PixelateOptions, Mapping[str, Any]]] = None,
        output: OutputPath = None,
        after: Steps = None,
        output_options: Optional[Union[OutputOptions, Mapping[str, Any]]] = None,
    ) -> TransformResult:
        """Pixelate an image."""
        options = prepare_params(options, PixelateOptions)
        return self._execute(
            source,
            lambda loaded: pixelate(loaded.buffer, options),
            output,
            after,
            output_options,
            "pixelate",
        )

    def meshify(
        self,
        source: ImageInput,
        options: Optional[Union[MeshifyOptions, Mapping[str, Any]]] = None,
        output: OutputPath = None,
        after: Steps = None,
        output_options: Optional[Union[OutputOptions, Mapping[str, Any]]] = None,
    ) -> TransformResult:
        """Draw a dot grid over an image."""
        options = prepare_params(options, MeshifyOptions)
        return self._execute(
            source,
            lambda loaded: meshify(loaded.buffer, options),
            output,
            after,
            output_options,
            "meshify",
        )

    def grayscale(
        self,
        source: ImageInput,
        output: OutputPath = None,
        after: Steps = None,
        output_options: Optional[Union[OutputOptions, Mapping[str, Any]]] = None,
    ) -> TransformResult:
        """Convert an image to grayscale."""
        return self._execute(
            source,
            lambda loaded: grayscale(loaded.buffer),
            output,
            after,
            output_options,
            "grayscale",
        )

    def apply_steps(
        self,
        source: ImageInput,
        steps: Steps,
        output: OutputPath = None,
        output_options: Optional[Union[OutputOptions, Mapping[str, Any]]] = None,
        resolve_input: Optional[Callable[[str], PixelBuffer]] = None,
        target_format: Optional[ImageFormat] = None,
    ) -> TransformResult:
        """
        Run a list of pipeline steps over an image.

        Args:
            source: Input image
            steps: Step models or dicts with an "op" key
            output: Where to save the result
            output_options: quality, compression and chmod for saving
            resolve_input: Resolver for watermark strings; defaults to
                resolve_buffer, which accepts file paths and base64
            target_format: Format the result will be encoded to when it is not
                saved to output (decides whether resize steps keep alpha)
        """
        resolver = resolve_input or self.resolve_buffer
        target = self._target_format(output) or target_format

        def operation(loaded: LoadedImage) -> PixelBuffer:
            return run_pipeline(
                loaded.buffer,
                steps,
                resolve_input=resolver,
                source_format=loaded.format,
                target_format=target,
            )

        return self._execute(
            source,
            operation,
            output,
            None,
            output_options,
            "pipeline",
        )

    # Color analysis

    def average_color(
        self, source: ImageInput, fmt: Union[ColorFormat, str] = ColorFormat.INT
    ) -> Union[int, str]:
        """Average color of an image as a packed int or hex string."""
        return average_color(self.resolve_buffer(source), fmt)

    def dominant_color(
        self, source: ImageInput, fmt: Union[ColorFormat, str] = ColorFormat.INT
    ) -> Union[int, str]:
        """Dominant color of an image as a packed int or hex string."""
        return dominant_color(self.resolve_buffer(source), fmt)
