"""
Exception hierarchy for the raster toolkit.

Every failure raised by a transform derives from ImageToolError so callers
(the service layer, the HTTP exception handlers) can catch one type.
"""

from typing import Any, Dict, Optional


class ImageToolError(Exception):
    """Base class for all toolkit errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error for API responses."""
        content: Dict[str, Any] = {"error": self.message, "type": type(self).__name__}
        if self.details:
            content["details"] = self.details
        return content


class InvalidInput(ImageToolError):
    """Source image or watermark could not be read or is not a valid pixel buffer."""


class InvalidParameter(ImageToolError):
    """An option value is out of range, malformed or unsupported."""

    def __init__(self, param: str, value: Any, reason: Optional[str] = None):
        message = f"Invalid parameter {param}: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, {"param": param, "value": repr(value)})
        self.param = param
        self.value = value


class AllocationFailure(ImageToolError):
    """Destination buffer could not be created."""


class CompositingFailure(ImageToolError):
    """Blend region is invalid."""


class EncodingFailure(ImageToolError):
    """Pixel buffer could not be encoded to the requested format."""


class OutputPathError(ImageToolError):
    """Output directory could not be created."""
