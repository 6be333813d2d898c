"""
Utility modules for core functionality.

This package contains reusable helper functions shared by the transforms,
the service layer and the API.

Modules:
- decorators: Timing helpers (timer, log_duration)
- enum_converter: Strict enum parsing
- filesystem: Output directory creation and permission bits
- params_processor: Option validation into pydantic models
"""

from .decorators import log_duration, timer
from .enum_converter import parse_enum
from .filesystem import apply_permissions, ensure_parent_dirs
from .params_processor import prepare_params, validation_to_invalid_parameter

__all__ = [
    "timer",
    "log_duration",
    "parse_enum",
    "ensure_parent_dirs",
    "apply_permissions",
    "prepare_params",
    "validation_to_invalid_parameter",
]
