"""
Enum conversion utilities.

Provides standardized methods for converting between enums and strings,
with support for case-insensitive parsing.
"""

from typing import Any, Type, TypeVar

from core.exceptions import InvalidParameter

T = TypeVar("T")


def parse_enum(value: Any, enum_class: Type[T], param_name: str, normalize: bool = False) -> T:
    """
    Parse value to enum.

    Unifies enum parsing logic across all transforms. Unlike a lookup with a
    fallback, an unknown value is an error: a flip mode or anchor that is not
    recognized must never silently turn into another one.

    Args:
        value: Value to parse (string or enum)
        enum_class: Enum class to parse to
        param_name: Option name reported in the error
        normalize: Whether to lowercase string before parsing
            (for case-insensitive matching)

    Returns:
        Parsed enum value

    Raises:
        InvalidParameter: If value is not a member of enum_class

    Example:
        >>> mode = parse_enum("Horizontal", FlipMode, "mode", normalize=True)
        >>> # Returns FlipMode.HORIZONTAL
    """
    # Already an enum instance
    if isinstance(value, enum_class):
        return value

    try:
        str_value = value.lower() if normalize and isinstance(value, str) else value
        return enum_class(str_value)
    except (ValueError, AttributeError, TypeError):
        allowed = ", ".join(str(m.value) for m in enum_class)
        raise InvalidParameter(param_name, value, f"expected one of: {allowed}")
