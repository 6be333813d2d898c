"""
Parameter processing utilities.

Handles preparation and validation of transform options, providing unified
option handling across all transforms.
"""

from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from core.exceptions import InvalidParameter

T = TypeVar("T", bound=BaseModel)


def prepare_params(params: Optional[Union[T, Mapping[str, Any]]], params_class: Type[T]) -> T:
    """
    Prepare transform options with default initialization.

    If params is None, creates a new instance with defaults.
    If params is a mapping, validates it into params_class.
    If params is already an instance, returns it unchanged.

    Args:
        params: Options instance, mapping or None
        params_class: Pydantic options class for defaults

    Returns:
        Initialized options instance

    Raises:
        InvalidParameter: If validation fails

    Example:
        >>> options = prepare_params({"width": 100}, ResizeOptions)
        >>> # Returns ResizeOptions(width=100, ...) with all other defaults
    """
    if params is None:
        return params_class()
    if isinstance(params, params_class):
        return params
    if isinstance(params, BaseModel):
        params = params.model_dump(exclude_unset=True)

    try:
        return params_class.model_validate(params)
    except ValidationError as e:
        raise validation_to_invalid_parameter(e) from e


def validation_to_invalid_parameter(error: ValidationError) -> InvalidParameter:
    """Convert the first pydantic validation error into InvalidParameter."""
    first = error.errors()[0]
    param = ".".join(str(part) for part in first.get("loc", ())) or "options"
    return InvalidParameter(param, first.get("input"), first.get("msg"))
