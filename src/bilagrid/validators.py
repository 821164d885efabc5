"""
Validation decorators for bilagrid public functions.

Provides reusable validation logic for parameter checking across the API.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

# Type alias for callables
F = Callable[..., Any]


def _lookup(args: tuple, kwargs: dict, param_name: str, param_index: int) -> tuple[bool, Any]:
    """Fetch a parameter from positional or keyword arguments."""
    if len(args) > param_index:
        return True, args[param_index]
    if param_name in kwargs:
        return True, kwargs[param_name]
    return False, None



def validate_positive(param_name: str = "value", param_index: int = 1) -> Callable[[F], F]:
    """
    Decorator for validating positive numeric parameters.

    Args:
        param_name: Name of parameter for error messages
        param_index: Position of parameter in function signature

    Returns:
        Decorated function with positive validation

    Example:
        >>> @validate_positive("sigma_space", 1)
        ... def bilateral_filter(image, sigma_space: float = 16.0):
        ...     ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            found, value = _lookup(args, kwargs, param_name, param_index)
            if not found:
                return func(*args, **kwargs)

            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(
                    f"{param_name} must be a number, got {type(value).__name__}. "
                    f"Provide a numeric value (int or float)."
                )

            if value <= 0:
                suggestion = ""
                if "sigma_space" in param_name:
                    suggestion = " It is the number of pixels covered by one grid cell (16 is a good start)."
                elif "sigma_range" in param_name:
                    suggestion = " It is a normalized intensity step in (0, 1] (0.1 is a good start)."

                raise ValueError(f"{param_name}={value} must be positive (> 0).{suggestion}")

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


def validate_choices(
    valid_choices: set[str],
    param_name: str = "value",
    param_index: int = 1,
) -> Callable[[F], F]:
    """
    Decorator for validating parameter choices.

    Args:
        valid_choices: Set of valid string choices
        param_name: Name of parameter for error messages
        param_index: Position of parameter in function signature

    Returns:
        Decorated function with choice validation

    Example:
        >>> @validate_choices({"rgb", "luminance"}, "mode", 3)
        ... def bilateral_filter(image, sigma_space, sigma_range, mode="rgb"):
        ...     ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            found, value = _lookup(args, kwargs, param_name, param_index)
            if not found:
                return func(*args, **kwargs)

            if value not in valid_choices:
                choices_str = ", ".join(sorted(valid_choices))
                raise ValueError(
                    f"{param_name}='{value}' is not valid. Valid options are: {choices_str}"
                )

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator
