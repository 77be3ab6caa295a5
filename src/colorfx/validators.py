"""
Validation decorators for colorfx effects.

Provides reusable validation logic for construction-time parameter checking.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Callable, Iterable
from functools import wraps
from typing import Any, TypeAlias

F: TypeAlias = Callable[..., Any]


def _extract(args: tuple, kwargs: dict, param_name: str, param_index: int) -> tuple[bool, Any]:
    """Get the validated argument from a call, if it was provided."""
    if len(args) > param_index:
        return True, args[param_index]
    if param_name in kwargs:
        return True, kwargs[param_name]
    return False, None


def _require_number(value: Any, param_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(
            f"{param_name} must be a number, got {type(value).__name__}. "
            f"Provide a numeric value (int or float)."
        )
    return float(value)


def validate_range(
    min_val: float,
    max_val: float,
    param_name: str = "value",
    param_index: int = 1,
) -> Callable[[F], F]:
    """
    Decorator for validating numeric parameter ranges.

    Args:
        min_val: Minimum allowed value (inclusive)
        max_val: Maximum allowed value (inclusive)
        param_name: Name of parameter for error messages
        param_index: Position of parameter in function signature (default: 1 = first arg after self)

    Returns:
        Decorated function with range validation

    Example:
        >>> class Opacity:
        ...     @validate_range(0.0, 1.0, "amount")
        ...     def __init__(self, amount: float):
        ...         self.amount = amount
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            found, value = _extract(args, kwargs, param_name, param_index)
            if not found:
                return func(*args, **kwargs)

            number = _require_number(value, param_name)
            if not min_val <= number <= max_val:
                raise ValueError(
                    f"{param_name}={value} is outside valid range [{min_val}, {max_val}]."
                )

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


def validate_positive(param_name: str = "value", param_index: int = 1) -> Callable[[F], F]:
    """
    Decorator for validating positive, finite numeric parameters.

    Args:
        param_name: Name of parameter for error messages
        param_index: Position of parameter in function signature

    Returns:
        Decorated function with positive validation
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            found, value = _extract(args, kwargs, param_name, param_index)
            if not found:
                return func(*args, **kwargs)

            number = _require_number(value, param_name)
            if not math.isfinite(number) or number <= 0:
                suggestion = ""
                if "gamma" in param_name:
                    suggestion = " Use 1.0 for linear, <1.0 to brighten, >1.0 to darken."
                raise ValueError(
                    f"{param_name}={value} must be positive (> 0) and finite.{suggestion}"
                )

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


def validate_non_negative(param_name: str = "value", param_index: int = 1) -> Callable[[F], F]:
    """
    Decorator for validating non-negative, finite numeric parameters (sizes, radii).

    ``None`` is let through so optional sizes can be omitted.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            found, value = _extract(args, kwargs, param_name, param_index)
            if not found or value is None:
                return func(*args, **kwargs)

            number = _require_number(value, param_name)
            if not math.isfinite(number) or number < 0:
                raise ValueError(
                    f"{param_name}={value} must be a non-negative, finite number."
                )

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


def validate_finite(param_name: str = "value", param_index: int = 1) -> Callable[[F], F]:
    """
    Decorator rejecting NaN and infinite numeric parameters.

    Amounts that are later clamped still have to be finite.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            found, value = _extract(args, kwargs, param_name, param_index)
            if not found:
                return func(*args, **kwargs)

            number = _require_number(value, param_name)
            if not math.isfinite(number):
                raise ValueError(f"{param_name}={value} must be a finite number.")

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


def _type_names(types: tuple[type, ...]) -> str:
    return " or ".join(t.__name__ for t in types)


def _is_instance(value: Any, types: tuple[type, ...]) -> bool:
    # bool is an int subclass but never a valid count or size
    if isinstance(value, bool):
        return bool in types
    if int in types and isinstance(value, numbers.Integral):
        return True
    return isinstance(value, types)


def validate_type(
    expected_type: type | tuple[type, ...],
    param_name: str = "value",
    param_index: int = 1,
) -> Callable[[F], F]:
    """
    Decorator for validating parameter types.

    ``int`` also admits numpy integers, but never ``bool`` unless ``bool`` is
    listed explicitly.

    Args:
        expected_type: Expected type or tuple of types
        param_name: Name of parameter for error messages
        param_index: Position of parameter in function signature

    Returns:
        Decorated function with type validation

    Example:
        >>> class BoxBlur:
        ...     @validate_type(int, "radius")
        ...     def __init__(self, radius: int = 1):
        ...         self.radius = radius
    """
    types = expected_type if isinstance(expected_type, tuple) else (expected_type,)

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            found, value = _extract(args, kwargs, param_name, param_index)
            if found and not _is_instance(value, types):
                raise TypeError(
                    f"{param_name} must be {_type_names(types)}, got {type(value).__name__}"
                )
            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


def validate_choices(
    valid_choices: Iterable[str],
    param_name: str = "value",
    param_index: int = 1,
) -> Callable[[F], F]:
    """
    Decorator restricting a string parameter to a fixed set of names.

    Matching ignores case and surrounding whitespace; the decorated function
    receives the lower-cased name.

    Args:
        valid_choices: Accepted names (lower case)
        param_name: Name of parameter for error messages
        param_index: Position of parameter in function signature

    Returns:
        Decorated function with choice validation
    """
    choices = frozenset(c.lower() for c in valid_choices)
    options = ", ".join(sorted(choices))

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            found, value = _extract(args, kwargs, param_name, param_index)
            if not found:
                return func(*args, **kwargs)

            if not isinstance(value, str):
                raise TypeError(
                    f"{param_name} must be a name (str), got {type(value).__name__}. "
                    f"Valid options are: {options}"
                )
            name = value.strip().lower()
            if name not in choices:
                raise ValueError(f"Unknown {param_name} '{value}'. Valid options are: {options}")

            if len(args) > param_index:
                args = (*args[:param_index], name, *args[param_index + 1 :])
            else:
                kwargs[param_name] = name
            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator
