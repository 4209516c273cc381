"""
Custom Exception Classes for Differential Evolution

Provides specific exceptions for the two failure modes of the engine:
invalid configuration (raised at assignment time) and unknown internal
variants (a programming defect). Fitness function errors are never wrapped.
"""

import math
import numbers
from typing import Any, Tuple


class DEException(Exception):
    """Base exception for all differential evolution related errors."""
    pass


class ConfigurationError(DEException, ValueError):
    """Raised when a tunable or a bound fails its validity predicate."""

    def __init__(self, message: str, parameter: str = None, value: Any = None):
        super().__init__(message)
        self.parameter = parameter
        self.value = value


class UnknownVariantError(DEException):
    """Raised when an internal selector has no matching implementation."""

    def __init__(self, variant: Any, kind: str = None):
        message = f"Unknown {kind or 'variant'}: {variant!r}"
        super().__init__(message)
        self.variant = variant
        self.kind = kind


class SolverStateError(DEException):
    """Raised when a solver is queried in a state that cannot answer."""

    def __init__(self, message: str, state: str = None):
        super().__init__(message)
        self.state = state


def validate_finite(value: float, parameter: str) -> float:
    """
    Ensure a value is a real, finite number.

    Args:
        value: Value to check
        parameter: Parameter name for error context

    Returns:
        The value converted to float

    Raises:
        ConfigurationError: If the value is not numeric, NaN or infinite
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(
            f"{parameter} must be a real number, got {type(value).__name__}",
            parameter=parameter, value=value)
    if not math.isfinite(value):
        raise ConfigurationError(
            f"{parameter} ({value}) must be finite",
            parameter=parameter, value=value)
    return float(value)


def validate_range(value: float, parameter: str, minimum: float,
                   maximum: float = math.inf) -> float:
    """
    Ensure ``minimum <= value < maximum`` for a finite value.

    Raises:
        ConfigurationError: If the value is outside the half-open range
    """
    value = validate_finite(value, parameter)
    if value < minimum or value >= maximum:
        upper = "positive infinity" if math.isinf(maximum) else maximum
        raise ConfigurationError(
            f"{parameter} ({value}) must be in range [{minimum}, {upper})",
            parameter=parameter, value=value)
    return value


def validate_integer(value: int, parameter: str, minimum: int) -> int:
    """Ensure an integer tunable is at least ``minimum``."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(
            f"{parameter} must be an integer, got {type(value).__name__}",
            parameter=parameter, value=value)
    if value < minimum:
        raise ConfigurationError(
            f"{parameter} ({value}) must be in range [{minimum}, positive infinity)",
            parameter=parameter, value=value)
    return int(value)


def validate_interval(interval: Tuple[float, float], parameter: str,
                      limits: Tuple[float, float] = (-math.inf, math.inf)) -> Tuple[float, float]:
    """
    Validate a (min, max) pair: both finite, min < max, inside ``limits``.

    The lower limit is inclusive and the upper limit exclusive.

    Returns:
        The interval as a tuple of floats

    Raises:
        ConfigurationError: If the pair is malformed or out of limits
    """
    try:
        low, high = interval
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"{parameter} must be a (min, max) pair, got {interval!r}",
            parameter=parameter, value=interval)

    low = validate_finite(low, f"{parameter} min")
    high = validate_finite(high, f"{parameter} max")

    if low >= high:
        raise ConfigurationError(
            f"{parameter} min ({low}) must be less than max ({high})",
            parameter=parameter, value=interval)
    if low < limits[0] or high >= limits[1]:
        raise ConfigurationError(
            f"{parameter} ({low}, {high}) must lie in range [{limits[0]}, {limits[1]})",
            parameter=parameter, value=interval)
    return low, high
