"""
Scaling Module

Maps candidate vectors between the normalized search space [0, 1]^n and
the user's box-bounded real space. The solver searches in normalized
coordinates only; real coordinates exist solely for fitness evaluation
and for the reported solution.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

from de_constants import DEConstants
from de_exceptions import ConfigurationError, validate_interval


class Scaler:
    """
    Affine map between normalized and real coordinates.

    Each variable keeps ``center = (min + max) / 2`` and
    ``half_width = |max - min|`` so that a normalized value ``v`` maps to
    ``center + half_width * (v - 0.5)``.
    """

    def __init__(self, bounds: Sequence[Tuple[float, float]]):
        """
        Build the scaler from validated bounds.

        Args:
            bounds: One (min, max) pair per optimized variable

        Raises:
            ConfigurationError: If bounds are empty, non-finite or min >= max
        """
        self.bounds = self.validate_bounds(bounds)
        lows = np.array([low for low, _ in self.bounds], dtype=np.float64)
        highs = np.array([high for _, high in self.bounds], dtype=np.float64)

        self.center = 0.5 * (highs + lows)
        self.half_width = np.abs(highs - lows)

        # Read-only so the scaler cannot drift during a run
        self.center.flags.writeable = False
        self.half_width.flags.writeable = False

    @staticmethod
    def validate_bounds(bounds: Sequence[Tuple[float, float]]) -> Tuple[Tuple[float, float], ...]:
        """
        Validate every bound and return an immutable copy.

        Returns:
            Tuple of (min, max) float pairs
        """
        if bounds is None:
            raise ConfigurationError("Bounds are required", parameter="bounds")
        try:
            bounds = list(bounds)
        except TypeError:
            raise ConfigurationError(
                f"Bounds must be a sequence of (min, max) pairs, got {type(bounds).__name__}",
                parameter="bounds", value=bounds)
        if not bounds:
            raise ConfigurationError("At least one bound is required", parameter="bounds")

        validated = []
        for index, bound in enumerate(bounds):
            low, high = validate_interval(bound, f"bound[{index}]")
            if not math.isfinite(high - low):
                raise ConfigurationError(
                    f"bound[{index}] width ({low}, {high}) overflows a float",
                    parameter=f"bound[{index}]", value=bound)
            validated.append((low, high))
        return tuple(validated)

    @property
    def n_variables(self) -> int:
        return len(self.bounds)

    def to_scaled(self, normalized: np.ndarray) -> np.ndarray:
        """Convert a normalized vector to real coordinates (new array)."""
        normalized = np.asarray(normalized, dtype=np.float64)
        return self.center + self.half_width * (normalized - DEConstants.NORMALIZED_CENTER)

    def to_normalized(self, scaled: np.ndarray) -> np.ndarray:
        """Convert a real vector back to normalized coordinates (new array)."""
        scaled = np.asarray(scaled, dtype=np.float64)
        return (scaled - self.center) / self.half_width + DEConstants.NORMALIZED_CENTER

    def to_list(self, normalized: np.ndarray) -> List[float]:
        return [float(value) for value in self.to_scaled(normalized)]

    def __repr__(self) -> str:
        return f"Scaler(bounds={list(self.bounds)})"
