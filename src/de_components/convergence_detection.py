"""
Convergence Detection Module

Stops a run when the spread of population energies becomes small
relative to their mean:

    std(energies) <= absolute_tolerance + relative_tolerance * |mean(energies)|

The reported convergence metric is the coefficient of variation
``std / |mean + eps|``.
"""

from typing import List, Tuple

import numpy as np

from de_constants import DEConstants


class ConvergenceDetector:
    """Tolerance-based convergence test over population energies."""

    def __init__(self, absolute_tolerance: float = DEConstants.DEFAULT_ABSOLUTE_TOLERANCE,
                 relative_tolerance: float = DEConstants.DEFAULT_RELATIVE_TOLERANCE):
        """
        Initialize the convergence detector.

        Args:
            absolute_tolerance: Absolute part of the stopping threshold
            relative_tolerance: Multiplier for |mean energy| in the threshold
        """
        self.absolute_tolerance = absolute_tolerance
        self.relative_tolerance = relative_tolerance

        # (std, threshold) per checked generation
        self.history: List[Tuple[float, float]] = []

    def threshold(self, energies: np.ndarray) -> float:
        return self.absolute_tolerance + self.relative_tolerance * abs(float(np.mean(energies)))

    def check_convergence(self, energies: np.ndarray) -> Tuple[bool, float, float]:
        """
        Check whether the population has converged.

        Args:
            energies: Energies of every current population member

        Returns:
            Tuple of (converged, std, threshold). NaN energies never converge.
        """
        energies = np.asarray(energies, dtype=np.float64)
        std = float(np.std(energies))
        threshold = self.threshold(energies)
        self.history.append((std, threshold))
        return bool(std <= threshold), std, threshold

    @staticmethod
    def convergence_metric(energies: np.ndarray) -> float:
        """Coefficient of variation of the energies."""
        energies = np.asarray(energies, dtype=np.float64)
        return float(np.std(energies) / abs(np.mean(energies) + DEConstants.MACHINE_EPSILON))

    def reset(self):
        """Reset the detector for a new run."""
        self.history = []

    def get_configuration(self) -> dict:
        return {
            'absolute_tolerance': self.absolute_tolerance,
            'relative_tolerance': self.relative_tolerance
        }
