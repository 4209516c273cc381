"""
Configuration Constants for Differential Evolution

Centralizes default tunables, validation ranges and termination causes
so the solver, config and components agree on the same numbers.
"""

from enum import Enum

import numpy as np


class DEConstants:
    """Default values and limits for differential evolution runs."""

    # Population
    MIN_POPULATION_SIZE = 5
    DEFAULT_POP_SIZE_MULTIPLIER = 15

    # Iteration and convergence
    DEFAULT_MAX_ITERATIONS = 1000
    DEFAULT_ABSOLUTE_TOLERANCE = 0.0
    DEFAULT_RELATIVE_TOLERANCE = 0.01

    # Mutation and crossover
    DEFAULT_MUTATION_RANGE = (0.5, 1.0)
    MUTATION_LIMITS = (0.0, 2.0)         # [min, max)
    DEFAULT_RECOMBINATION_PROBABILITY = 0.7
    RECOMBINATION_LIMITS = (0.0, 1.0)    # [min, max)

    # Normalized search space
    NORMALIZED_CENTER = 0.5

    # Numerical
    MACHINE_EPSILON = float(np.finfo(np.float64).eps)


class TerminationCause:
    """Textual causes reported in the optimization result."""

    MAX_ITERATIONS = "max iterations"
    CONVERGED = "converged"


class UpdateType(str, Enum):
    """When improved trials replace population members."""

    IMMEDIATE = "immediate"   # replace in place, later candidates see the new best
    DEFERRED = "deferred"     # replace after the whole generation has been generated


class SolverState(str, Enum):
    """Lifecycle of a single solver run."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    ITERATING = "iterating"
    TERMINATED = "terminated"
