"""
Fitness Evaluation Module

Wraps the user objective: counts evaluations and forwards the optional
argument bag unchanged to every call. Exceptions raised by the objective
propagate to the caller; the engine has no authority to correct them.
"""

from typing import Any, Callable, Sequence

import numpy as np

FitnessFunction = Callable[[Sequence[float], Any], float]


class FitnessFunctionWrapper:
    """
    Counting wrapper around a fitness function ``f(variables, args)``.

    ``args`` is passed through as given; ``None`` means "no arguments"
    and is still passed explicitly.
    """

    def __init__(self, fitness_function: FitnessFunction, args: Any = None):
        if not callable(fitness_function):
            raise TypeError(f"Fitness function must be callable, got {type(fitness_function).__name__}")
        self.fitness_function = fitness_function
        self.args = args
        self.evaluation_count = 0

    def evaluate(self, variables: np.ndarray) -> float:
        """
        Evaluate the objective at real coordinates ``variables``.

        NaN and infinite results are returned as-is.
        """
        self.evaluation_count += 1
        return float(self.fitness_function(variables, self.args))

    def __call__(self, variables: np.ndarray) -> float:
        return self.evaluate(variables)
