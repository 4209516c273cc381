"""
DE Components Module

Modular components of the differential evolution solver:

- Scaler: Maps between normalized [0, 1]^n and the user's bounded space
- PopulationManager: Initialization (random, Latin hypercube) and best-first ordering
- mutation_strategies: The six mutation formulas and twelve search strategies
- TrialGenerator: Crossover, constraint repair and trial evaluation
- FitnessFunctionWrapper: Counts evaluations and forwards optional arguments
- ConvergenceDetector: Tolerance-based stopping criterion
- DEReporter / OptimizationResult: Run results and exports

Usage:
    from de_components import Scaler, PopulationManager
    from de_components.mutation_strategies import SearchStrategy
"""

from .scaling import Scaler
from .population_management import Individual, InitializationType, PopulationManager
from .mutation_strategies import CrossoverKind, MutationBase, SearchStrategy
from .evaluation import FitnessFunctionWrapper
from .trial_generation import TrialGenerator
from .convergence_detection import ConvergenceDetector
from .reporting import DEReporter, OptimizationResult

__all__ = [
    'Scaler',
    'Individual',
    'InitializationType',
    'PopulationManager',
    'CrossoverKind',
    'MutationBase',
    'SearchStrategy',
    'FitnessFunctionWrapper',
    'TrialGenerator',
    'ConvergenceDetector',
    'DEReporter',
    'OptimizationResult'
]

__version__ = '1.0.0'
__description__ = 'Modular Differential Evolution for Box-Bounded Global Optimization'
