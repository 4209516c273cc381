"""
Trial Generation Module

Produces one trial individual per candidate: sample selection, mutation,
crossover (binomial or exponential), constraint repair and evaluation.

The generator never mutates the population; a trial is a fresh
Individual until the solver decides to accept it.
"""

from typing import Dict, List

import numpy as np

from de_exceptions import UnknownVariantError
from de_components.evaluation import FitnessFunctionWrapper
from de_components.mutation_strategies import CrossoverKind, SearchStrategy, mutate
from de_components.population_management import Individual
from de_components.scaling import Scaler


class TrialGenerator:
    """
    Synthesizes and evaluates trial individuals for one solver run.

    The random generator is borrowed from the solver on every call so the
    draw order stays under the solver's control.
    """

    def __init__(self, strategy: SearchStrategy, recombination_probability: float,
                 fitness_function: FitnessFunctionWrapper, scaler: Scaler):
        """
        Initialize trial generator.

        Args:
            strategy: Search strategy (mutation base + crossover kind)
            recombination_probability: Probability of inheriting from the prime vector
            fitness_function: Counting wrapper around the user objective
            scaler: Normalized <-> real coordinate map
        """
        self.strategy = SearchStrategy(strategy)
        self.recombination_probability = recombination_probability
        self.fitness_function = fitness_function
        self.scaler = scaler

        self.stats = {
            'trials_generated': 0,
            'components_repaired': 0
        }

    def generate(self, candidate: int, mutation_value: float,
                 population: List[Individual], rng: np.random.Generator) -> Individual:
        """
        Create and evaluate the trial for ``population[candidate]``.

        Args:
            candidate: Index of the individual being improved
            mutation_value: Differential weight F for this generation
            population: Current population, best at index 0
            rng: Generator owned by the running solver

        Returns:
            New evaluated Individual
        """
        samples = self.select_samples(candidate, len(population), rng)
        prime = mutate(self.strategy.base, samples, population, mutation_value, candidate)

        current = population[candidate].values
        fill_point = int(rng.integers(0, len(current)))

        crossover = self.strategy.crossover
        if crossover == CrossoverKind.BINOMIAL:
            values = self.binomial_crossover(current, prime, fill_point, rng)
        elif crossover == CrossoverKind.EXPONENTIAL:
            values = self.exponential_crossover(current, prime, fill_point, rng)
        else:
            raise UnknownVariantError(crossover, kind="crossover kind")

        trial = Individual(self.ensure_constraint(values, rng))
        trial.energy = self.fitness_function.evaluate(self.scaler.to_scaled(trial.values))

        self.stats['trials_generated'] += 1
        return trial

    @staticmethod
    def select_samples(candidate: int, population_size: int,
                       rng: np.random.Generator) -> np.ndarray:
        """Random permutation of every population index except ``candidate``."""
        indexes = np.array([i for i in range(population_size) if i != candidate])
        return rng.permutation(indexes)

    def binomial_crossover(self, current: np.ndarray, prime: np.ndarray,
                           fill_point: int, rng: np.random.Generator) -> np.ndarray:
        """
        Take each component from ``prime`` with the recombination probability.

        The fill point always comes from ``prime`` so the trial differs from
        the candidate in at least one dimension.
        """
        crossover_mask = rng.random(len(current)) < self.recombination_probability
        crossover_mask[fill_point] = True
        return np.where(crossover_mask, prime, current)

    def exponential_crossover(self, current: np.ndarray, prime: np.ndarray,
                              fill_point: int, rng: np.random.Generator) -> np.ndarray:
        """
        Copy a run of consecutive components from ``prime``.

        Starts at the fill point and wraps around; stops at the first draw
        not below the recombination probability or after n components.
        """
        trial = current.copy()
        n_variables = len(trial)
        copied = 0
        while copied < n_variables and rng.random() < self.recombination_probability:
            trial[fill_point] = prime[fill_point]
            fill_point = (fill_point + 1) % n_variables
            copied += 1
        return trial

    def ensure_constraint(self, values: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        """
        Replace components outside [0, 1] with fresh uniform draws.

        Resampling instead of clamping keeps the search from piling up on
        the bounds.
        """
        out_of_bounds = (values < 0.0) | (values > 1.0)
        repairs = int(np.count_nonzero(out_of_bounds))
        if repairs:
            values = values.copy()
            values[out_of_bounds] = rng.random(repairs)
            self.stats['components_repaired'] += repairs
        return values

    def get_statistics(self) -> Dict[str, int]:
        return dict(self.stats)
