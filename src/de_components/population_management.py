"""
Population Management Module

Handles individual representation, population initialization and the
"best at index 0" population invariant.

Features:
- Uniform random initialization
- Latin hypercube initialization (stratified per variable)
- Promotion of the lowest-energy individual to slot 0
- Population energy statistics
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

import numpy as np

from de_constants import DEConstants
from de_exceptions import UnknownVariantError


class InitializationType(str, Enum):
    """Population initialization strategies."""

    LATIN_HYPERCUBE = "latinhypercube"  # stratified coverage of every variable
    RANDOM = "random"


@dataclass(eq=False)
class Individual:
    """
    One candidate solution in normalized coordinates.

    ``energy`` is the fitness at the scaled point and stays +inf until
    the individual has been evaluated. Individuals compare by identity.
    """

    values: np.ndarray
    energy: float = math.inf

    @property
    def n_variables(self) -> int:
        return len(self.values)


class PopulationManager:
    """
    Manages population-level operations for differential evolution.

    Creates the initial population and maintains the invariant that
    ``population[0]`` holds the lowest energy after every promotion.
    """

    def __init__(self, n_variables: int, population_size: int,
                 init_type: InitializationType = InitializationType.LATIN_HYPERCUBE):
        """
        Initialize population manager.

        Args:
            n_variables: Dimensionality of the problem
            population_size: Number of individuals (at least 5)
            init_type: Initialization strategy
        """
        if population_size < DEConstants.MIN_POPULATION_SIZE:
            raise ValueError(
                f"Population size ({population_size}) must be at least {DEConstants.MIN_POPULATION_SIZE}")

        self.n_variables = n_variables
        self.population_size = population_size
        self.init_type = init_type

        self.stats = {
            'populations_initialized': 0,
            'promotions': 0
        }

    @staticmethod
    def population_size_for(n_variables: int, multiplier: int,
                            minimum: int = DEConstants.MIN_POPULATION_SIZE) -> int:
        """
        Population size used for a problem with ``n_variables``.

        ``minimum`` lets a strategy raise the floor so every candidate has
        enough distinct other members to sample from.
        """
        return max(multiplier * n_variables, DEConstants.MIN_POPULATION_SIZE, minimum)

    def initialize_population(self, rng: np.random.Generator) -> List[Individual]:
        """
        Create an unevaluated population with the configured strategy.

        Args:
            rng: Generator owned by the running solver

        Returns:
            List of individuals with energy +inf
        """
        if self.init_type == InitializationType.RANDOM:
            population = self.initialize_random(rng)
        elif self.init_type == InitializationType.LATIN_HYPERCUBE:
            population = self.initialize_latin_hypercube(rng)
        else:
            raise UnknownVariantError(self.init_type, kind="initialization type")

        self.stats['populations_initialized'] += 1
        return population

    def initialize_random(self, rng: np.random.Generator) -> List[Individual]:
        """Draw every component independently and uniformly from [0, 1)."""
        values = rng.random((self.population_size, self.n_variables))
        return [Individual(values[j].copy()) for j in range(self.population_size)]

    def initialize_latin_hypercube(self, rng: np.random.Generator) -> List[Individual]:
        """
        Latin hypercube sampling.

        For each variable, [0, 1) is split into ``population_size`` equal
        segments, one jittered point is drawn inside every segment and the
        points are shuffled independently per variable.
        """
        segment_size = 1.0 / self.population_size
        lin_space = np.arange(self.population_size) * segment_size

        values = np.empty((self.population_size, self.n_variables))
        for i in range(self.n_variables):
            column = lin_space + rng.random(self.population_size) * segment_size
            values[:, i] = rng.permutation(column)

        return [Individual(values[j].copy()) for j in range(self.population_size)]

    def promote_lowest_energy(self, population: List[Individual]) -> List[Individual]:
        """
        Swap the lowest-energy individual into slot 0 (in place).

        Ties keep the earliest index, so an already-best slot 0 stays put.
        """
        best_index = 0
        best_energy = population[0].energy
        for index in range(1, len(population)):
            if population[index].energy < best_energy:
                best_index = index
                best_energy = population[index].energy

        if best_index != 0:
            population[0], population[best_index] = population[best_index], population[0]
        self.stats['promotions'] += 1
        return population

    @staticmethod
    def energies(population: List[Individual]) -> np.ndarray:
        return np.array([individual.energy for individual in population], dtype=np.float64)

    def get_population_statistics(self, population: List[Individual]) -> Dict[str, float]:
        """Best, mean and standard deviation of population energies."""
        energies = self.energies(population)
        return {
            'best_energy': float(population[0].energy),
            'mean_energy': float(np.mean(energies)),
            'std_energy': float(np.std(energies)),
            'worst_energy': float(np.max(energies))
        }

    def get_statistics(self) -> Dict[str, int]:
        return dict(self.stats)
