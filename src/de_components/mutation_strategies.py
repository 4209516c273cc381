"""
Mutation Strategies Module

The six differential mutation formulas and the twelve user-selectable
search strategies built from them. A strategy is a (mutation base,
crossover kind) pair; both crossover variants of a base share the same
formula and differ only in how the prime vector is merged into the trial.

Every formula works in normalized coordinates and returns a fresh
"prime" vector. ``samples`` is a random permutation of all population
indices except the candidate, so the first k entries are k distinct
members different from the candidate.
"""

from enum import Enum
from typing import Dict, List, Sequence

import numpy as np

from de_exceptions import UnknownVariantError
from de_components.population_management import Individual


class MutationBase(str, Enum):
    """Mutation formulas shared by binomial and exponential strategies."""

    BEST1 = "best1"
    BEST2 = "best2"
    RAND1 = "rand1"
    RAND2 = "rand2"
    RAND_TO_BEST1 = "randtobest1"
    CURRENT_TO_BEST1 = "currenttobest1"


class CrossoverKind(str, Enum):
    """How the prime vector is merged with the candidate."""

    BINOMIAL = "bin"
    EXPONENTIAL = "exp"


class SearchStrategy(str, Enum):
    """The twelve differential evolution strategies."""

    BEST1_BIN = "best1bin"
    RAND_TO_BEST1_BIN = "randtobest1bin"
    CURRENT_TO_BEST1_BIN = "currenttobest1bin"
    RAND2_BIN = "rand2bin"
    RAND1_BIN = "rand1bin"
    BEST2_BIN = "best2bin"
    BEST1_EXP = "best1exp"
    RAND_TO_BEST1_EXP = "randtobest1exp"
    CURRENT_TO_BEST1_EXP = "currenttobest1exp"
    RAND2_EXP = "rand2exp"
    RAND1_EXP = "rand1exp"
    BEST2_EXP = "best2exp"

    @property
    def base(self) -> MutationBase:
        return MutationBase(self.value[:-3])

    @property
    def crossover(self) -> CrossoverKind:
        return CrossoverKind(self.value[-3:])


# Distinct random members each formula draws from the sample permutation
SAMPLES_REQUIRED: Dict[MutationBase, int] = {
    MutationBase.BEST1: 2,
    MutationBase.BEST2: 4,
    MutationBase.RAND1: 3,
    MutationBase.RAND2: 5,
    MutationBase.RAND_TO_BEST1: 3,
    MutationBase.CURRENT_TO_BEST1: 2,
}


def best1(samples: Sequence[int], population: List[Individual],
          mutation_value: float, candidate: int) -> np.ndarray:
    """best + F * (s0 - s1)"""
    s0, s1 = (population[i].values for i in samples[:2])
    return population[0].values + mutation_value * (s0 - s1)


def best2(samples: Sequence[int], population: List[Individual],
          mutation_value: float, candidate: int) -> np.ndarray:
    """best + F * (s0 + s1 - s2 - s3)"""
    s0, s1, s2, s3 = (population[i].values for i in samples[:4])
    return population[0].values + mutation_value * (s0 + s1 - s2 - s3)


def rand1(samples: Sequence[int], population: List[Individual],
          mutation_value: float, candidate: int) -> np.ndarray:
    """s0 + F * (s1 - s2)"""
    s0, s1, s2 = (population[i].values for i in samples[:3])
    return s0 + mutation_value * (s1 - s2)


def rand2(samples: Sequence[int], population: List[Individual],
          mutation_value: float, candidate: int) -> np.ndarray:
    """s0 + F * (s1 + s2 - s3 - s4)"""
    s0, s1, s2, s3, s4 = (population[i].values for i in samples[:5])
    return s0 + mutation_value * (s1 + s2 - s3 - s4)


def rand_to_best1(samples: Sequence[int], population: List[Individual],
                  mutation_value: float, candidate: int) -> np.ndarray:
    """s0 + F * (best - s0) + F * (s1 - s2)"""
    s0, s1, s2 = (population[i].values for i in samples[:3])
    prime = s0 + mutation_value * (population[0].values - s0)
    return prime + mutation_value * (s1 - s2)


def current_to_best1(samples: Sequence[int], population: List[Individual],
                     mutation_value: float, candidate: int) -> np.ndarray:
    """current + F * (best - current + s0 - s1)"""
    s0, s1 = (population[i].values for i in samples[:2])
    current = population[candidate].values
    return current + mutation_value * (population[0].values - current + s0 - s1)


def mutate(base: MutationBase, samples: Sequence[int], population: List[Individual],
           mutation_value: float, candidate: int) -> np.ndarray:
    """
    Build the prime vector for ``candidate`` with the given formula.

    Args:
        base: Mutation formula
        samples: Random permutation of population indices without the candidate
        population: Current population, best at index 0
        mutation_value: Differential weight F for this generation
        candidate: Index of the individual being improved

    Returns:
        New prime vector (may leave [0, 1]; repaired by the trial generator)

    Raises:
        UnknownVariantError: If ``base`` has no formula
    """
    if base == MutationBase.BEST1:
        return best1(samples, population, mutation_value, candidate)
    elif base == MutationBase.BEST2:
        return best2(samples, population, mutation_value, candidate)
    elif base == MutationBase.RAND1:
        return rand1(samples, population, mutation_value, candidate)
    elif base == MutationBase.RAND2:
        return rand2(samples, population, mutation_value, candidate)
    elif base == MutationBase.RAND_TO_BEST1:
        return rand_to_best1(samples, population, mutation_value, candidate)
    elif base == MutationBase.CURRENT_TO_BEST1:
        return current_to_best1(samples, population, mutation_value, candidate)
    raise UnknownVariantError(base, kind="mutation strategy")
