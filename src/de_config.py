"""
Configuration Management for Differential Evolution

Validates every tunable at the moment it is assigned, in the constructor
and on later attribute assignment, so no run can start with invalid
parameters. A rejected assignment leaves the previous value in place.
"""

from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Tuple

from de_constants import DEConstants, UpdateType
from de_exceptions import (
    ConfigurationError, validate_integer, validate_interval, validate_range
)
from de_components.mutation_strategies import SAMPLES_REQUIRED, SearchStrategy
from de_components.population_management import InitializationType, PopulationManager


def _enum_validator(enum_type, parameter: str) -> Callable[[Any], Any]:
    def validate(value):
        try:
            return enum_type(value.lower() if isinstance(value, str) else value)
        except ValueError:
            choices = [member.value for member in enum_type]
            raise ConfigurationError(
                f"{parameter} ({value!r}) must be one of: {choices}",
                parameter=parameter, value=value)
    return validate


def _validate_display(value):
    if not isinstance(value, bool):
        raise ConfigurationError(
            f"display_progress must be a bool, got {type(value).__name__}",
            parameter='display_progress', value=value)
    return value


_VALIDATORS: Dict[str, Callable[[Any], Any]] = {
    'init_type': _enum_validator(InitializationType, 'init_type'),
    'update_type': _enum_validator(UpdateType, 'update_type'),
    'strategy': _enum_validator(SearchStrategy, 'strategy'),
    'mutation_range': lambda value: validate_interval(
        value, 'mutation_range', DEConstants.MUTATION_LIMITS),
    'recombination_probability': lambda value: validate_range(
        value, 'recombination_probability', *DEConstants.RECOMBINATION_LIMITS),
    'pop_size_multiplier': lambda value: validate_integer(value, 'pop_size_multiplier', 1),
    'max_iterations': lambda value: validate_integer(value, 'max_iterations', 1),
    'absolute_tolerance': lambda value: validate_range(value, 'absolute_tolerance', 0.0),
    'relative_tolerance': lambda value: validate_range(value, 'relative_tolerance', 0.0),
    'display_progress': _validate_display,
}


@dataclass
class DEConfig:
    """
    Tunables of a differential evolution run.

    Enum fields accept members or their string values ("best1exp",
    "random", "deferred", ...).
    """

    init_type: InitializationType = InitializationType.LATIN_HYPERCUBE
    update_type: UpdateType = UpdateType.IMMEDIATE
    strategy: SearchStrategy = SearchStrategy.BEST1_BIN
    mutation_range: Tuple[float, float] = DEConstants.DEFAULT_MUTATION_RANGE
    recombination_probability: float = DEConstants.DEFAULT_RECOMBINATION_PROBABILITY
    pop_size_multiplier: int = DEConstants.DEFAULT_POP_SIZE_MULTIPLIER
    max_iterations: int = DEConstants.DEFAULT_MAX_ITERATIONS
    absolute_tolerance: float = DEConstants.DEFAULT_ABSOLUTE_TOLERANCE
    relative_tolerance: float = DEConstants.DEFAULT_RELATIVE_TOLERANCE
    display_progress: bool = True

    def __setattr__(self, name: str, value: Any):
        validator = _VALIDATORS.get(name)
        if validator is not None:
            value = validator(value)
        super().__setattr__(name, value)

    @classmethod
    def from_args(cls, args) -> 'DEConfig':
        """
        Create configuration from parsed CLI arguments.

        Options left at None keep their defaults.

        Args:
            args: argparse.Namespace from CLI parsing

        Returns:
            Validated DEConfig instance
        """
        config_params = {}
        for name in cls.field_names():
            value = getattr(args, name, None)
            if value is not None:
                config_params[name] = value
        return cls(**config_params)

    @classmethod
    def field_names(cls):
        return [f.name for f in fields(cls)]

    def population_size(self, n_variables: int) -> int:
        """
        Population size for a problem with ``n_variables``.

        ``max(multiplier * n, 5)``, raised to one more than the number of
        samples the strategy draws (six for the rand2 strategies).
        """
        minimum = SAMPLES_REQUIRED[self.strategy.base] + 1
        return PopulationManager.population_size_for(n_variables, self.pop_size_multiplier, minimum)

    def summary(self) -> str:
        """Generate human-readable configuration summary."""
        return f"""DE Configuration:
  Strategy: {self.strategy.value} (init: {self.init_type.value}, update: {self.update_type.value})
  Mutation range: [{self.mutation_range[0]}, {self.mutation_range[1]})
  Recombination probability: {self.recombination_probability}
  Population multiplier: {self.pop_size_multiplier}
  Max iterations: {self.max_iterations}
  Tolerance: absolute={self.absolute_tolerance}, relative={self.relative_tolerance}"""

    def __str__(self) -> str:
        return (f"DEConfig(strategy={self.strategy.value}, "
                f"max_iterations={self.max_iterations}, multiplier={self.pop_size_multiplier})")

    def to_dict(self) -> dict:
        """Convert config to dictionary for serialization."""
        return {
            'init_type': self.init_type.value,
            'update_type': self.update_type.value,
            'strategy': self.strategy.value,
            'mutation_range': list(self.mutation_range),
            'recombination_probability': self.recombination_probability,
            'pop_size_multiplier': self.pop_size_multiplier,
            'max_iterations': self.max_iterations,
            'absolute_tolerance': self.absolute_tolerance,
            'relative_tolerance': self.relative_tolerance,
            'display_progress': self.display_progress
        }

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'DEConfig':
        """Create config from dictionary."""
        return cls(**config_dict)

    def update(self, **kwargs) -> 'DEConfig':
        """Create a new config with updated values."""
        current_config = self.to_dict()
        current_config.update(kwargs)
        return self.from_dict(current_config)
