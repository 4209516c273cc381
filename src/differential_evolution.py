"""
Differential Evolution Solver

Finds the global minimum of a multivariable fitness function over
box-bounded real parameters. The solver owns all mutable run state (the
population, the random generator and the evaluation counter) and moves
through Uninitialized -> Initializing -> Iterating -> Terminated.
"""

import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from tqdm import tqdm

from de_config import DEConfig
from de_constants import SolverState, TerminationCause, UpdateType
from de_exceptions import SolverStateError, UnknownVariantError, validate_integer
from de_logging import get_logger
from de_components.convergence_detection import ConvergenceDetector
from de_components.evaluation import FitnessFunction, FitnessFunctionWrapper
from de_components.population_management import Individual, PopulationManager
from de_components.reporting import DEReporter, OptimizationResult
from de_components.scaling import Scaler
from de_components.trial_generation import TrialGenerator


class DifferentialEvolutionSolver:
    def __init__(self, config: DEConfig = None, reporter: DEReporter = None) -> None:
        """
        Args:
            config: Tunables for every run of this solver (defaults if None)
            reporter: Optional collector of per-generation statistics
        """
        self.config = config if config is not None else DEConfig()
        self.reporter = reporter
        self.logger = get_logger("DifferentialEvolution")

        self.state = SolverState.UNINITIALIZED
        self.population: List[Individual] = []
        self._result: Optional[OptimizationResult] = None

    @property
    def result(self) -> OptimizationResult:
        """Result of the last terminated run."""
        if self.state != SolverState.TERMINATED or self._result is None:
            raise SolverStateError(
                f"No result available in state '{self.state.value}'", state=self.state.value)
        return self._result

    def solve(self, fitness_function: FitnessFunction,
              bounds: Sequence[Tuple[float, float]],
              args: Any = None, seed: Optional[int] = None) -> OptimizationResult:
        """
        Run differential evolution from a fresh population.

        Args:
            fitness_function: Objective ``f(variables, args) -> float`` to minimize.
                It receives real coordinates and must not mutate them.
            bounds: One (min, max) pair per variable
            args: Opaque value forwarded unchanged to every fitness call
            seed: Seed for reproducible runs; None draws entropy from the OS

        Returns:
            OptimizationResult of the run

        Raises:
            ConfigurationError: If bounds or seed are invalid (nothing is evaluated)
        """
        # Validate everything before touching any run state
        scaler = Scaler(bounds)
        if seed is not None:
            seed = validate_integer(seed, 'seed', 0)
        config = DEConfig.from_dict(self.config.to_dict())

        self._result = None
        self.state = SolverState.INITIALIZING
        start_time = time.perf_counter()

        rng = np.random.default_rng(seed)
        fitness = FitnessFunctionWrapper(fitness_function, args)
        population_size = config.population_size(scaler.n_variables)
        population_manager = PopulationManager(scaler.n_variables, population_size, config.init_type)
        trial_generator = TrialGenerator(
            config.strategy, config.recombination_probability, fitness, scaler)
        convergence_detector = ConvergenceDetector(
            config.absolute_tolerance, config.relative_tolerance)

        self.logger.log_run_start(scaler.n_variables, population_size, config.strategy.value)
        self.logger.debug("Convergence criterion", **convergence_detector.get_configuration())
        if self.reporter:
            self.reporter.start_run(dict(config.to_dict(), bounds=[list(b) for b in scaler.bounds], seed=seed))

        # Initial population, best promoted to slot 0
        population = population_manager.initialize_population(rng)
        for individual in population:
            individual.energy = fitness.evaluate(scaler.to_scaled(individual.values))
        population = population_manager.promote_lowest_energy(population)
        self.population = population

        energy_history = [population[0].energy]
        if self.reporter:
            self.reporter.record_generation(
                0, population_manager.get_population_statistics(population),
                None, fitness.evaluation_count)

        # Evolution loop
        self.state = SolverState.ITERATING
        cause_of_termination = TerminationCause.MAX_ITERATIONS
        iterations = 0

        progress = tqdm(range(1, config.max_iterations + 1), desc="Differential evolution",
                        unit="gen", disable=not config.display_progress)
        try:
            for generation in progress:
                mutation_value = self._draw_mutation_value(config.mutation_range, rng)
                population = self._next_generation(
                    config.update_type, population, mutation_value,
                    trial_generator, population_manager, rng)
                self.population = population
                iterations = generation

                best_energy = population[0].energy
                energy_history.append(best_energy)
                progress.set_postfix(best=f"{best_energy:.6g}", refresh=False)
                self.logger.log_generation_complete(
                    generation, best_energy, mutation_value, verbose=config.display_progress)
                if self.reporter:
                    self.reporter.record_generation(
                        generation, population_manager.get_population_statistics(population),
                        mutation_value, fitness.evaluation_count)

                converged, std, threshold = convergence_detector.check_convergence(
                    population_manager.energies(population))
                if converged:
                    cause_of_termination = TerminationCause.CONVERGED
                    self.logger.log_convergence(generation, std, threshold)
                    break
        finally:
            progress.close()

        energies = population_manager.energies(population)
        self._result = OptimizationResult(
            best_solution=tuple(scaler.to_list(population[0].values)),
            energy=population[0].energy,
            optimization_time=time.perf_counter() - start_time,
            function_evaluations=fitness.evaluation_count,
            convergence=ConvergenceDetector.convergence_metric(energies),
            cause_of_termination=cause_of_termination,
            iterations=iterations,
            energy_history=tuple(energy_history)
        )
        self.state = SolverState.TERMINATED

        self.logger.log_run_complete(self._result)
        self.logger.debug("Component statistics", **self._component_statistics(
            population_manager, trial_generator))
        return self._result

    @staticmethod
    def _draw_mutation_value(mutation_range: Tuple[float, float],
                             rng: np.random.Generator) -> float:
        """F for one generation, uniform in [min, max)."""
        low, high = mutation_range
        return low + rng.random() * (high - low)

    def _next_generation(self, update_type: UpdateType, population: List[Individual],
                         mutation_value: float, trial_generator: TrialGenerator,
                         population_manager: PopulationManager,
                         rng: np.random.Generator) -> List[Individual]:
        """Run one generation with the configured replacement policy."""
        if update_type == UpdateType.IMMEDIATE:
            return self._evolve_immediate(
                population, mutation_value, trial_generator, population_manager, rng)
        elif update_type == UpdateType.DEFERRED:
            return self._evolve_deferred(
                population, mutation_value, trial_generator, population_manager, rng)
        raise UnknownVariantError(update_type, kind="update type")

    @staticmethod
    def _evolve_immediate(population: List[Individual], mutation_value: float,
                          trial_generator: TrialGenerator,
                          population_manager: PopulationManager,
                          rng: np.random.Generator) -> List[Individual]:
        """
        Replace each candidate as soon as its trial improves on it.

        A trial that also beats the current best is promoted to slot 0
        before the next candidate, so later candidates see the new best.
        """
        for candidate in range(len(population)):
            trial = trial_generator.generate(candidate, mutation_value, population, rng)
            if trial.energy < population[candidate].energy:
                population[candidate] = trial
                if trial.energy < population[0].energy:
                    population_manager.promote_lowest_energy(population)
        return population

    @staticmethod
    def _evolve_deferred(population: List[Individual], mutation_value: float,
                         trial_generator: TrialGenerator,
                         population_manager: PopulationManager,
                         rng: np.random.Generator) -> List[Individual]:
        """
        Generate every trial against the frozen population, then replace.

        The best is promoted once, after the whole generation.
        """
        trials = [trial_generator.generate(candidate, mutation_value, population, rng)
                  for candidate in range(len(population))]

        for index, trial in enumerate(trials):
            if trial.energy < population[index].energy:
                population[index] = trial
        return population_manager.promote_lowest_energy(population)

    @staticmethod
    def _component_statistics(population_manager: PopulationManager,
                              trial_generator: TrialGenerator) -> Dict[str, Any]:
        stats = {}
        stats.update(population_manager.get_statistics())
        stats.update(trial_generator.get_statistics())
        return stats


def differential_evolution(fitness_function: FitnessFunction,
                           bounds: Sequence[Tuple[float, float]],
                           args: Any = None, seed: Optional[int] = None,
                           **config_params) -> OptimizationResult:
    """
    Convenience wrapper: build a DEConfig from keyword arguments and solve.

    Example:
        >>> result = differential_evolution(sphere, [(-5, 5), (-5, 5)], seed=1,
        ...                                 strategy="rand1exp", display_progress=False)
    """
    solver = DifferentialEvolutionSolver(DEConfig(**config_params))
    return solver.solve(fitness_function, bounds, args=args, seed=seed)
