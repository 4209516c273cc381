"""
Differential Evolution Integration Tests

Tests complete solver runs: benchmark scenarios, reproducibility,
evaluation accounting, bound respect, convergence correctness and the
two population update policies.
"""

import math
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

import numpy as np

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tests.test_fixtures import DEFixtures, FitnessSpy
from de_constants import SolverState, TerminationCause, UpdateType
from de_logging import setup_logging
from de_components.benchmark_functions import BENCHMARKS, get_benchmark, rosenbrock, sphere
from de_components.convergence_detection import ConvergenceDetector
from de_components.mutation_strategies import SearchStrategy
from de_components.population_management import InitializationType
from de_components.reporting import DEReporter, OptimizationResult
from de_components.trial_generation import TrialGenerator
from differential_evolution import DifferentialEvolutionSolver, differential_evolution
import main as cli


class TestBenchmarkScenarios(unittest.TestCase):
    """Test the solver finds known minima."""

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)

    def test_separable_quadratic(self):
        solver = DifferentialEvolutionSolver(DEFixtures.get_test_config())
        result = solver.solve(sphere, DEFixtures.SPHERE_BOUNDS, seed=42)

        self.assertLessEqual(result.energy, 1e-6)
        for value in result.best_solution:
            self.assertLess(abs(value), 1e-3)
        self.assertEqual(solver.state, SolverState.TERMINATED)
        self.assertIs(solver.result, result)

    def test_rosenbrock_four_dimensions(self):
        config = DEFixtures.get_test_config(relative_tolerance=0.0)
        result = DifferentialEvolutionSolver(config).solve(
            rosenbrock, DEFixtures.ROSENBROCK_BOUNDS, seed=7)

        self.assertLess(result.energy, 1e-3)
        for value in result.best_solution:
            self.assertAlmostEqual(value, 1.0, delta=0.1)
        self.assertGreater(result.function_evaluations, 0)
        self.assertTrue(math.isfinite(result.function_evaluations))

    def test_rosenbrock_default_tolerance_improves(self):
        spy = FitnessSpy(rosenbrock)
        result = DifferentialEvolutionSolver(DEFixtures.get_test_config()).solve(
            spy, DEFixtures.ROSENBROCK_BOUNDS, seed=11)

        self.assertLess(result.energy, min(rosenbrock(point) for point in spy.calls[:60]))
        DEFixtures.assert_within_bounds(self, result.best_solution, DEFixtures.ROSENBROCK_BOUNDS)

    def test_mccormick_benchmark(self):
        benchmark = get_benchmark("mccormick")
        config = DEFixtures.get_test_config(**benchmark.config_overrides)
        result = DifferentialEvolutionSolver(config).solve(
            benchmark.function, benchmark.bounds, seed=benchmark.seed)

        self.assertAlmostEqual(result.energy, benchmark.optimum_energy, delta=1e-2)

    def test_ackley_benchmark(self):
        benchmark = get_benchmark("ackley")
        config = DEFixtures.get_test_config(**benchmark.config_overrides)
        self.assertEqual(config.update_type, UpdateType.DEFERRED)
        result = DifferentialEvolutionSolver(config).solve(
            benchmark.function, benchmark.bounds, seed=benchmark.seed)

        self.assertLess(result.energy, 1e-3)

    def test_benchmark_registry(self):
        for name, benchmark in BENCHMARKS.items():
            with self.subTest(name=name):
                self.assertEqual(get_benchmark(name.upper()), benchmark)
                energy = benchmark.function(np.array(benchmark.optimum))
                self.assertAlmostEqual(energy, benchmark.optimum_energy, places=3)
        with self.assertRaises(KeyError):
            get_benchmark("himmelblau")


class TestSolverProperties(unittest.TestCase):
    """Test properties that hold for every strategy and update policy."""

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)

    @staticmethod
    def _configurations():
        for strategy in SearchStrategy:
            for update_type in UpdateType:
                yield strategy, update_type

    def test_reproducible_with_fixed_seed(self):
        for strategy, update_type in self._configurations():
            with self.subTest(strategy=strategy, update_type=update_type):
                config = DEFixtures.get_fast_config(strategy=strategy, update_type=update_type)
                first = DifferentialEvolutionSolver(config).solve(
                    sphere, DEFixtures.SPHERE_BOUNDS, seed=2024)
                second = DifferentialEvolutionSolver(config).solve(
                    sphere, DEFixtures.SPHERE_BOUNDS, seed=2024)

                self.assertEqual(first.best_solution, second.best_solution)
                self.assertEqual(first.energy, second.energy)
                self.assertEqual(first.function_evaluations, second.function_evaluations)
                self.assertEqual(first.energy_history, second.energy_history)

    def test_same_solver_is_reusable(self):
        solver = DifferentialEvolutionSolver(DEFixtures.get_fast_config())
        first = solver.solve(sphere, DEFixtures.SPHERE_BOUNDS, seed=5)
        second = solver.solve(sphere, DEFixtures.SPHERE_BOUNDS, seed=5)
        self.assertEqual(first.best_solution, second.best_solution)
        self.assertEqual(first.function_evaluations, second.function_evaluations)

    def test_different_seeds_differ(self):
        config = DEFixtures.get_fast_config(max_iterations=3)
        first = DifferentialEvolutionSolver(config).solve(sphere, DEFixtures.SPHERE_BOUNDS, seed=1)
        second = DifferentialEvolutionSolver(config).solve(sphere, DEFixtures.SPHERE_BOUNDS, seed=2)
        self.assertNotEqual(first.best_solution, second.best_solution)

    def test_best_energy_never_increases(self):
        for strategy, update_type in self._configurations():
            with self.subTest(strategy=strategy, update_type=update_type):
                config = DEFixtures.get_fast_config(strategy=strategy, update_type=update_type)
                result = DifferentialEvolutionSolver(config).solve(
                    rosenbrock, DEFixtures.ROSENBROCK_BOUNDS, seed=9)

                history = result.energy_history
                self.assertEqual(len(history), result.iterations + 1)
                for previous, current in zip(history, history[1:]):
                    self.assertLessEqual(current, previous)
                self.assertEqual(history[-1], result.energy)

    def test_evaluation_accounting(self):
        for strategy, update_type in self._configurations():
            with self.subTest(strategy=strategy, update_type=update_type):
                config = DEFixtures.get_fast_config(strategy=strategy, update_type=update_type)
                spy = FitnessSpy()
                result = DifferentialEvolutionSolver(config).solve(
                    spy, DEFixtures.SPHERE_BOUNDS, seed=13)

                population_size = config.population_size(2)
                self.assertEqual(result.function_evaluations, population_size * (1 + result.iterations))
                self.assertEqual(result.function_evaluations, spy.call_count)

    def test_every_evaluated_point_respects_bounds(self):
        bounds = [(-1.0, 1.0), (10.0, 10.5), (-1000.0, -999.0)]
        for strategy in SearchStrategy:
            with self.subTest(strategy=strategy):
                # Large F pushes many prime vectors outside the unit box
                config = DEFixtures.get_fast_config(
                    strategy=strategy, mutation_range=(1.5, 1.99), max_iterations=10)
                spy = FitnessSpy()
                result = DifferentialEvolutionSolver(config).solve(spy, bounds, seed=17)

                for point in spy.calls:
                    DEFixtures.assert_within_bounds(self, point, bounds)
                DEFixtures.assert_within_bounds(self, result.best_solution, bounds)

    def test_best_individual_is_first_at_every_trial(self):
        original_generate = TrialGenerator.generate

        def checking_generate(generator, candidate, mutation_value, population, rng):
            energies = [individual.energy for individual in population]
            self.assertEqual(population[0].energy, min(energies))
            return original_generate(generator, candidate, mutation_value, population, rng)

        for update_type in UpdateType:
            with self.subTest(update_type=update_type):
                config = DEFixtures.get_fast_config(update_type=update_type, max_iterations=10)
                with patch.object(TrialGenerator, 'generate', autospec=True,
                                  side_effect=checking_generate):
                    DifferentialEvolutionSolver(config).solve(
                        rosenbrock, DEFixtures.ROSENBROCK_BOUNDS, seed=21)

    def test_single_variable_problem(self):
        for strategy in SearchStrategy:
            with self.subTest(strategy=strategy):
                config = DEFixtures.get_fast_config(
                    strategy=strategy, pop_size_multiplier=1, max_iterations=20)
                solver = DifferentialEvolutionSolver(config)
                result = solver.solve(sphere, [(-3.0, 3.0)], seed=31)

                self.assertEqual(len(solver.population), config.population_size(1))
                self.assertGreaterEqual(len(solver.population), 5)
                self.assertEqual(len(result.best_solution), 1)
                DEFixtures.assert_within_bounds(self, result.best_solution, [(-3.0, 3.0)])

    def test_random_initialization(self):
        config = DEFixtures.get_fast_config(init_type=InitializationType.RANDOM)
        result = DifferentialEvolutionSolver(config).solve(sphere, DEFixtures.SPHERE_BOUNDS, seed=3)
        self.assertLess(result.energy, result.energy_history[0] + 1e-12)


class TestConvergence(unittest.TestCase):
    """Test the cause of termination matches the stopping rule."""

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)

    def test_large_absolute_tolerance_converges_after_first_generation(self):
        config = DEFixtures.get_fast_config(absolute_tolerance=1e9)
        result = DifferentialEvolutionSolver(config).solve(sphere, DEFixtures.SPHERE_BOUNDS, seed=1)

        self.assertEqual(result.cause_of_termination, TerminationCause.CONVERGED)
        self.assertEqual(result.iterations, 1)

    def test_zero_tolerance_runs_all_iterations(self):
        config = DEFixtures.get_fast_config(absolute_tolerance=0.0, relative_tolerance=0.0,
                                            max_iterations=5)
        result = DifferentialEvolutionSolver(config).solve(sphere, DEFixtures.SPHERE_BOUNDS, seed=1)

        self.assertEqual(result.cause_of_termination, TerminationCause.MAX_ITERATIONS)
        self.assertEqual(result.iterations, 5)
        self.assertEqual(len(result.energy_history), 6)

    def test_cause_matches_final_population(self):
        for strategy in [SearchStrategy.BEST1_BIN, SearchStrategy.RAND1_EXP,
                         SearchStrategy.CURRENT_TO_BEST1_BIN]:
            for relative_tolerance in [0.0, 0.01, 0.5]:
                with self.subTest(strategy=strategy, relative_tolerance=relative_tolerance):
                    config = DEFixtures.get_fast_config(
                        strategy=strategy, relative_tolerance=relative_tolerance, max_iterations=40)
                    solver = DifferentialEvolutionSolver(config)
                    result = solver.solve(rosenbrock, DEFixtures.ROSENBROCK_BOUNDS, seed=3)

                    energies = np.array([individual.energy for individual in solver.population])
                    detector = ConvergenceDetector(config.absolute_tolerance, relative_tolerance)
                    converged, _, _ = detector.check_convergence(energies)

                    if result.cause_of_termination == TerminationCause.CONVERGED:
                        self.assertTrue(converged)
                        self.assertLessEqual(result.iterations, config.max_iterations)
                    else:
                        self.assertFalse(converged)
                        self.assertEqual(result.iterations, config.max_iterations)
                    self.assertAlmostEqual(result.convergence,
                                           ConvergenceDetector.convergence_metric(energies))


class TestUpdatePolicies(unittest.TestCase):
    """Test immediate and deferred replacement."""

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)

    def _record_snapshots(self, update_type):
        original_generate = TrialGenerator.generate
        snapshots = []

        def recording_generate(generator, candidate, mutation_value, population, rng):
            snapshots.append((mutation_value, [individual.values.copy() for individual in population]))
            return original_generate(generator, candidate, mutation_value, population, rng)

        config = DEFixtures.get_fast_config(update_type=update_type, max_iterations=8)
        with patch.object(TrialGenerator, 'generate', autospec=True, side_effect=recording_generate):
            DifferentialEvolutionSolver(config).solve(sphere, DEFixtures.SPHERE_BOUNDS, seed=77)
        return snapshots, config.population_size(2)

    @staticmethod
    def _changed_within_generation(generation):
        first = generation[0][1]
        return any(
            any(not np.array_equal(a, b) for a, b in zip(first, snapshot))
            for _, snapshot in generation[1:]
        )

    def test_deferred_generation_sees_frozen_population(self):
        snapshots, population_size = self._record_snapshots(UpdateType.DEFERRED)
        self.assertEqual(len(snapshots) % population_size, 0)

        for start in range(0, len(snapshots), population_size):
            generation = snapshots[start:start + population_size]
            self.assertEqual(len({mutation for mutation, _ in generation}), 1)
            self.assertFalse(self._changed_within_generation(generation))

    def test_immediate_generation_sees_replacements(self):
        snapshots, population_size = self._record_snapshots(UpdateType.IMMEDIATE)
        generations = [snapshots[start:start + population_size]
                       for start in range(0, len(snapshots), population_size)]

        self.assertTrue(any(self._changed_within_generation(generation) for generation in generations))

    def test_policies_diverge(self):
        results = {}
        for update_type in UpdateType:
            config = DEFixtures.get_fast_config(update_type=update_type, max_iterations=10)
            results[update_type] = DifferentialEvolutionSolver(config).solve(
                sphere, DEFixtures.SPHERE_BOUNDS, seed=99)

        # Same initial population, different trajectories
        self.assertEqual(results[UpdateType.IMMEDIATE].energy_history[0],
                         results[UpdateType.DEFERRED].energy_history[0])
        self.assertNotEqual(results[UpdateType.IMMEDIATE].best_solution,
                            results[UpdateType.DEFERRED].best_solution)


class TestInterfaces(unittest.TestCase):
    """Test argument forwarding, the convenience function, reporting and the CLI."""

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)
        self.output_dir = tempfile.mkdtemp()

    def tearDown(self):
        setup_logging(level="ERROR", log_to_file=False)
        shutil.rmtree(self.output_dir, ignore_errors=True)

    def test_args_forwarded_unchanged(self):
        bag = {'shift': 2.0}

        def shifted(variables, args):
            return sum((x - args['shift']) ** 2 for x in variables)

        spy = FitnessSpy(shifted)
        result = DifferentialEvolutionSolver(DEFixtures.get_fast_config()).solve(
            spy, DEFixtures.SPHERE_BOUNDS, args=bag, seed=4)

        self.assertTrue(all(args is bag for args in spy.received_args))
        self.assertEqual(bag, {'shift': 2.0})
        self.assertLess(result.energy, 1.0)

    def test_fitness_sees_real_coordinates(self):
        spy = FitnessSpy()
        DifferentialEvolutionSolver(DEFixtures.get_fast_config(max_iterations=1)).solve(
            spy, [(100.0, 200.0)], seed=6)
        self.assertTrue(all(100.0 <= point[0] <= 200.0 for point in spy.calls))

    def test_convenience_function(self):
        result = differential_evolution(sphere, DEFixtures.SPHERE_BOUNDS, seed=12,
                                        strategy="rand1exp", max_iterations=30,
                                        pop_size_multiplier=5, display_progress=False)
        config = DEFixtures.get_fast_config(strategy="rand1exp", relative_tolerance=0.01)
        expected = DifferentialEvolutionSolver(config).solve(sphere, DEFixtures.SPHERE_BOUNDS, seed=12)

        self.assertIsInstance(result, OptimizationResult)
        self.assertEqual(result.best_solution, expected.best_solution)

    def test_config_changes_after_start_do_not_leak(self):
        config = DEFixtures.get_fast_config(max_iterations=5, relative_tolerance=0.0)
        solver = DifferentialEvolutionSolver(config)

        def mutating(variables, args):
            config.max_iterations = 1
            return DEFixtures.quadratic(variables)

        result = solver.solve(mutating, DEFixtures.SPHERE_BOUNDS, seed=1)
        self.assertEqual(result.iterations, 5)

    def test_reporter_records_every_generation(self):
        reporter = DEReporter(self.output_dir, experiment_name="integration")
        config = DEFixtures.get_fast_config(max_iterations=12)
        result = DifferentialEvolutionSolver(config, reporter=reporter).solve(
            sphere, DEFixtures.SPHERE_BOUNDS, seed=8)

        self.assertEqual(len(reporter.generation_data), result.iterations + 1)
        self.assertEqual(reporter.generation_data[0]['generation'], 0)
        self.assertEqual(reporter.generation_data[-1]['function_evaluations'],
                         result.function_evaluations)
        self.assertEqual(reporter.run_config['seed'], 8)
        self.assertTrue(os.path.exists(reporter.save_history_csv()))
        self.assertTrue(os.path.exists(reporter.save_run_summary(result)))

    def test_cli_main(self):
        exit_code = cli.main(["--function", "sphere", "--quiet", "--max_iterations", "20",
                              "--strategy", "best2exp", "--output_dir", self.output_dir,
                              "--log_level", "ERROR"])

        self.assertEqual(exit_code, 0)
        self.assertTrue(os.path.exists(os.path.join(self.output_dir, "de_sphere_history.csv")))
        self.assertTrue(os.path.exists(os.path.join(self.output_dir, "de_sphere_summary.json")))

    def test_cli_rejects_invalid_option(self):
        with self.assertRaises(SystemExit):
            cli.main(["--function", "sphere", "--strategy", "best9bin"])


if __name__ == '__main__':
    unittest.main()
