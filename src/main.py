"""
Differential Evolution Benchmark Runner

Command-line interface that minimizes one of the bundled benchmark
problems (Rosenbrock, McCormick, Ackley, sphere) and reports the result
next to the known optimum.

Usage:
    python main.py --function rosenbrock
    python main.py --function ackley --strategy rand1exp --seed 7 --output_dir de_results
"""

import argparse
from typing import List, Optional

from differential_evolution import DifferentialEvolutionSolver
from de_config import DEConfig
from de_constants import UpdateType
from de_logging import setup_logging
from de_components.benchmark_functions import BENCHMARKS, get_benchmark
from de_components.mutation_strategies import SearchStrategy
from de_components.population_management import InitializationType
from de_components.reporting import DEReporter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Minimize a benchmark function with differential evolution.')

    parser.add_argument('--function', '-f', type=str, choices=sorted(BENCHMARKS), default='rosenbrock',
                        help="Benchmark problem to minimize (default: rosenbrock)")
    parser.add_argument('--seed', '-s', type=int, default=None,
                        help="Random seed (default: the benchmark's own seed, or entropy)")

    # Solver tunables; None keeps the benchmark or library default
    parser.add_argument('--strategy', type=str, dest='strategy', default=None,
                        choices=[s.value for s in SearchStrategy],
                        help="Search strategy (default: best1bin)")
    parser.add_argument('--init', type=str, dest='init_type', default=None,
                        choices=[i.value for i in InitializationType],
                        help="Population initialization (default: latinhypercube)")
    parser.add_argument('--update', type=str, dest='update_type', default=None,
                        choices=[u.value for u in UpdateType],
                        help="Replacement policy (default: immediate)")
    parser.add_argument('--mutation', type=float, nargs=2, dest='mutation_range', default=None,
                        metavar=('MIN', 'MAX'), help="Mutation range [min, max) (default: 0.5 1.0)")
    parser.add_argument('--recombination', '-cr', type=float, dest='recombination_probability', default=None,
                        help="Recombination probability in [0, 1) (default: 0.7)")
    parser.add_argument('--pop_size_multiplier', '-pm', type=int, default=None,
                        help="Population size multiplier (default: 15)")
    parser.add_argument('--max_iterations', '-g', type=int, default=None,
                        help="Maximum number of generations (default: 1000)")
    parser.add_argument('--absolute_tolerance', '-atol', type=float, default=None,
                        help="Absolute convergence tolerance (default: 0)")
    parser.add_argument('--relative_tolerance', '-rtol', type=float, default=None,
                        help="Relative convergence tolerance (default: 0.01)")
    parser.add_argument('--quiet', '-q', action='store_true',
                        help="Hide the generation progress bar")

    # Output
    parser.add_argument('--output_dir', '-o', type=str, default=None,
                        help="Folder for history CSV, run summary JSON and log file")
    parser.add_argument('--log_level', type=str, default="INFO",
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, run the solver on the chosen benchmark and log the result.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    benchmark = get_benchmark(args.function)

    logger = setup_logging(
        level=args.log_level,
        log_to_file=args.output_dir is not None,
        output_dir=args.output_dir or "logs",
        console_colors=True
    )

    # Benchmark recommendations first, explicit CLI options win
    config = DEConfig(**benchmark.config_overrides)
    overrides = {name: getattr(args, name) for name in DEConfig.field_names()
                 if getattr(args, name, None) is not None}
    if args.quiet:
        overrides['display_progress'] = False
    config = config.update(**overrides)
    logger.log_config_summary(config)

    reporter = DEReporter(args.output_dir, experiment_name=f"de_{benchmark.name}") if args.output_dir else None
    solver = DifferentialEvolutionSolver(config, reporter=reporter)
    seed = args.seed if args.seed is not None else benchmark.seed

    try:
        result = solver.solve(benchmark.function, benchmark.bounds, seed=seed)
    except Exception as e:
        logger.critical("Differential evolution failed", exception=e)
        raise

    for line in result.summary().splitlines():
        logger.info(line)
    logger.info(f"True solution: {list(benchmark.optimum)}")
    logger.info(f"True function value: {benchmark.optimum_energy}")

    if reporter:
        reporter.save_history_csv()
        summary_file = reporter.save_run_summary(result)
        logger.info(f"Results saved to {summary_file}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
