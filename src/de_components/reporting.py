"""
Reporting and I/O Module

Holds the immutable optimization result and an optional run reporter
that records per-generation statistics and exports them.

Features:
- OptimizationResult record created once at run end
- Per-generation energy statistics
- CSV history export
- JSON run summary
"""

import csv
import json
import os
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from de_logging import get_logger


@dataclass(frozen=True)
class OptimizationResult:
    """Outcome of one differential evolution run."""

    best_solution: Tuple[float, ...]
    energy: float
    optimization_time: float
    function_evaluations: int
    convergence: float
    cause_of_termination: str
    iterations: int = 0
    energy_history: Tuple[float, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['best_solution'] = list(self.best_solution)
        result['energy_history'] = list(self.energy_history)
        return result

    def summary(self) -> str:
        """Human-readable result summary."""
        solution = ", ".join(f"{value:.6g}" for value in self.best_solution)
        return (f"Solution: [{solution}]\n"
                f"Function value: {self.energy}\n"
                f"Cause of termination: {self.cause_of_termination}\n"
                f"Generations: {self.iterations}\n"
                f"Convergence: {self.convergence:.6g}\n"
                f"Optimization time: {self.optimization_time:.4f} sec\n"
                f"Function evaluations count: {self.function_evaluations}")


class DEReporter:
    """
    Records generation statistics for a run and writes them to disk.

    The solver calls ``record_generation`` after initialization and after
    every generation; files are only written by the ``save_*`` methods.
    """

    HISTORY_FIELDS = ['generation', 'best_energy', 'mean_energy', 'std_energy',
                      'worst_energy', 'mutation_value', 'function_evaluations']

    def __init__(self, output_dir: str = "de_results", experiment_name: str = None):
        """
        Initialize DE reporter.

        Args:
            output_dir: Directory for output files
            experiment_name: Name of the experiment (auto-generated if None)
        """
        self.output_dir = output_dir
        self.experiment_name = experiment_name or f"de_run_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        self.logger = get_logger("Reporter")

        self.start_time: Optional[float] = None
        self.run_config: Dict[str, Any] = {}
        self.generation_data: List[Dict[str, Any]] = []

    def start_run(self, run_config: Dict[str, Any]):
        """Reset tracking for a new run."""
        self.start_time = time.time()
        self.run_config = dict(run_config)
        self.generation_data = []

    def record_generation(self, generation: int, statistics: Dict[str, float],
                          mutation_value: Optional[float], function_evaluations: int):
        """
        Record statistics for one generation (0 = initial population).

        Args:
            generation: Generation number
            statistics: Output of PopulationManager.get_population_statistics
            mutation_value: F used for this generation (None for generation 0)
            function_evaluations: Evaluations performed so far
        """
        row = {'generation': generation}
        row.update(statistics)
        row['mutation_value'] = mutation_value
        row['function_evaluations'] = function_evaluations
        self.generation_data.append(row)

    def save_history_csv(self) -> str:
        """Write the generation history; returns the file path."""
        os.makedirs(self.output_dir, exist_ok=True)
        csv_filename = os.path.join(self.output_dir, f"{self.experiment_name}_history.csv")

        with open(csv_filename, mode='w', newline='') as csv_file:
            writer = csv.DictWriter(csv_file, fieldnames=self.HISTORY_FIELDS)
            writer.writeheader()
            for row in self.generation_data:
                writer.writerow({key: row.get(key) for key in self.HISTORY_FIELDS})

        self.logger.debug("Generation history saved", file=csv_filename)
        return csv_filename

    def save_run_summary(self, result: OptimizationResult) -> str:
        """Write configuration, result and history as JSON; returns the file path."""
        os.makedirs(self.output_dir, exist_ok=True)
        summary_filename = os.path.join(self.output_dir, f"{self.experiment_name}_summary.json")

        summary_data = {
            'experiment_name': self.experiment_name,
            'end_time': datetime.now().isoformat(),
            'wall_time': time.time() - self.start_time if self.start_time else None,
            'configuration': self.run_config,
            'result': result.to_dict(),
            'generation_summary': self.generation_data
        }

        with open(summary_filename, 'w') as f:
            json.dump(summary_data, f, indent=2, default=str)

        self.logger.debug("Run summary saved", file=summary_filename)
        return summary_filename
