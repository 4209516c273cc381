"""
Centralized Logging System for Differential Evolution

Provides consistent formatting, log levels and optional file output
for solver runs, the command line and the reporter.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class DEFormatter(logging.Formatter):
    """Custom formatter with color support and structured output."""

    # Color codes for console output
    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'      # Reset
    }

    def __init__(self, use_colors: bool = True, include_timestamp: bool = True):
        self.use_colors = use_colors and hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()
        self.include_timestamp = include_timestamp

        if include_timestamp:
            fmt = '[%(asctime)s] %(levelname)-8s | %(name)s | %(message)s'
            datefmt = '%H:%M:%S'
        else:
            fmt = '%(levelname)-8s | %(name)s | %(message)s'
            datefmt = None

        super().__init__(fmt, datefmt)

    def format(self, record):
        if self.use_colors:
            color = self.COLORS.get(record.levelname, '')
            reset = self.COLORS['RESET']
            # Work on a copy so file handlers sharing the record stay uncolored
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{reset}"

        return super().format(record)


class DELogger:
    """
    Logger for differential evolution runs with console and file output.

    Wraps a standard library logger and adds solver-specific helpers.
    """

    def __init__(self, name: str = "DE", level: str = "INFO",
                 log_to_file: bool = False, output_dir: str = "logs",
                 console_colors: bool = True):
        """
        Initialize DE logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_to_file: Whether to log to file
            output_dir: Directory for log files
            console_colors: Whether to use colors in console output
        """
        self.name = name
        self.log_file = None
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.logger.propagate = False

        self.logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.logger.level)
        console_handler.setFormatter(DEFormatter(use_colors=console_colors, include_timestamp=False))
        self.logger.addHandler(console_handler)

        if log_to_file:
            self._setup_file_logging(output_dir)

    def _setup_file_logging(self, output_dir: str):
        """Attach a timestamped file handler that receives every level."""
        log_dir = Path(output_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"de_run_{timestamp}.log"

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(DEFormatter(use_colors=False, include_timestamp=True))
        self.logger.addHandler(file_handler)

        self.log_file = str(log_file)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self.logger.info(self._format_message(message, **kwargs))

    def critical(self, message: str, exception: Exception = None, **kwargs):
        """Log critical message with optional exception details."""
        formatted_msg = self._format_message(message, **kwargs)
        if exception:
            formatted_msg += f" | Exception: {type(exception).__name__}: {str(exception)}"
        self.logger.critical(formatted_msg)

    def _format_message(self, message: str, **kwargs) -> str:
        if kwargs:
            context = " | ".join(f"{k}={v}" for k, v in kwargs.items())
            return f"{message} | {context}"
        return message

    # Solver-specific logging methods
    def log_run_start(self, n_variables: int, population_size: int, strategy: str):
        self.info("Starting differential evolution",
                  variables=n_variables,
                  population_size=population_size,
                  strategy=strategy)

    def log_generation_complete(self, generation: int, best_energy: float,
                                mutation_value: float, verbose: bool = False):
        """Log one evolution step; INFO when progress display is on, DEBUG otherwise."""
        message = f"Evolution step {generation}: f(best x) = {best_energy}"
        if verbose:
            self.info(message, mutation=f"{mutation_value:.4f}")
        else:
            self.debug(message, mutation=f"{mutation_value:.4f}")

    def log_convergence(self, generation: int, std: float, threshold: float):
        self.info(f"Convergence detected at generation {generation}",
                  std=f"{std:.6g}", threshold=f"{threshold:.6g}")

    def log_run_complete(self, result):
        self.info("Differential evolution finished",
                  cause=result.cause_of_termination,
                  energy=result.energy,
                  evaluations=result.function_evaluations,
                  time=f"{result.optimization_time:.4f}s")

    def log_config_summary(self, config):
        self.info("DE Configuration loaded",
                  strategy=config.strategy.value,
                  init=config.init_type.value,
                  update=config.update_type.value,
                  mutation=config.mutation_range,
                  recombination=config.recombination_probability,
                  max_iterations=config.max_iterations)


# Global logger instance
_global_logger: Optional[DELogger] = None


def get_logger(name: str = "DE") -> DELogger:
    """Get or create global logger instance."""
    global _global_logger
    if _global_logger is None:
        _global_logger = DELogger(name)
    return _global_logger


def setup_logging(level: str = "INFO", log_to_file: bool = False,
                  output_dir: str = "logs", console_colors: bool = True) -> DELogger:
    """
    Setup global logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to file
        output_dir: Directory for log files
        console_colors: Whether to use colors in console output

    Returns:
        Configured DELogger instance
    """
    global _global_logger
    _global_logger = DELogger(
        level=level,
        log_to_file=log_to_file,
        output_dir=output_dir,
        console_colors=console_colors
    )
    return _global_logger
