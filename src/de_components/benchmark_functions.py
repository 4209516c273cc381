"""
Benchmark Objective Functions

Classic test problems with known minima, used by the command line and
the test suite. Each function has the engine's fitness signature
``f(variables, args)``.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Sequence, Tuple


def sphere(variables: Sequence[float], args: Any = None) -> float:
    """Sum of squares, minimum 0 at the origin."""
    return float(sum(x * x for x in variables))


def rosenbrock(variables: Sequence[float], args: Any = None) -> float:
    """Rosenbrock valley, minimum 0 at (1, ..., 1)."""
    result = 0.0
    for i in range(len(variables) - 1):
        result += (1 - variables[i]) ** 2 + 100 * (variables[i + 1] - variables[i] ** 2) ** 2
    return result


def mccormick(variables: Sequence[float], args: Any = None) -> float:
    """McCormick function, minimum -1.9133 at (-0.54719, -1.54719)."""
    x, y = variables[0], variables[1]
    return math.sin(x + y) + (x - y) ** 2 - 1.5 * x + 2.5 * y + 1


def ackley(variables: Sequence[float], args: Any = None) -> float:
    """Two-dimensional Ackley function, minimum 0 at the origin."""
    x, y = variables[0], variables[1]
    return (-20 * math.exp(-0.2 * math.sqrt(0.5 * (x ** 2 + y ** 2)))
            - math.exp(0.5 * (math.cos(2 * math.pi * x) + math.cos(2 * math.pi * y)))
            + math.e + 20)


@dataclass(frozen=True)
class Benchmark:
    """A test problem with its default bounds and known optimum."""

    name: str
    function: Callable[[Sequence[float], Any], float]
    bounds: Tuple[Tuple[float, float], ...]
    optimum: Tuple[float, ...]
    optimum_energy: float
    seed: int = None
    config_overrides: Dict[str, Any] = field(default_factory=dict)


BENCHMARKS: Dict[str, Benchmark] = {
    'sphere': Benchmark(
        name='sphere',
        function=sphere,
        bounds=((-5.0, 5.0), (-5.0, 5.0)),
        optimum=(0.0, 0.0),
        optimum_energy=0.0,
        seed=42
    ),
    'rosenbrock': Benchmark(
        name='rosenbrock',
        function=rosenbrock,
        bounds=((0.0, 2.0), (-5.0, 5.0), (-100.0, 50.0), (1.0, 34.0)),
        optimum=(1.0, 1.0, 1.0, 1.0),
        optimum_energy=0.0
    ),
    'mccormick': Benchmark(
        name='mccormick',
        function=mccormick,
        bounds=((-1.0, 4.0), (-3.0, 4.0)),
        optimum=(-0.54719, -1.54719),
        optimum_energy=-1.9133,
        seed=60,
        config_overrides={'init_type': 'random', 'strategy': 'best1exp'}
    ),
    'ackley': Benchmark(
        name='ackley',
        function=ackley,
        bounds=((-3.0, 2.0), (0.0, 5.0)),
        optimum=(0.0, 0.0),
        optimum_energy=0.0,
        seed=40,
        config_overrides={
            'update_type': 'deferred',
            'mutation_range': (0.7, 1.2),
            'recombination_probability': 0.8,
            'pop_size_multiplier': 20
        }
    ),
}


def get_benchmark(name: str) -> Benchmark:
    """Look up a benchmark by name (case-insensitive)."""
    try:
        return BENCHMARKS[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown benchmark '{name}'. Available: {sorted(BENCHMARKS)}")
