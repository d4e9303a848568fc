"""
biostatref.stats.schemes.sampling
=================================

Monte Carlo demonstration of the Central Limit Theorem.

For each of ``repetitions`` iterations a sample of ``sample_size`` values is
drawn from a population generator and reduced to its mean. The collected
means, their grand mean, their Bessel-corrected standard deviation (the
empirical standard error) and a 20-bin histogram are returned.

Population generators, all driven by a uniform [0, 1) source ``U``:

- Uniform: ``10 U``
- Exponential (rate 0.5): ``-2 ln(1 - U)``
- Bimodal: with probability 0.5 ``1.5 + U'``, else ``7.5 + U'`` (two narrow
  clusters around 2 and 8)
- Normal: Box-Muller, mean 5, SD 1

Work is done in chunks of ``chunk_size`` repetitions, each drawn as one
``(chunk, sample_size)`` array. `iter_mean_chunks` yields the chunk means
one at a time so a host with its own event loop can interleave other work;
`simulate` drains it in one go.

Examples
--------
>>> from biostatref.stats.schemes.sampling import CLTSimulationRequest, simulate
>>> result = simulate(CLTSimulationRequest("uniform", sample_size=1, repetitions=1000, seed=7))
>>> len(result.means), sum(b.count for b in result.histogram)
(1000, 1000)
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional, Sequence, Tuple

import numpy as np

from biostatref.core.errors import InvalidInputError
from biostatref.core.names import PopulationShape

logger = logging.getLogger(__name__)

HISTOGRAM_BINS = 20

Generator = Callable[[np.random.Generator, Tuple[int, int]], np.ndarray]


# --- Population generators ---


def _uniform(rng: np.random.Generator, size: Tuple[int, int]) -> np.ndarray:
    return 10.0 * rng.random(size)


def _exponential(rng: np.random.Generator, size: Tuple[int, int]) -> np.ndarray:
    return -2.0 * np.log1p(-rng.random(size))


def _bimodal(rng: np.random.Generator, size: Tuple[int, int]) -> np.ndarray:
    low_cluster = rng.random(size) < 0.5
    jitter = rng.random(size)
    return np.where(low_cluster, 1.5 + jitter, 7.5 + jitter)


def _normal(rng: np.random.Generator, size: Tuple[int, int]) -> np.ndarray:
    u1 = rng.random(size)
    u2 = rng.random(size)
    # 1 - u1 lies in (0, 1], so the log is finite
    return 5.0 + np.sqrt(-2.0 * np.log1p(-u1)) * np.cos(2.0 * np.pi * u2)


_GENERATORS: Dict[PopulationShape, Generator] = {
    PopulationShape.UNIFORM: _uniform,
    PopulationShape.EXPONENTIAL: _exponential,
    PopulationShape.BIMODAL: _bimodal,
    PopulationShape.NORMAL: _normal,
}

# (mean, SD) of each population
_POPULATION_MOMENTS: Dict[PopulationShape, Tuple[float, float]] = {
    PopulationShape.UNIFORM: (5.0, 10.0 / math.sqrt(12.0)),
    PopulationShape.EXPONENTIAL: (2.0, 2.0),
    PopulationShape.BIMODAL: (5.0, math.sqrt(1.0 / 12.0 + 9.0)),
    PopulationShape.NORMAL: (5.0, 1.0),
}

for _table in (_GENERATORS, _POPULATION_MOMENTS):
    if set(_table) != set(PopulationShape):
        raise TypeError("Population tables must cover every PopulationShape")


def population_moments(shape: PopulationShape) -> Tuple[float, float]:
    """Return the ``(mean, SD)`` of a population shape."""
    return _POPULATION_MOMENTS[PopulationShape(shape)]


# --- Request / result ---


def _positive_int(value: int, name: str) -> int:
    if isinstance(value, bool) or not float(value).is_integer() or value < 1:
        raise InvalidInputError(f"{name} must be an integer >= 1, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class CLTSimulationRequest:
    """
    Parameters of one sampling-distribution simulation.

    Attributes:
        shape: Population generator
        sample_size: Values per sample (n >= 1)
        repetitions: Number of samples drawn (>= 1)
        seed: Seed for reproducible runs; None draws fresh OS entropy
        chunk_size: Repetitions drawn per vectorised chunk
    """

    shape: PopulationShape
    sample_size: int
    repetitions: int
    seed: Optional[int] = None
    chunk_size: int = 500

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "shape", PopulationShape(self.shape))
        except ValueError as exc:
            raise InvalidInputError(f"Unknown population shape: {self.shape!r}") from exc
        object.__setattr__(self, "sample_size", _positive_int(self.sample_size, "sample_size"))
        object.__setattr__(self, "repetitions", _positive_int(self.repetitions, "repetitions"))
        object.__setattr__(self, "chunk_size", _positive_int(self.chunk_size, "chunk_size"))
        if self.seed is not None and (isinstance(self.seed, bool) or self.seed < 0):
            raise InvalidInputError(f"seed must be a non-negative integer, got {self.seed!r}")


@dataclass(frozen=True)
class HistogramBin:
    """One equal-width histogram bin; the last bin is closed on the right."""

    label: str
    lower: float
    upper: float
    count: int


@dataclass(frozen=True)
class CLTSimulationResult:
    """
    Outcome of a simulation.

    Attributes:
        request: The simulation parameters
        means: Sample means in draw order (length == repetitions)
        grand_mean: Mean of ``means``
        standard_error_estimate: SD of ``means`` with divisor ``reps - 1``
            (0.0 for a single repetition)
        histogram: 20 bins over ``[min(means), max(means)]``
        population_mean: Theoretical population mean
        population_sd: Theoretical population SD
    """

    request: CLTSimulationRequest
    means: Tuple[float, ...]
    grand_mean: float
    standard_error_estimate: float
    histogram: Tuple[HistogramBin, ...]
    population_mean: float
    population_sd: float

    @property
    def expected_standard_error(self) -> float:
        """Theoretical standard error, population SD / sqrt(n)."""
        return self.population_sd / math.sqrt(self.request.sample_size)


def build_histogram(values: Sequence[float], bins: int = HISTOGRAM_BINS) -> Tuple[HistogramBin, ...]:
    """
    Count ``values`` into ``bins`` equal-width bins spanning their range.

    Each value goes to ``floor((v - min) / width)``, clamped to the last bin
    so the maximum lands inside. A zero-width range puts everything in the
    first bin.
    """
    data = np.asarray(values, dtype=float)
    if data.size == 0:
        raise InvalidInputError("Cannot build a histogram of no values")
    low, high = float(data.min()), float(data.max())
    width = (high - low) / bins

    if width > 0:
        index = np.minimum(np.floor((data - low) / width).astype(int), bins - 1)
    else:
        index = np.zeros(data.size, dtype=int)
    counts = np.bincount(index, minlength=bins)

    result = []
    for i in range(bins):
        lower = low + i * width
        upper = low + (i + 1) * width
        closing = "]" if i == bins - 1 else ")"
        result.append(
            HistogramBin(f"[{lower:.2f}, {upper:.2f}{closing}", lower, upper, int(counts[i]))
        )
    return tuple(result)


# --- Simulation ---


def iter_mean_chunks(request: CLTSimulationRequest) -> Iterator[np.ndarray]:
    """
    Yield sample means chunk by chunk.

    Each chunk holds at most ``request.chunk_size`` means; together they
    hold exactly ``request.repetitions``.
    """
    rng = np.random.default_rng(request.seed)
    draw = _GENERATORS[request.shape]
    remaining = request.repetitions
    while remaining > 0:
        size = min(request.chunk_size, remaining)
        yield draw(rng, (size, request.sample_size)).mean(axis=1)
        remaining -= size
        logger.debug(
            "%s simulation: %d/%d repetitions done",
            request.shape.value,
            request.repetitions - remaining,
            request.repetitions,
        )


def simulate(request: CLTSimulationRequest) -> CLTSimulationResult:
    """
    Run the sampling-distribution simulation.

    Args:
        request: Population shape, sample size, repetitions and optional seed

    Returns:
        `CLTSimulationResult`; histogram counts sum to ``repetitions``
    """
    means = np.concatenate(list(iter_mean_chunks(request)))
    grand_mean = float(means.mean())
    spread = float(means.std(ddof=1)) if means.size > 1 else 0.0
    pop_mean, pop_sd = population_moments(request.shape)

    return CLTSimulationResult(
        request=request,
        means=tuple(float(v) for v in means),
        grand_mean=grand_mean,
        standard_error_estimate=spread,
        histogram=build_histogram(means),
        population_mean=pop_mean,
        population_sd=pop_sd,
    )
