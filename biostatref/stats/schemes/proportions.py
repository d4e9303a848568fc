"""
biostatref.stats.schemes.proportions
====================================

Confidence intervals for a single binomial proportion.

All four methods are always computed together so that their disagreement
can be shown side by side:

- **Wald**: ``p_hat +/- z sqrt(p_hat (1 - p_hat) / n)``. Undercovers near
  0 and 1; never offered on its own.
- **Wilson (score)**: center ``(p_hat + z^2/2n) / (1 + z^2/n)``, half-width
  ``z / (1 + z^2/n) * sqrt(p_hat (1 - p_hat)/n + z^2/4n^2)``.
- **Agresti-Coull**: ``n~ = n + z^2``, ``p~ = (x + z^2/2) / n~``,
  ``p~ +/- z sqrt(p~ (1 - p~) / n~)``.
- **Clopper-Pearson (exact)**: Beta quantiles,
  ``[B^-1(alpha/2; x, n-x+1), B^-1(1-alpha/2; x+1, n-x)]`` with the
  conventional 0 / 1 endpoints at ``x = 0`` / ``x = n``.

Every interval is clipped to [0, 1] and contains the point estimate.

Examples
--------
>>> from biostatref.stats.schemes.proportions import ProportionCIRequest, compute_all
>>> from biostatref.core.names import CIMethod
>>> result = compute_all(ProportionCIRequest(x=23, n=100, level=0.95))
>>> wilson = result[CIMethod.WILSON]
>>> 0 < wilson.lower < 0.23 < wilson.upper
True
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from biostatref.core.errors import InvalidInputError, MissingDependencyError
from biostatref.core.names import CIMethod
from biostatref.stats.common.quantiles import (
    BetaQuantile,
    NormalQuantile,
    beta_quantile,
    standard_normal_quantile,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProportionCIRequest:
    """
    Inputs of the single-proportion interval calculator.

    Attributes:
        x: Number of successes (0 <= x <= n)
        n: Number of trials (>= 1)
        level: Confidence level in (0, 1), e.g. 0.95
    """

    x: int
    n: int
    level: float = 0.95

    def __post_init__(self) -> None:
        for name in ("x", "n"):
            value = getattr(self, name)
            if isinstance(value, bool) or not float(value).is_integer():
                raise InvalidInputError(f"{name} must be an integer, got {value!r}")
            object.__setattr__(self, name, int(value))
        if self.n < 1:
            raise InvalidInputError(f"n must be >= 1, got {self.n}")
        if not 0 <= self.x <= self.n:
            raise InvalidInputError(f"x must satisfy 0 <= x <= n, got x={self.x}, n={self.n}")
        if not 0 < self.level < 1:
            raise InvalidInputError(f"level must be in (0, 1), got {self.level}")

    @property
    def point_estimate(self) -> float:
        return self.x / self.n

    @property
    def alpha(self) -> float:
        return 1 - self.level


@dataclass(frozen=True)
class Interval:
    """A closed interval ``[lower, upper]``."""

    lower: float
    upper: float

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper


@dataclass(frozen=True)
class ProportionCIResult:
    """
    Intervals from every method for one request.

    Indexable by `CIMethod`; iteration yields ``(method, interval)`` pairs in
    the declaration order of `CIMethod`.
    """

    request: ProportionCIRequest
    z: float
    intervals: Dict[CIMethod, Interval]

    @property
    def point_estimate(self) -> float:
        return self.request.point_estimate

    def __getitem__(self, method: CIMethod) -> Interval:
        return self.intervals[CIMethod(method)]

    def __iter__(self) -> Iterator[Tuple[CIMethod, Interval]]:
        for method in CIMethod:
            yield method, self.intervals[method]


def _bounded(lower: float, upper: float, p_hat: float) -> Interval:
    """Clip to [0, 1] and make sure the interval covers p_hat."""
    lower = min(max(0.0, lower), p_hat)
    upper = max(min(1.0, upper), p_hat)
    return Interval(lower, upper)


def wald_interval(x: int, n: int, z: float) -> Interval:
    p_hat = x / n
    se = math.sqrt(p_hat * (1 - p_hat) / n)
    return _bounded(p_hat - z * se, p_hat + z * se, p_hat)


def wilson_interval(x: int, n: int, z: float) -> Interval:
    p_hat = x / n
    z2 = z * z
    denom = 1 + z2 / n
    center = (p_hat + z2 / (2 * n)) / denom
    half = (z / denom) * math.sqrt(p_hat * (1 - p_hat) / n + z2 / (4 * n * n))
    return _bounded(center - half, center + half, p_hat)


def agresti_coull_interval(x: int, n: int, z: float) -> Interval:
    n_tilde = n + z * z
    p_tilde = (x + z * z / 2) / n_tilde
    se = math.sqrt(p_tilde * (1 - p_tilde) / n_tilde)
    return _bounded(p_tilde - z * se, p_tilde + z * se, x / n)


def clopper_pearson_interval(x: int, n: int, alpha: float, beta_ppf: BetaQuantile) -> Interval:
    lower = 0.0 if x == 0 else beta_ppf(alpha / 2, x, n - x + 1)
    upper = 1.0 if x == n else beta_ppf(1 - alpha / 2, x + 1, n - x)
    return _bounded(float(lower), float(upper), x / n)


def compute_all(
    request: ProportionCIRequest,
    *,
    normal_ppf: NormalQuantile = standard_normal_quantile,
    beta_ppf: Optional[BetaQuantile] = beta_quantile,
) -> ProportionCIResult:
    """
    Compute Wald, Wilson, Agresti-Coull and Clopper-Pearson intervals.

    Args:
        request: Validated counts and confidence level
        normal_ppf: Standard normal quantile function
        beta_ppf: Beta quantile function ``(p, a, b) -> x``; required for
            Clopper-Pearson

    Returns:
        `ProportionCIResult` with one interval per `CIMethod`

    Raises:
        MissingDependencyError: ``beta_ppf`` is None. The exact interval is
            never replaced by an approximation.
    """
    if beta_ppf is None:
        logger.debug("Clopper-Pearson requested without a Beta quantile backend")
        raise MissingDependencyError(
            "Clopper-Pearson intervals need an inverse incomplete Beta function"
        )

    x, n, alpha = request.x, request.n, request.alpha
    z = float(normal_ppf(1 - alpha / 2))
    if not math.isfinite(z):
        raise InvalidInputError(f"normal quantile at {1 - alpha / 2} is not finite")

    intervals = {
        CIMethod.WALD: wald_interval(x, n, z),
        CIMethod.WILSON: wilson_interval(x, n, z),
        CIMethod.AGRESTI_COULL: agresti_coull_interval(x, n, z),
        CIMethod.CLOPPER_PEARSON: clopper_pearson_interval(x, n, alpha, beta_ppf),
    }
    return ProportionCIResult(request=request, z=z, intervals=intervals)
