"""
biostatref.stats.schemes.distributions
======================================

Density evaluation and plot series for the distribution explorer.

Given a `DistributionSpec` (a family tag plus up to two parameters) this
module evaluates the PDF/PMF at a point and builds the discretized
``(x, density)`` series the explorer draws, over a domain chosen per family
so that the bulk of the mass is visible without zooming:

=============  ==========================================  ===========
Family         Plotted domain                              Points
=============  ==========================================  ===========
Normal         [mu - 4 sigma, mu + 4 sigma]                40
Student t      [-4, 4]                                     40
Chi-squared    [0, k + 4 sqrt(2k)]                         40
F              [0, max(5, 4 d1 / d2)]                      40
Poisson        0 .. max(10, lambda + 4 sqrt(lambda))       at most 30
Binomial       0 .. n                                      at most 30
=============  ==========================================  ===========

Point counts come from `SeriesBudget`. When a discrete support is longer
than the budget the upper tail is omitted and the series says so through
``truncated`` / ``omitted_points``.

Examples
--------
>>> from biostatref.stats.schemes.distributions import DistributionSpec, density, series
>>> round(density(DistributionSpec.normal(0, 1), 0.0), 6)
0.398942
>>> s = series(DistributionSpec.binomial(50, 0.3))
>>> len(s), s.truncated, s.omitted_points
(30, True, 21)
"""

from __future__ import annotations
import logging
import math
import numbers
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Tuple

import numpy as np
from scipy.special import xlog1py, xlogy

from biostatref.core.errors import InvalidInputError
from biostatref.core.names import DistributionFamily
from biostatref.stats.common.special import (
    log_beta,
    log_binomial_coefficient,
    log_factorial,
    log_gamma,
)

logger = logging.getLogger(__name__)

Params = Tuple[float, float]


# --- Parameter validation ---


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise InvalidInputError(message)


def _validate_normal(params: Params) -> None:
    _require(params[1] > 0, f"Normal sigma must be > 0, got {params[1]}")


def _validate_student_t(params: Params) -> None:
    _require(params[0] >= 1, f"Student t degrees of freedom must be >= 1, got {params[0]}")


def _validate_chi_squared(params: Params) -> None:
    _require(params[0] >= 1, f"Chi-squared degrees of freedom must be >= 1, got {params[0]}")


def _validate_f(params: Params) -> None:
    _require(
        params[0] >= 1 and params[1] >= 1,
        f"F degrees of freedom must both be >= 1, got {params[0]}, {params[1]}",
    )


def _validate_poisson(params: Params) -> None:
    _require(params[0] > 0, f"Poisson lambda must be > 0, got {params[0]}")


def _validate_binomial(params: Params) -> None:
    n, p = params
    _require(n >= 1 and float(n).is_integer(), f"Binomial n must be an integer >= 1, got {n}")
    _require(0 <= p <= 1, f"Binomial p must be in [0, 1], got {p}")


_VALIDATORS: Dict[DistributionFamily, Callable[[Params], None]] = {
    DistributionFamily.NORMAL: _validate_normal,
    DistributionFamily.STUDENT_T: _validate_student_t,
    DistributionFamily.CHI_SQUARED: _validate_chi_squared,
    DistributionFamily.F: _validate_f,
    DistributionFamily.POISSON: _validate_poisson,
    DistributionFamily.BINOMIAL: _validate_binomial,
}


@dataclass(frozen=True)
class DistributionSpec:
    """
    A distribution family with its (ordered) parameters.

    One-parameter families (Student t, chi-squared, Poisson) carry ``0.0``
    in the second slot. Prefer the per-family constructors.

    Attributes:
        family: Distribution family tag
        params: (first, second) parameter, e.g. (mu, sigma) or (n, p)
    """

    family: DistributionFamily
    params: Params

    def __post_init__(self) -> None:
        try:
            family = DistributionFamily(self.family)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown distribution family: {self.family!r}") from exc
        try:
            params = tuple(float(v) for v in self.params)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"Parameters must be numbers, got {self.params!r}") from exc
        if len(params) != 2:
            raise InvalidInputError(f"Expected two parameters, got {len(params)}")
        if not all(math.isfinite(v) for v in params):
            raise InvalidInputError(f"Parameters must be finite, got {params}")
        _VALIDATORS[family](params)  # type: ignore[arg-type]
        object.__setattr__(self, "family", family)
        object.__setattr__(self, "params", params)

    @classmethod
    def normal(cls, mu: float = 0.0, sigma: float = 1.0) -> "DistributionSpec":
        return cls(DistributionFamily.NORMAL, (mu, sigma))

    @classmethod
    def student_t(cls, df: float) -> "DistributionSpec":
        return cls(DistributionFamily.STUDENT_T, (df, 0.0))

    @classmethod
    def chi_squared(cls, df: float) -> "DistributionSpec":
        return cls(DistributionFamily.CHI_SQUARED, (df, 0.0))

    @classmethod
    def f(cls, d1: float, d2: float) -> "DistributionSpec":
        return cls(DistributionFamily.F, (d1, d2))

    @classmethod
    def poisson(cls, lam: float) -> "DistributionSpec":
        return cls(DistributionFamily.POISSON, (lam, 0.0))

    @classmethod
    def binomial(cls, n: int, p: float) -> "DistributionSpec":
        return cls(DistributionFamily.BINOMIAL, (n, p))


@dataclass(frozen=True)
class DensityPoint:
    """One ``(x, density)`` pair of a plotted series."""

    x: float
    density: float


# --- Densities ---


def _safe_exp(log_value: float) -> float:
    """exp() returning nan/inf instead of raising on NaN or overflow."""
    if math.isnan(log_value):
        return math.nan
    try:
        return math.exp(log_value)
    except OverflowError:
        return math.inf


def _normal_pdf(params: Params, x: float) -> float:
    mu, sigma = params
    z = (x - mu) / sigma
    return math.exp(-0.5 * z * z) / (sigma * math.sqrt(2 * math.pi))


def _student_t_pdf(params: Params, x: float) -> float:
    nu = params[0]
    log_norm = log_gamma((nu + 1) / 2) - log_gamma(nu / 2) - 0.5 * math.log(nu * math.pi)
    return _safe_exp(log_norm - (nu + 1) / 2 * math.log1p(x * x / nu))


def _chi_squared_pdf(params: Params, x: float) -> float:
    if x <= 0:
        return 0.0
    half_k = params[0] / 2
    return _safe_exp(
        (half_k - 1) * math.log(x) - x / 2 - half_k * math.log(2) - log_gamma(half_k)
    )


def _f_log_kernel(params: Params, x: float) -> float:
    d1, d2 = params
    power = d1 / 2 - 1
    if x == 0:
        # x^power at the origin: 1, 0 or a pole
        log_power = 0.0 if power == 0 else math.copysign(math.inf, -power)
    else:
        log_power = power * math.log(x)
    return log_power - (d1 + d2) / 2 * math.log1p(d1 * x / d2)


def _f_kernel(params: Params, x: float) -> float:
    if x < 0:
        return 0.0
    return _safe_exp(_f_log_kernel(params, x))


def _f_pdf(params: Params, x: float) -> float:
    if x < 0:
        return 0.0
    d1, d2 = params
    log_norm = d1 / 2 * math.log(d1 / d2) - log_beta(d1 / 2, d2 / 2)
    return _safe_exp(log_norm + _f_log_kernel(params, x))


def _support_index(x: float, upper: float = math.inf) -> int:
    """Return x as an integer support point, or -1 when it is not one."""
    if x < 0 or x > upper or not float(x).is_integer():
        return -1
    return int(x)


def _poisson_pmf(params: Params, x: float) -> float:
    k = _support_index(x)
    if k < 0:
        return 0.0
    lam = params[0]
    return _safe_exp(-lam + float(xlogy(k, lam)) - log_factorial(k))


def _binomial_pmf(params: Params, x: float) -> float:
    n, p = int(params[0]), params[1]
    k = _support_index(x, n)
    if k < 0 or (p == 0 and k > 0) or (p == 1 and k < n):
        return 0.0
    # xlogy/xlog1py take 0 * ln(0) as 0, so p in {0, 1} stays exact
    return _safe_exp(
        log_binomial_coefficient(n, k) + float(xlogy(k, p)) + float(xlog1py(n - k, -p))
    )


_DENSITIES: Dict[DistributionFamily, Callable[[Params, float], float]] = {
    DistributionFamily.NORMAL: _normal_pdf,
    DistributionFamily.STUDENT_T: _student_t_pdf,
    DistributionFamily.CHI_SQUARED: _chi_squared_pdf,
    DistributionFamily.F: _f_pdf,
    DistributionFamily.POISSON: _poisson_pmf,
    DistributionFamily.BINOMIAL: _binomial_pmf,
}


def _check_exhaustive(table: Dict[DistributionFamily, object], name: str) -> None:
    missing = set(DistributionFamily) - set(table)
    if missing:
        raise TypeError(f"{name} has no entry for {sorted(f.value for f in missing)}")


def density(spec: DistributionSpec, x: float, *, normalize_f: bool = True) -> float:
    """
    Evaluate the PDF/PMF of ``spec`` at ``x``.

    Any non-finite intermediate (``0`` to a negative power, ``ln 0``) yields
    ``0.0``: a zero density is always a safe display value.

    Args:
        spec: Distribution and parameters
        x: Evaluation point
        normalize_f: For the F family, include the ``(d1/d2)^(d1/2) / B(d1/2, d2/2)``
            constant. ``False`` returns the bare kernel
            ``x^(d1/2-1) / (1 + d1 x / d2)^((d1+d2)/2)``.

    Returns:
        Density (mass for discrete families), always finite and >= 0
    """
    x = float(x)
    if not math.isfinite(x):
        return 0.0
    if spec.family is DistributionFamily.F and not normalize_f:
        value = _f_kernel(spec.params, x)
    else:
        value = _DENSITIES[spec.family](spec.params, x)
    if not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


# --- Series ---


@dataclass(frozen=True)
class SeriesBudget:
    """
    Rendering budget for plotted series.

    Attributes:
        continuous_points: Grid points for continuous families
        discrete_points: Maximum support points for discrete families
        normalize_f: Draw the normalized F density instead of the bare kernel
    """

    continuous_points: int = 40
    discrete_points: int = 30
    normalize_f: bool = True

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate budget values."""
        for name in ("continuous_points", "discrete_points"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidInputError(f"{name} must be an integer, got {value!r}")
        if self.continuous_points < 2:
            raise InvalidInputError(
                f"continuous_points must be >= 2, got {self.continuous_points}"
            )
        if self.discrete_points < 1:
            raise InvalidInputError(f"discrete_points must be >= 1, got {self.discrete_points}")


def plot_domain(spec: DistributionSpec) -> Tuple[float, float]:
    """Return the ``(low, high)`` range drawn for ``spec`` before any budget cap."""
    a, b = spec.params
    family = spec.family
    if family is DistributionFamily.NORMAL:
        return a - 4 * b, a + 4 * b
    if family is DistributionFamily.STUDENT_T:
        return -4.0, 4.0
    if family is DistributionFamily.CHI_SQUARED:
        return 0.0, a + 4 * math.sqrt(2 * a)
    if family is DistributionFamily.F:
        return 0.0, max(5.0, 4 * a / b)
    if family is DistributionFamily.POISSON:
        return 0.0, float(math.floor(max(10.0, a + 4 * math.sqrt(a))))
    if family is DistributionFamily.BINOMIAL:
        return 0.0, a
    raise TypeError(f"No plot domain rule for {family}")


@dataclass(frozen=True)
class DensitySeries:
    """
    Finite, ordered ``DensityPoint`` sequence for one spec.

    Iterating recomputes every density from ``spec``; nothing is cached, so
    a series can be walked any number of times and never outlives a
    parameter change.
    """

    spec: DistributionSpec
    budget: SeriesBudget = field(default_factory=SeriesBudget)

    @property
    def domain(self) -> Tuple[float, float]:
        return plot_domain(self.spec)

    @property
    def full_length(self) -> int:
        """Number of points the domain would have without a budget cap."""
        if self.spec.family.is_discrete:
            return int(self.domain[1]) + 1
        return self.budget.continuous_points

    @property
    def truncated(self) -> bool:
        return self.omitted_points > 0

    @property
    def omitted_points(self) -> int:
        return self.full_length - len(self)

    def xs(self) -> List[float]:
        """The x grid, in plotting order."""
        low, high = self.domain
        if self.spec.family.is_discrete:
            return [float(k) for k in range(len(self))]
        return [float(v) for v in np.linspace(low, high, self.budget.continuous_points)]

    def __len__(self) -> int:
        if self.spec.family.is_discrete:
            return min(self.full_length, self.budget.discrete_points)
        return self.budget.continuous_points

    def __iter__(self) -> Iterator[DensityPoint]:
        for x in self.xs():
            yield DensityPoint(x, density(self.spec, x, normalize_f=self.budget.normalize_f))


def series(spec: DistributionSpec, budget: SeriesBudget = SeriesBudget()) -> DensitySeries:
    """
    Build the plotted density series for ``spec``.

    Args:
        spec: Distribution and parameters
        budget: Point counts and F normalization choice

    Returns:
        A restartable `DensitySeries`
    """
    result = DensitySeries(spec, budget)
    if result.truncated:
        logger.debug(
            "%s series capped at %d points; %d upper support points omitted",
            spec.family.value,
            len(result),
            result.omitted_points,
        )
    return result


# --- Reference moments ---


def moments(spec: DistributionSpec) -> Tuple[float, float]:
    """
    Return ``(mean, variance)`` of ``spec``.

    Undefined moments are ``nan``; divergent variances are ``inf``.
    """
    a, b = spec.params
    family = spec.family
    if family is DistributionFamily.NORMAL:
        return a, b * b
    if family is DistributionFamily.STUDENT_T:
        mean = 0.0 if a > 1 else math.nan
        if a > 2:
            return mean, a / (a - 2)
        return mean, math.inf if a > 1 else math.nan
    if family is DistributionFamily.CHI_SQUARED:
        return a, 2 * a
    if family is DistributionFamily.F:
        mean = b / (b - 2) if b > 2 else math.nan
        if b > 4:
            return mean, 2 * b * b * (a + b - 2) / (a * (b - 2) ** 2 * (b - 4))
        return mean, math.inf if b > 2 else math.nan
    if family is DistributionFamily.POISSON:
        return a, a
    if family is DistributionFamily.BINOMIAL:
        return a * b, a * b * (1 - b)
    raise TypeError(f"No moments rule for {family}")


_check_exhaustive(_VALIDATORS, "_VALIDATORS")
_check_exhaustive(_DENSITIES, "_DENSITIES")
