"""
biostatref.api.reference
========================

Calculator facade for the biostatistics reference.

Each function here backs one interactive calculator and accepts the loose
inputs a form produces (family names such as ``"chisq"``, comma-separated
p-value text), turns them into validated requests and returns the
engine's structured result.

Examples
--------
>>> from biostatref.api.reference import adjust_p_values, distribution_curve
>>> curve = distribution_curve("poisson", 4)
>>> len(curve)
13
>>> result = adjust_p_values("0.01, 0.04, abc, 0.03")
>>> result.request.m
3
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar, Union

from biostatref.core.errors import InvalidInputError
from biostatref.core.names import DistributionFamily, PopulationShape
from biostatref.stats.schemes.distributions import (
    DensitySeries,
    DistributionSpec,
    SeriesBudget,
    moments,
    series,
)
from biostatref.stats.schemes.multiple_testing import (
    PValueAdjustmentRequest,
    PValueAdjustmentResult,
    adjust,
)
from biostatref.stats.schemes.proportions import (
    ProportionCIRequest,
    ProportionCIResult,
    compute_all,
)
from biostatref.stats.schemes.sampling import (
    CLTSimulationRequest,
    CLTSimulationResult,
    simulate,
)

E = TypeVar("E", DistributionFamily, PopulationShape)


@dataclass
class ReferenceConfig:
    """
    Defaults shared by the calculators.

    Parameters
    ----------
    alpha : float, default=0.05
        Significance level for p-value adjustment
    level : float, default=0.95
        Confidence level for proportion intervals
    series_budget : SeriesBudget
        Point counts for plotted densities and the F normalization choice
    chunk_size : int, default=500
        Repetitions per simulation chunk

    Examples
    --------
    >>> strict = ReferenceConfig(alpha=0.01, level=0.99)
    >>> strict.validate()
    """

    alpha: float = 0.05
    level: float = 0.95
    series_budget: SeriesBudget = field(default_factory=SeriesBudget)
    chunk_size: int = 500

    def validate(self) -> None:
        """Validate configuration values."""
        if not 0 < self.alpha < 1:
            raise InvalidInputError(f"alpha must be in (0,1), got {self.alpha}")
        if not 0 < self.level < 1:
            raise InvalidInputError(f"level must be in (0,1), got {self.level}")
        if self.chunk_size < 1:
            raise InvalidInputError(f"chunk_size must be >= 1, got {self.chunk_size}")
        self.series_budget.validate()


# Map form vocabulary to family/shape tags
_FAMILY_ALIASES: Dict[str, DistributionFamily] = {
    "normal": DistributionFamily.NORMAL,
    "gaussian": DistributionFamily.NORMAL,
    "t": DistributionFamily.STUDENT_T,
    "student": DistributionFamily.STUDENT_T,
    "student_t": DistributionFamily.STUDENT_T,
    "chisq": DistributionFamily.CHI_SQUARED,
    "chi2": DistributionFamily.CHI_SQUARED,
    "chi_squared": DistributionFamily.CHI_SQUARED,
    "f": DistributionFamily.F,
    "poisson": DistributionFamily.POISSON,
    "binomial": DistributionFamily.BINOMIAL,
}

_SHAPE_ALIASES: Dict[str, PopulationShape] = {
    "uniform": PopulationShape.UNIFORM,
    "exponential": PopulationShape.EXPONENTIAL,
    "skewed": PopulationShape.EXPONENTIAL,
    "bimodal": PopulationShape.BIMODAL,
    "normal": PopulationShape.NORMAL,
}


def _resolve(value: Union[E, str], aliases: Dict[str, E], enum: Type[E], what: str) -> E:
    if isinstance(value, enum):
        return value
    key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
    if key not in aliases:
        raise InvalidInputError(f"Unknown {what}: {value!r}")
    return aliases[key]


def _config(config: Optional[ReferenceConfig]) -> ReferenceConfig:
    config = config or ReferenceConfig()
    config.validate()
    return config


def distribution_spec(
    family: Union[DistributionFamily, str],
    first: float,
    second: Optional[float] = None,
) -> DistributionSpec:
    """
    Build a `DistributionSpec` from form inputs.

    Parameters
    ----------
    family : DistributionFamily or str
        Family tag or alias ("normal", "t", "chisq", "f", "poisson", "binomial")
    first : float
        First parameter (mu, df, d1, lambda or n)
    second : float, optional
        Second parameter (sigma, d2 or p); required by two-parameter families

    Returns
    -------
    DistributionSpec
    """
    tag = _resolve(family, _FAMILY_ALIASES, DistributionFamily, "distribution family")
    two_params = tag in (
        DistributionFamily.NORMAL,
        DistributionFamily.F,
        DistributionFamily.BINOMIAL,
    )
    if two_params and second is None:
        raise InvalidInputError(f"{tag.value} needs two parameters")
    return DistributionSpec(tag, (first, second if two_params else 0.0))


def distribution_curve(
    family: Union[DistributionFamily, str],
    first: float,
    second: Optional[float] = None,
    config: Optional[ReferenceConfig] = None,
) -> DensitySeries:
    """
    Density series for the distribution explorer plot.

    Examples
    --------
    >>> curve = distribution_curve("normal", 0, 1)
    >>> curve.domain
    (-4.0, 4.0)
    """
    config = _config(config)
    return series(distribution_spec(family, first, second), config.series_budget)


def describe_distribution(
    family: Union[DistributionFamily, str],
    first: float,
    second: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Reference-card summary of a distribution: family, parameters, mean, variance.

    Examples
    --------
    >>> describe_distribution("binomial", 10, 0.5)["mean"]
    5.0
    """
    spec = distribution_spec(family, first, second)
    mean, variance = moments(spec)
    return {
        "family": spec.family.value,
        "params": spec.params,
        "mean": mean,
        "variance": variance,
    }


def proportion_confidence_intervals(
    x: int,
    n: int,
    level: Optional[float] = None,
    config: Optional[ReferenceConfig] = None,
) -> ProportionCIResult:
    """
    Wald, Wilson, Agresti-Coull and Clopper-Pearson intervals for ``x / n``.

    Parameters
    ----------
    x : int
        Successes
    n : int
        Trials
    level : float, optional
        Confidence level; defaults to ``config.level``

    Returns
    -------
    ProportionCIResult
    """
    config = _config(config)
    level = config.level if level is None else level
    return compute_all(ProportionCIRequest(x=x, n=n, level=level))


def parse_p_values(text: str) -> List[float]:
    """
    Parse comma-separated p-value text, keeping entries that are numbers in [0, 1].

    Non-numeric and out-of-range entries are dropped, mirroring what the
    calculator form accepts.

    Examples
    --------
    >>> parse_p_values("0.01, 0.2,, x, 1.5, 0.049")
    [0.01, 0.2, 0.049]
    """
    values = []
    for token in re.split(r"[,\n]", text):
        token = token.strip()
        if not token:
            continue
        try:
            value = float(token)
        except ValueError:
            continue
        if 0 <= value <= 1:
            values.append(value)
    return values


def adjust_p_values(
    p_values: Union[str, Sequence[float]],
    alpha: Optional[float] = None,
    config: Optional[ReferenceConfig] = None,
) -> PValueAdjustmentResult:
    """
    Adjust p-values under Bonferroni, Holm, Hochberg, BH and Sidak.

    Parameters
    ----------
    p_values : str or sequence of float
        Raw p-values, or comma-separated text parsed by `parse_p_values`
    alpha : float, optional
        Significance level; defaults to ``config.alpha``

    Returns
    -------
    PValueAdjustmentResult
    """
    config = _config(config)
    if isinstance(p_values, str):
        p_values = parse_p_values(p_values)
        if not p_values:
            raise InvalidInputError("No valid p-values entered")
    return adjust(
        PValueAdjustmentRequest(tuple(p_values), alpha=config.alpha if alpha is None else alpha)
    )


def sampling_distribution_demo(
    shape: Union[PopulationShape, str] = PopulationShape.EXPONENTIAL,
    sample_size: int = 30,
    repetitions: int = 1000,
    seed: Optional[int] = None,
    config: Optional[ReferenceConfig] = None,
) -> CLTSimulationResult:
    """
    Simulate the sampling distribution of the mean.

    Parameters
    ----------
    shape : PopulationShape or str, default="exponential"
        Population: "uniform", "exponential" (alias "skewed"), "bimodal", "normal"
    sample_size : int, default=30
        Values per sample
    repetitions : int, default=1000
        Number of samples
    seed : int, optional
        Seed for a reproducible run

    Examples
    --------
    >>> demo = sampling_distribution_demo("skewed", sample_size=50, repetitions=200, seed=1)
    >>> demo.request.shape.value
    'exponential'
    """
    config = _config(config)
    return simulate(
        CLTSimulationRequest(
            shape=_resolve(shape, _SHAPE_ALIASES, PopulationShape, "population shape"),
            sample_size=sample_size,
            repetitions=repetitions,
            seed=seed,
            chunk_size=config.chunk_size,
        )
    )
