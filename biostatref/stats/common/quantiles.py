"""
biostatref.stats.common.quantiles
=================================

Numeric primitives the interval engine consumes from its host.

The confidence-interval engine never hard-codes a quantile routine; it
accepts two callables:

- `NormalQuantile`: ``p -> z``, the standard normal quantile.
- `BetaQuantile`: ``(p, a, b) -> x``, the inverse regularized incomplete
  Beta function (only needed for Clopper-Pearson).

The defaults below wrap `scipy.stats`.
"""

from __future__ import annotations
from typing import Callable

from scipy.stats import beta, norm

NormalQuantile = Callable[[float], float]
BetaQuantile = Callable[[float, float, float], float]


def standard_normal_quantile(p: float) -> float:
    """Standard normal quantile, Phi^-1(p)."""
    return float(norm.ppf(p))


def beta_quantile(p: float, a: float, b: float) -> float:
    """Beta(a, b) quantile, i.e. the inverse regularized incomplete Beta."""
    return float(beta.ppf(p, a, b))
