"""
biostatref.stats.schemes.multiple_testing
=========================================

P-value adjustment for multiple comparisons.

Let ``m`` be the number of tests and ``p_(r)`` the r-th smallest raw
p-value (ties keep their input order). The procedures are:

- **Bonferroni** (FWER): ``min(1, p * m)`` per test.
- **Holm** (FWER, step-down): ranks ascending, ``p_(r) * (m - r + 1)`` with
  a running maximum.
- **Hochberg** (FWER, step-up): ranks descending, ``p_(r) * (m - r + 1)``
  with a running minimum.
- **Benjamini-Hochberg** (FDR, step-up): ranks descending,
  ``p_(r) * m / r`` with a running minimum.
- **Sidak** (FWER): ``min(1, 1 - (1 - p)^m)`` per test.

Adjusted values are clipped to [0, 1]. A test is significant under a
method iff its adjusted value is strictly below ``alpha``. Results are
reported in the caller's original order.

Examples
--------
>>> from biostatref.stats.schemes.multiple_testing import PValueAdjustmentRequest, adjust
>>> from biostatref.core.names import AdjustmentMethod
>>> result = adjust(PValueAdjustmentRequest((0.01, 0.04, 0.03, 0.08, 0.005), alpha=0.05))
>>> [round(v, 3) for v in result.adjusted(AdjustmentMethod.BONFERRONI)]
[0.05, 0.2, 0.15, 0.4, 0.025]
>>> result.significant_count(AdjustmentMethod.HOLM)
2
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from biostatref.core.errors import InvalidInputError
from biostatref.core.names import AdjustmentMethod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PValueAdjustmentRequest:
    """
    Raw p-values and the target significance level.

    Attributes:
        raw_p_values: P-values in [0, 1]; their order identifies the tests
        alpha: Significance level in (0, 1)
    """

    raw_p_values: Tuple[float, ...]
    alpha: float = 0.05

    def __post_init__(self) -> None:
        values = tuple(float(p) for p in self.raw_p_values)
        if not values:
            raise InvalidInputError("At least one p-value is required")
        for i, p in enumerate(values):
            if not (math.isfinite(p) and 0 <= p <= 1):
                raise InvalidInputError(f"p-value #{i + 1} must be in [0, 1], got {p}")
        if not 0 < self.alpha < 1:
            raise InvalidInputError(f"alpha must be in (0, 1), got {self.alpha}")
        object.__setattr__(self, "raw_p_values", values)

    @property
    def m(self) -> int:
        return len(self.raw_p_values)


@dataclass(frozen=True)
class AdjustedTest:
    """
    Adjustment outcome for one test, keyed by method.

    Attributes:
        index: Position of the test in the request (0-based)
        rank: Rank of its raw p-value (1 = smallest)
        raw: Raw p-value
        adjusted: Adjusted p-value per method
        significant: ``adjusted < alpha`` per method
    """

    index: int
    rank: int
    raw: float
    adjusted: Dict[AdjustmentMethod, float]
    significant: Dict[AdjustmentMethod, bool]


@dataclass(frozen=True)
class PValueAdjustmentResult:
    """Adjusted p-values for every test, in the original order."""

    request: PValueAdjustmentRequest
    tests: Tuple[AdjustedTest, ...]

    @property
    def alpha(self) -> float:
        return self.request.alpha

    def adjusted(self, method: AdjustmentMethod) -> List[float]:
        """Adjusted p-values under ``method`` in original order."""
        method = AdjustmentMethod(method)
        return [t.adjusted[method] for t in self.tests]

    def significant_count(self, method: AdjustmentMethod) -> int:
        method = AdjustmentMethod(method)
        return sum(1 for t in self.tests if t.significant[method])

    @property
    def unadjusted_significant_count(self) -> int:
        return sum(1 for t in self.tests if t.raw < self.alpha)


# --- Procedures ---
# Each takes the raw p-values and the rank order (indices sorted by p) and
# returns adjusted values in original order.


def _rank_order(p_values: Sequence[float]) -> List[int]:
    # sorted() is stable: tied p-values keep input order
    return sorted(range(len(p_values)), key=lambda i: p_values[i])


def bonferroni(p_values: Sequence[float], order: Sequence[int]) -> List[float]:
    m = len(p_values)
    return [min(1.0, p * m) for p in p_values]


def _sidak_one(p: float, m: int) -> float:
    if p >= 1.0:
        return 1.0
    # 1 - (1 - p)^m without cancellation for tiny p
    return min(1.0, max(0.0, -math.expm1(m * math.log1p(-p))))


def sidak(p_values: Sequence[float], order: Sequence[int]) -> List[float]:
    m = len(p_values)
    return [_sidak_one(p, m) for p in p_values]


def holm(p_values: Sequence[float], order: Sequence[int]) -> List[float]:
    m = len(p_values)
    adjusted = [0.0] * m
    running_max = 0.0
    for r, idx in enumerate(order, start=1):
        running_max = max(running_max, p_values[idx] * (m - r + 1))
        adjusted[idx] = min(1.0, running_max)
    return adjusted


def _step_up(
    p_values: Sequence[float], order: Sequence[int], multiplier: Callable[[int, int], float]
) -> List[float]:
    m = len(p_values)
    adjusted = [0.0] * m
    running_min = 1.0
    for r in range(m, 0, -1):
        idx = order[r - 1]
        running_min = min(running_min, p_values[idx] * multiplier(m, r))
        adjusted[idx] = min(1.0, running_min)
    return adjusted


def hochberg(p_values: Sequence[float], order: Sequence[int]) -> List[float]:
    return _step_up(p_values, order, lambda m, r: m - r + 1)


def benjamini_hochberg(p_values: Sequence[float], order: Sequence[int]) -> List[float]:
    return _step_up(p_values, order, lambda m, r: m / r)


_PROCEDURES: Dict[AdjustmentMethod, Callable[[Sequence[float], Sequence[int]], List[float]]] = {
    AdjustmentMethod.BONFERRONI: bonferroni,
    AdjustmentMethod.HOLM: holm,
    AdjustmentMethod.HOCHBERG: hochberg,
    AdjustmentMethod.BENJAMINI_HOCHBERG: benjamini_hochberg,
    AdjustmentMethod.SIDAK: sidak,
}

_missing = set(AdjustmentMethod) - set(_PROCEDURES)
if _missing:
    raise TypeError(f"_PROCEDURES has no entry for {sorted(m.value for m in _missing)}")


def adjust(request: PValueAdjustmentRequest) -> PValueAdjustmentResult:
    """
    Adjust raw p-values under every procedure.

    Args:
        request: Validated p-values and alpha

    Returns:
        `PValueAdjustmentResult` with one `AdjustedTest` per input p-value
    """
    p_values = request.raw_p_values
    order = _rank_order(p_values)
    ranks = [0] * len(p_values)
    for r, idx in enumerate(order, start=1):
        ranks[idx] = r

    by_method = {method: _PROCEDURES[method](p_values, order) for method in AdjustmentMethod}

    tests = tuple(
        AdjustedTest(
            index=i,
            rank=ranks[i],
            raw=p,
            adjusted={method: values[i] for method, values in by_method.items()},
            significant={
                method: values[i] < request.alpha for method, values in by_method.items()
            },
        )
        for i, p in enumerate(p_values)
    )
    logger.debug("Adjusted %d p-values at alpha=%s", request.m, request.alpha)
    return PValueAdjustmentResult(request=request, tests=tests)
