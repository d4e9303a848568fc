"""
biostatref.core.names
=====================

Typed names shared across the package.

- `DistributionFamily`: the six families the density evaluator understands.
- `CIMethod`: the four single-proportion interval methods.
- `AdjustmentMethod`: the five multiple-comparison procedures.
- `PopulationShape`: the population generators of the CLT simulator.

All are closed `str`-valued enums, so a tag can be compared with (or built
from) its plain string value.

Examples
--------
>>> from biostatref.core.names import DistributionFamily, AdjustmentMethod
>>> DistributionFamily.CHI_SQUARED.value
'chi_squared'
>>> AdjustmentMethod("holm") is AdjustmentMethod.HOLM
True
"""

from __future__ import annotations
from enum import Enum


class DistributionFamily(str, Enum):
    """Distribution families with closed-form densities.

    - NORMAL, STUDENT_T, CHI_SQUARED, F: continuous (PDF)
    - POISSON, BINOMIAL: discrete (PMF)
    """

    NORMAL = "normal"
    STUDENT_T = "student_t"
    CHI_SQUARED = "chi_squared"
    F = "f"
    POISSON = "poisson"
    BINOMIAL = "binomial"

    @property
    def is_discrete(self) -> bool:
        return self in (DistributionFamily.POISSON, DistributionFamily.BINOMIAL)


class CIMethod(str, Enum):
    """Confidence interval methods for a single binomial proportion."""

    WALD = "wald"
    WILSON = "wilson"
    AGRESTI_COULL = "agresti_coull"
    CLOPPER_PEARSON = "clopper_pearson"

    @property
    def label(self) -> str:
        return _CI_LABELS[self]


class AdjustmentMethod(str, Enum):
    """Multiple-comparison p-value adjustment procedures.

    - BONFERRONI, SIDAK: single-step, applied per test
    - HOLM: step-down (FWER)
    - HOCHBERG: step-up (FWER)
    - BENJAMINI_HOCHBERG: step-up (FDR)
    """

    BONFERRONI = "bonferroni"
    HOLM = "holm"
    HOCHBERG = "hochberg"
    BENJAMINI_HOCHBERG = "benjamini_hochberg"
    SIDAK = "sidak"

    @property
    def label(self) -> str:
        return _ADJUSTMENT_LABELS[self]


class PopulationShape(str, Enum):
    """Population generators for the sampling-distribution demonstrator."""

    UNIFORM = "uniform"
    EXPONENTIAL = "exponential"
    BIMODAL = "bimodal"
    NORMAL = "normal"


_CI_LABELS = {
    CIMethod.WALD: "Wald",
    CIMethod.WILSON: "Wilson (score)",
    CIMethod.AGRESTI_COULL: "Agresti-Coull",
    CIMethod.CLOPPER_PEARSON: "Clopper-Pearson (exact)",
}

_ADJUSTMENT_LABELS = {
    AdjustmentMethod.BONFERRONI: "Bonferroni",
    AdjustmentMethod.HOLM: "Holm",
    AdjustmentMethod.HOCHBERG: "Hochberg",
    AdjustmentMethod.BENJAMINI_HOCHBERG: "BH (FDR)",
    AdjustmentMethod.SIDAK: "Sidak",
}
