"""
biostatref.reporting.tables
===========================

Polars views of calculator results, ready for display or export.

Each function takes an engine result and returns a `polars.DataFrame`
whose columns mirror the tables the reference shows: the density series,
the interval comparison (with widths), the adjusted p-value grid with
significance flags, the significance summary and the histogram.

Examples
--------
>>> from biostatref.api.reference import proportion_confidence_intervals
>>> from biostatref.reporting.tables import interval_table
>>> table = interval_table(proportion_confidence_intervals(23, 100))
>>> table.columns
['method', 'lower', 'upper', 'width']
>>> table.height
4
"""

from __future__ import annotations
from typing import Any, Dict, List

import polars as pl

from biostatref.core.names import AdjustmentMethod
from biostatref.stats.schemes.distributions import DensitySeries
from biostatref.stats.schemes.multiple_testing import PValueAdjustmentResult
from biostatref.stats.schemes.proportions import ProportionCIResult
from biostatref.stats.schemes.sampling import CLTSimulationResult


def density_table(curve: DensitySeries) -> pl.DataFrame:
    """One row per plotted point: ``x``, ``density``."""
    points = list(curve)
    return pl.DataFrame(
        {"x": [p.x for p in points], "density": [p.density for p in points]},
        schema={"x": pl.Float64, "density": pl.Float64},
    )


def interval_table(result: ProportionCIResult) -> pl.DataFrame:
    """One row per CI method: ``method``, ``lower``, ``upper``, ``width``."""
    rows = [
        {
            "method": method.label,
            "lower": interval.lower,
            "upper": interval.upper,
            "width": interval.width,
        }
        for method, interval in result
    ]
    return pl.DataFrame(rows)


def adjustment_table(result: PValueAdjustmentResult) -> pl.DataFrame:
    """
    One row per test in input order.

    Columns: ``test`` (1-based), ``raw``, then for every method its adjusted
    value (column named after the method) and ``<method>_significant``.
    """
    rows: List[Dict[str, Any]] = []
    for test in result.tests:
        row: Dict[str, Any] = {"test": test.index + 1, "raw": test.raw}
        for method in AdjustmentMethod:
            row[method.value] = test.adjusted[method]
            row[f"{method.value}_significant"] = test.significant[method]
        rows.append(row)
    return pl.DataFrame(rows)


def significance_summary(result: PValueAdjustmentResult) -> pl.DataFrame:
    """Significant-test counts: unadjusted first, then each method."""
    m = result.request.m
    methods = ["Unadjusted"] + [method.label for method in AdjustmentMethod]
    counts = [result.unadjusted_significant_count] + [
        result.significant_count(method) for method in AdjustmentMethod
    ]
    return pl.DataFrame(
        {"method": methods, "significant": counts, "tests": [m] * len(methods)}
    )


def histogram_table(result: CLTSimulationResult) -> pl.DataFrame:
    """One row per histogram bin: ``bin``, ``lower``, ``upper``, ``count``."""
    return pl.DataFrame(
        {
            "bin": [b.label for b in result.histogram],
            "lower": [b.lower for b in result.histogram],
            "upper": [b.upper for b in result.histogram],
            "count": [b.count for b in result.histogram],
        }
    )
