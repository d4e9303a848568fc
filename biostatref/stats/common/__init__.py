"""
biostatref.stats.common
=======================

Common numerical building blocks.

This module contains the scheme-agnostic pieces the calculators are built
from: special functions (`special`) and the injectable quantile primitives
(`quantiles`). Nothing here knows about distributions, intervals or
p-values as user-facing concepts.
"""
