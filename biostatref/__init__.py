"""
biostatref: the statistical computation core of a biostatistics reference.

A clinical-research reference suite is mostly presentation: tables,
checklists and printable cards. The part that computes lives here, as four
small engines that are pure functions of a request dataclass:

- distribution densities and plot series (Lanczos Gamma, log-space
  combinatorics),
- confidence intervals for a single proportion (Wald, Wilson,
  Agresti-Coull, Clopper-Pearson),
- multiple-comparison p-value adjustment (Bonferroni, Holm, Hochberg,
  Benjamini-Hochberg, Sidak),
- a Monte Carlo demonstration of the Central Limit Theorem.

Each call builds a fresh result and shares no state with any other call.
Rendering, charting and persistence belong to the host application.

Example
-------
>>> import biostatref
>>> assert hasattr(biostatref, "core")
>>> assert hasattr(biostatref, "stats")
"""

import logging

from biostatref import api, core, reporting, stats

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
