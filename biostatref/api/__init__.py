"""
biostatref.api - Calculator Facade
==================================

Off-the-shelf entry points for the reference calculators, organized by what
a user of the reference wants to do rather than by the engine that does it.
In terms of the design patterns, this is the facade pattern.

Examples
--------
>>> # Distribution explorer
>>> from biostatref.api.reference import distribution_curve
>>> curve = distribution_curve("chisq", 4)
>>>
>>> # Proportion CI calculator
>>> from biostatref.api.reference import proportion_confidence_intervals
>>> intervals = proportion_confidence_intervals(23, 100, level=0.95)
>>>
>>> # P-value adjustment calculator
>>> from biostatref.api.reference import adjust_p_values
>>> adjusted = adjust_p_values("0.01, 0.04, 0.03, 0.08, 0.005", alpha=0.05)
>>>
>>> # CLT demonstrator
>>> from biostatref.api.reference import sampling_distribution_demo
>>> demo = sampling_distribution_demo("bimodal", sample_size=10, repetitions=500, seed=3)

Unified Interface
-----------------
All calculators live in `biostatref.api.reference`:
- `distribution_curve()` / `describe_distribution()`: distribution explorer
- `proportion_confidence_intervals()`: single-proportion CI comparison
- `adjust_p_values()` / `parse_p_values()`: multiple-comparison adjustment
- `sampling_distribution_demo()`: sampling distribution of the mean

Architecture
------------
This facade delegates to:
- biostatref.core: tags and errors
- biostatref.stats: the computation engines
- biostatref.reporting: tabular views of the results
"""
