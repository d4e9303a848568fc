"""
biostatref.stats.schemes
========================

The calculators of the biostatistics reference, each built on the generic
pieces in `biostatref.stats.common`:

- `distributions`: PDF/PMF evaluation and plot series
- `proportions`: single-proportion confidence intervals
- `multiple_testing`: p-value adjustment
- `sampling`: Central Limit Theorem simulation
"""
