"""
Statistical computation core.

The package separates generic numerics from the calculators built on them:

1. **Common** (biostatref.stats.common):
   Special functions (Lanczos Gamma, log-factorials, log-binomial
   coefficients) and the injectable quantile primitives.

2. **Schemes** (biostatref.stats.schemes):
   The four calculators: distribution densities, proportion confidence
   intervals, multiple-testing adjustment and the CLT simulator.

Every calculator takes a frozen request dataclass and returns a fresh
result; nothing is shared between calls.

Example:
--------
>>> from biostatref.stats.common.special import log_factorial
>>> round(log_factorial(3), 6)
1.791759

>>> from biostatref.stats.schemes.proportions import ProportionCIRequest, compute_all
>>> result = compute_all(ProportionCIRequest(x=5, n=20))
"""
