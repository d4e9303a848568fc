"""
biostatref.core.errors
======================

Exceptions raised by the computation core.

Every error is raised synchronously at the violated precondition; no
engine returns a partial result alongside an error.

- `InvalidInputError`: a request or parameter violates its domain
  (also a `ValueError`, so generic callers can keep catching that).
- `NumericOverflowError`: the special-function backend cannot produce a
  finite result for an extreme input.
- `MissingDependencyError`: a numeric primitive required by a method
  (e.g. the Beta quantile for Clopper-Pearson) was not supplied.
"""

from __future__ import annotations


class BiostatError(Exception):
    """Base class for all biostatref errors."""


class InvalidInputError(BiostatError, ValueError):
    """Out-of-domain or malformed request."""


class NumericOverflowError(BiostatError, OverflowError):
    """A special function overflowed the float range."""


class MissingDependencyError(BiostatError, RuntimeError):
    """A required numeric primitive is unavailable."""
