"""
biostatref.reporting
====================

Tabular (polars) views of calculator results. See `tables`.
"""
