"""
biostatref.core
===============

Shared vocabulary of the package: tagged names (`names`) and the error
taxonomy (`errors`). Nothing in here performs computation.
"""
