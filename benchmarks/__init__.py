"""Performance benchmarks for gradmin.

This package contains timing scripts comparing the minimizers and the
line-search routines on standard test problems.
"""
