"""Evolutionary run drivers.

This module provides the generational driver that applies a configurable
selection strategy to a population.
"""

from evoselect.algorithms.evolve import evolve

__all__ = ["evolve"]
