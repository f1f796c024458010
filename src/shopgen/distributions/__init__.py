"""Distribution helpers for synthetic data generation.

This module provides the deterministic random stream and the helpers built
on it:
- RandomSource: seeded Mulberry32 stream of floats in [0, 1)
- Weighted choices for categorical data
- Temporal helpers for timestamp rendering
"""

from __future__ import annotations

from shopgen.distributions.random_source import RandomSource
from shopgen.distributions.weighted import WeightedDistribution

__all__ = ["RandomSource", "WeightedDistribution"]
