"""Weighted distribution utilities.

This module provides helpers for creating realistic weighted distributions
for categorical data generation.
"""

from __future__ import annotations

from shopgen.distributions.random_source import RandomSource


class WeightedDistribution:
    """Helper for weighted random selection.

    Wraps an ordered label/weight mapping and draws from a shared
    RandomSource, one stream value per selection. The draw is scaled by the
    weight sum and the first label whose cumulative weight covers it (upper
    bound inclusive) wins; a draw left uncovered by float rounding resolves to
    the last label.

    Example:
        >>> statuses = WeightedDistribution({
        ...     "Delivered": 0.40,
        ...     "Shipped": 0.30,
        ...     "Pending": 0.30,
        ... })
        >>> status = statuses.sample_one(RandomSource(seed=42))
    """

    def __init__(self, weights: dict[str, float]) -> None:
        """Initialize with weight mapping.

        Args:
            weights: Mapping of values to their relative weights. Order is
                     significant: it fixes the cumulative intervals.
        """
        if not weights:
            raise ValueError("WeightedDistribution requires at least one weight")
        if any(w < 0 for w in weights.values()):
            raise ValueError("weights must be non-negative")
        self.values = list(weights.keys())
        self.weights = list(weights.values())

    def sample_one(self, source: RandomSource) -> str:
        """Draw a single weighted value.

        Args:
            source: Stream to consume one value from

        Returns:
            Selected value
        """
        return source.weighted_choice(list(zip(self.values, self.weights, strict=True)))


ORDER_STATUS_DISTRIBUTION = WeightedDistribution({
    "Pending": 0.10,
    "Processing": 0.15,
    "Shipped": 0.30,
    "Delivered": 0.40,
    "Cancelled": 0.05,
})

# Statuses that carry a shipped date
SHIPPED_STATUSES = frozenset({"Shipped", "Delivered"})
