"""Base generator protocol and utilities.

This module defines the DataGenerator base class that generators extend,
plus common utilities for data generation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, TypeVar

import structlog

from shopgen.distributions.random_source import RandomSource

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def format_id(prefix: str, number: int, width: int) -> str:
    """Build an identifier token such as ``CUST0001``.

    Args:
        prefix: Entity prefix
        number: 1-based sequence number
        width: Minimum zero-padded width of the numeric suffix

    Example:
        >>> format_id("PROD", 7, 5)
        'PROD00007'
    """
    return f"{prefix}{number:0{width}d}"


def pick_unique(source: RandomSource, pool: Sequence[T], count: int) -> list[T]:
    """Select up to ``count`` distinct elements without replacement.

    Works on an owned copy of ``pool``: each pick draws an index into the
    remaining candidates and removes it. Stops early when the candidates run
    out, so a request larger than the pool returns the whole pool in
    draw order.

    Args:
        source: Stream to draw indices from (one draw per pick)
        pool: Candidate elements; never mutated
        count: Number of elements requested

    Returns:
        Selected elements in pick order
    """
    candidates = list(pool)
    selected: list[T] = []
    while len(selected) < count and candidates:
        index = source.randint(0, len(candidates) - 1)
        selected.append(candidates.pop(index))
    return selected


class DataGenerator(ABC):
    """Abstract base class for synthetic data generators.

    Generators should:
    - Draw every random value from one RandomSource for reproducibility
    - Use weighted distributions for realistic data
    - Emit immutable schema records
    """

    def __init__(self, seed: int = 42) -> None:
        self.seed = seed
        self.source = RandomSource(seed)

    @abstractmethod
    def generate_dataset(self) -> Any:  # pragma: no cover - abstract method
        """Generate every entity of the dataset in dependency order.

        Returns:
            Generator-specific dataset container
        """
        ...

    def reset(self) -> None:
        """Restart the random stream from the seed."""
        self.source.reset()

    def _log_generation(self, entity: str, count: int) -> None:
        """Log generation activity.

        Args:
            entity: Name of the entity being generated
            count: Number of records generated
        """
        logger.info("data_generated", entity=entity, count=count, draws=self.source.draws)
