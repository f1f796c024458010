"""Deterministic pseudo-random source.

This module provides RandomSource, a seeded Mulberry32 stream of floats in
[0, 1). Every higher-level draw in shopgen consumes this stream, so a seed
plus a call sequence fully determines the generated dataset.

Each helper consumes exactly one value from the stream:

- random(): the raw value
- randint(lo, hi): floor(r * (hi - lo + 1)) + lo
- choice(seq): seq[floor(r * len(seq))]
- weighted_choice(options): see shopgen.distributions.weighted
- timestamp_between(start, end): start + randint(0, span_ms) milliseconds
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import TypeVar

T = TypeVar("T")

_MASK = 0xFFFFFFFF
_GOLDEN_GAMMA = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK


class RandomSource:
    """Seeded Mulberry32 stream producing reproducible floats in [0, 1).

    Two sources created with the same seed return bit-identical values for
    identical call sequences. The stream can only be restarted by reseeding.

    Example:
        >>> source = RandomSource(seed=42)
        >>> first = source.random()
        >>> source.reset()
        >>> source.random() == first
        True
    """

    def __init__(self, seed: int = 42) -> None:
        """Initialize the stream.

        Args:
            seed: Integer seed. Only the low 32 bits are significant.
        """
        self.seed = seed
        self._state = seed & _MASK
        self.draws = 0

    def reset(self) -> None:
        """Restart the stream from the original seed."""
        self._state = self.seed & _MASK
        self.draws = 0

    def random(self) -> float:
        """Return the next value in [0, 1)."""
        self._state = (self._state + _GOLDEN_GAMMA) & _MASK
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK
        self.draws += 1
        return ((t ^ (t >> 14)) & _MASK) / _TWO_POW_32

    def randint(self, lo: int, hi: int) -> int:
        """Return a uniform integer in [lo, hi] (both inclusive)."""
        if hi < lo:
            raise ValueError(f"randint range is empty: [{lo}, {hi}]")
        return math.floor(self.random() * (hi - lo + 1)) + lo

    def choice(self, seq: Sequence[T]) -> T:
        """Return a uniformly selected element of a non-empty sequence."""
        if not seq:
            raise ValueError("cannot choose from an empty sequence")
        return seq[math.floor(self.random() * len(seq))]

    def weighted_choice(self, options: Sequence[tuple[T, float]]) -> T:
        """Return a label selected proportionally to its weight.

        Args:
            options: (label, weight) pairs in a fixed order.

        Returns:
            The first label whose cumulative weight is >= the scaled draw,
            or the last label when floating-point summation falls short.
        """
        if not options:
            raise ValueError("weighted_choice requires at least one option")
        total = sum(weight for _, weight in options)
        draw = self.random() * total
        cumulative = 0.0
        for label, weight in options:
            cumulative += weight
            if draw <= cumulative:
                return label
        return options[-1][0]

    def timestamp_between(self, start: datetime, end: datetime) -> datetime:
        """Return a timestamp in [start, end] at millisecond resolution."""
        span_ms = (end - start) // timedelta(milliseconds=1)
        return start + timedelta(milliseconds=self.randint(0, span_ms))
