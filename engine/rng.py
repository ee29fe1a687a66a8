"""
Seeded pseudo-random stream.

A linear congruential generator working purely in integer arithmetic, so
the same seed yields the same sequence on every platform. All generators
draw from one of these instead of the ``random`` module.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, TypeVar

from settings import DEFAULT_SEED
from engine.error_handler import logger

T = TypeVar("T")

_MULTIPLIER = 1664525
_INCREMENT = 1013904223
_MODULUS = 2 ** 32


def normalize_seed(seed: object) -> int:
    """Return a usable 32-bit seed, substituting the default for bad input."""
    if isinstance(seed, bool) or not isinstance(seed, int):
        if seed is not None:
            logger.debug(f"Invalid seed {seed!r}; using default {DEFAULT_SEED}")
        return DEFAULT_SEED
    return seed % _MODULUS


class SeededRNG:
    """Deterministic random number generator."""

    def __init__(self, seed: object = DEFAULT_SEED) -> None:
        self.seed = normalize_seed(seed)
        self.state = self.seed

    def random(self) -> float:
        """Next float in [0, 1)."""
        self.state = (self.state * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self.state / _MODULUS

    def random_int(self, min_value: int, max_value: int) -> int:
        """Integer in [min_value, max_value], both inclusive."""
        return int(math.floor(self.random() * (max_value - min_value + 1))) + min_value

    def random_float(self, min_value: float, max_value: float) -> float:
        return self.random() * (max_value - min_value) + min_value

    def random_choice(self, items: Sequence[T]) -> Optional[T]:
        """One element of ``items``, or None when it is empty."""
        if not items:
            return None
        return items[int(math.floor(self.random() * len(items)))]

    def reset(self) -> None:
        """Rewind to the start of the sequence."""
        self.state = self.seed

    def set_seed(self, seed: object) -> None:
        self.seed = normalize_seed(seed)
        self.state = self.seed

    def derive(self, key: str) -> "SeededRNG":
        """
        Independent stream for a named sub-task.

        Derived streams depend only on this generator's seed and ``key``,
        so cached and uncached work draw identical numbers.
        """
        # FNV-1a keeps the mixing in integer arithmetic
        h = 2166136261
        for byte in key.encode("utf-8"):
            h = ((h ^ byte) * 16777619) % _MODULUS
        return SeededRNG((self.seed ^ h) % _MODULUS)
