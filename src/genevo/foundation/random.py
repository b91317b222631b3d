"""
Deterministic random number facility.

Seeds are 32-byte strings. ``from_seed`` turns one into a PCG64 backed
``np.random.Generator``; the same seed always yields the same stream.
``jump`` advances a generator by 2**127 draws in place, and ``fork`` derives two
independent generators from one, which is how parallel branches get their own
streams while the overall result stays reproducible for a given seed.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import TypeAlias

import numpy as np

RNG: TypeAlias = np.random.Generator
Seed: TypeAlias = bytes

SEED_SIZE = 32


def seed_random() -> Seed:
    """Fresh, non-reproducible seed taken from the operating system's entropy source."""
    return os.urandom(SEED_SIZE)


def from_seed(seed: Seed) -> RNG:
    seed = bytes(seed)
    if len(seed) != SEED_SIZE:
        raise ValueError(f"seed must be exactly {SEED_SIZE} bytes, got {len(seed)}.")
    return np.random.Generator(np.random.PCG64(int.from_bytes(seed, "little")))


def clone(rng: RNG) -> RNG:
    """Independent copy of ``rng`` positioned at the same point of its stream."""
    bit_generator = type(rng.bit_generator)()
    bit_generator.state = rng.bit_generator.state
    return np.random.Generator(bit_generator)


def jump(rng: RNG) -> None:
    bit_generator = rng.bit_generator
    if not hasattr(bit_generator, "jumped"):
        raise TypeError(f"{type(bit_generator).__name__} does not support jumping; use from_seed() generators.")
    bit_generator.state = bit_generator.jumped().state


def fork(rng: RNG) -> tuple[RNG, RNG]:
    """
    Split ``rng`` into two generators for a left and a right branch.

    The parent is jumped before each copy is taken, so the parent and both
    children all sit on non-overlapping parts of the stream.
    """
    jump(rng)
    left = clone(rng)
    jump(rng)
    right = clone(rng)
    return left, right


def random_probability(rng: RNG) -> float:
    return float(rng.random())


def random_index(rng: RNG, length: int) -> int:
    return random_index_from_range(rng, 0, length)


def random_index_from_range(rng: RNG, low: int, high: int) -> int:
    return int(rng.integers(low, high))


def random_cut_points(rng: RNG, length: int) -> tuple[int, int]:
    return random_cut_points_from_range(rng, 0, length)


def random_cut_points_from_range(rng: RNG, low: int, high: int) -> tuple[int, int]:
    """
    Two distinct cut points in ``[low, high)``, ordered ascending.

    The span between the points is kept strictly below ``high - low - 2`` so a
    segment never covers (almost) the whole range.
    """
    if high < low + 4:
        raise ValueError(f"cut points need a range of at least 4 positions, got [{low}, {high}).")
    max_slice = high - low - 2
    while True:
        first = random_index_from_range(rng, low, high)
        second = random_index_from_range(rng, low, high)
        if first == second or abs(first - second) >= max_slice:
            continue
        return (first, second) if first < second else (second, first)


def random_n_cut_points(rng: RNG, n: int, length: int) -> list[int]:
    """``n`` strictly increasing cut points inside ``(0, length)``."""
    if n <= 0:
        raise ValueError("number of cut points must be positive.")
    if length < 2 * n:
        raise ValueError(f"a genome of length {length} cannot hold {n} cut points.")
    if n == 1:
        return [random_index(rng, length)]
    if n == 2:
        return list(random_cut_points(rng, length))

    slice_len = length // n
    cut_points: list[int] = []
    start, end = 0, slice_len
    while len(cut_points) < n:
        cut_point = random_index_from_range(rng, start, end)
        if cut_point == 0:
            continue
        cut_points.append(cut_point)
        start = cut_point + 1
        end = length if len(cut_points) == n - 1 else end + slice_len
    return cut_points


class WeightedDistribution:
    """
    Picks indices proportionally to non-negative weights.

    ``select(pointer)`` walks the cumulative weights and returns the first
    index whose cumulative weight reaches ``pointer``; pointers beyond the total
    (rounding) fall back to the last index.
    """

    def __init__(self, weights: Sequence[float] | np.ndarray) -> None:
        self.weights = np.asarray(weights, dtype=float)
        if self.weights.ndim != 1 or self.weights.size == 0:
            raise ValueError("weights must be a non-empty 1-D sequence.")
        self._cumulative = np.cumsum(self.weights)
        self.sum = float(self._cumulative[-1])

    def select(self, pointer: float) -> int:
        idx = int(np.searchsorted(self._cumulative, pointer, side="left"))
        return min(idx, self.weights.size - 1)

    def __len__(self) -> int:
        return int(self.weights.size)


__all__ = [
    "RNG",
    "Seed",
    "SEED_SIZE",
    "seed_random",
    "from_seed",
    "clone",
    "jump",
    "fork",
    "random_probability",
    "random_index",
    "random_index_from_range",
    "random_cut_points",
    "random_cut_points_from_range",
    "random_n_cut_points",
    "WeightedDistribution",
]
