"""
Crossover operators.

Every breeder takes one parent group and returns one child per parent. Parents
are never modified; children are fresh arrays.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

import numpy as np

from genevo.foundation.random import RNG, random_cut_points, random_index, random_n_cut_points

PermutationCrossover: TypeAlias = Callable[[np.ndarray, np.ndarray, int, int], np.ndarray]


class CrossoverOp(ABC):
    """Base class for recombination strategies."""

    name = "Crossover"

    @abstractmethod
    def crossover(self, parents: Sequence[Any], rng: RNG) -> list[Any]:
        """Recombine one parent group into ``len(parents)`` children."""


def _stack_parents(parents: Sequence[Any]) -> np.ndarray:
    arrays = [np.asarray(parent) for parent in parents]
    if not arrays:
        raise ValueError("parent group is empty.")
    lengths = {arr.shape for arr in arrays}
    if len(lengths) != 1 or arrays[0].ndim != 1:
        raise ValueError(f"all parents must be 1-D genomes of equal length, got shapes {sorted(lengths)}.")
    return np.stack(arrays)


class UniformCrossBreeder(CrossoverOp):
    """Each locus of a child is copied from a uniformly chosen parent."""

    name = "Uniform-Cross-Breeder"

    def crossover(self, parents: Sequence[Any], rng: RNG) -> list[Any]:
        stacked = _stack_parents(parents)
        n_parents, length = stacked.shape
        loci = np.arange(length)
        return [stacked[rng.integers(0, n_parents, size=length), loci] for _ in range(n_parents)]


class MultiPointCrossBreeder(CrossoverOp):
    """
    N-point crossover.

    The genome is cut at ``num_cut_points`` random positions and consecutive
    segments are copied from different, randomly chosen parents.
    """

    name = "Multi-Point-Cross-Breeder"

    def __init__(self, num_cut_points: int) -> None:
        if num_cut_points < 1:
            raise ValueError("num_cut_points must be positive.")
        self.num_cut_points = int(num_cut_points)

    def crossover(self, parents: Sequence[Any], rng: RNG) -> list[Any]:
        stacked = _stack_parents(parents)
        n_parents, length = stacked.shape
        if n_parents == 1:
            return [stacked[0].copy()]
        children = []
        for _ in range(n_parents):
            child = np.empty_like(stacked[0])
            boundaries = random_n_cut_points(rng, self.num_cut_points, length) + [length]
            start, previous = 0, -1
            for end in boundaries:
                donor = random_index(rng, n_parents)
                while donor == previous:
                    donor = random_index(rng, n_parents)
                child[start:end] = stacked[donor, start:end]
                start, previous = end, donor
            children.append(child)
        return children

    def __repr__(self) -> str:
        return f"MultiPointCrossBreeder(num_cut_points={self.num_cut_points})"


def _check_cut_points(length: int, cut1: int, cut2: int) -> None:
    if not 0 <= cut1 <= cut2 < length:
        raise ValueError(f"cut points must satisfy 0 <= cut1 <= cut2 < {length}, got ({cut1}, {cut2}).")


def _check_same_alleles(p1: np.ndarray, p2: np.ndarray) -> None:
    if p1.shape != p2.shape or not np.array_equal(np.sort(p1), np.sort(p2)):
        raise ValueError("parents must be permutations of the same alleles.")


def order_one_crossover(parent1: Any, parent2: Any, cut1: int, cut2: int) -> np.ndarray:
    """
    Order crossover (OX1) with an inclusive segment ``[cut1, cut2]``.

    The child keeps ``parent1``'s segment in place. The remaining positions,
    starting right after the segment and wrapping around, are filled with the
    genes of ``parent2`` in the order they appear from ``cut2 + 1`` on, skipping
    genes already in the segment.
    """
    p1 = np.asarray(parent1)
    p2 = np.asarray(parent2)
    length = p1.size
    _check_cut_points(length, cut1, cut2)
    _check_same_alleles(p1, p2)
    segment = p1[cut1 : cut2 + 1]
    rotated = np.roll(p2, -((cut2 + 1) % length))
    remaining = rotated[~np.isin(rotated, segment)]
    right_len = length - cut2 - 1

    child = np.empty_like(p1)
    child[cut1 : cut2 + 1] = segment
    child[cut2 + 1 :] = remaining[:right_len]
    child[:cut1] = remaining[right_len:]
    return child


def partially_mapped_crossover(parent1: Any, parent2: Any, cut1: int, cut2: int) -> np.ndarray:
    """
    Partially mapped crossover (PMX) with an inclusive segment ``[cut1, cut2]``.

    Starting from a copy of ``parent2``, each gene of ``parent1``'s segment is
    moved into place by swapping it with whatever currently occupies its slot.
    """
    p1 = np.asarray(parent1)
    p2 = np.asarray(parent2)
    _check_cut_points(p1.size, cut1, cut2)
    _check_same_alleles(p1, p2)
    child = p2.tolist()
    position = {value: index for index, value in enumerate(child)}
    donor = p1.tolist()
    for j in range(cut1, cut2 + 1):
        displaced = child[j]
        value = donor[j]
        k = position[value]
        child[j] = value
        child[k] = displaced
        position[displaced] = k
        position[value] = j
    return np.asarray(child, dtype=p2.dtype)


class _CyclicPermutationCrossover(CrossoverOp):
    """Child ``i`` mixes parent ``i`` with parent ``(i + 1) % n`` using fresh cut points."""

    _combine: PermutationCrossover

    def crossover(self, parents: Sequence[Any], rng: RNG) -> list[Any]:
        stacked = _stack_parents(parents)
        n_parents, length = stacked.shape
        children = []
        for i in range(n_parents):
            cut1, cut2 = random_cut_points(rng, length)
            children.append(self._combine(stacked[i], stacked[(i + 1) % n_parents], cut1, cut2))
        return children


class OrderOneCrossover(_CyclicPermutationCrossover):
    name = "Order-One-Crossover"
    _combine = staticmethod(order_one_crossover)


class PartiallyMappedCrossover(_CyclicPermutationCrossover):
    name = "Partially-Mapped-Crossover"
    _combine = staticmethod(partially_mapped_crossover)


__all__ = [
    "CrossoverOp",
    "UniformCrossBreeder",
    "MultiPointCrossBreeder",
    "OrderOneCrossover",
    "PartiallyMappedCrossover",
    "order_one_crossover",
    "partially_mapped_crossover",
]
