"""
Mutation operators.

All mutators derive the number of single-locus changes from the rate as
``floor(length * rate + U(0, 1))``, so the expected number of changes equals
``length * rate`` across repeated calls. Loci are drawn independently and may
repeat. Genome length never changes and the input genome is left untouched.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from genevo.foundation.random import RNG, random_cut_points, random_index, random_probability


class MutationOp(ABC):
    """Base class for mutation strategies."""

    name = "Mutation"

    def __init__(self, mutation_rate: float) -> None:
        if not 0.0 <= mutation_rate <= 1.0:
            raise ValueError("mutation_rate must be in [0, 1].")
        self.mutation_rate = float(mutation_rate)

    def num_mutations(self, length: int, rng: RNG) -> int:
        return math.floor(length * self.mutation_rate + random_probability(rng))

    @abstractmethod
    def mutate(self, genome: Any, rng: RNG) -> Any:
        """Return a mutated copy of ``genome``."""


def _draw_value(dtype: np.dtype, min_value: Any, max_value: Any, rng: RNG) -> Any:
    if np.issubdtype(dtype, np.integer):
        return rng.integers(min_value, max_value)
    return rng.uniform(min_value, max_value)


class RandomValueMutator(MutationOp):
    """
    Replaces loci with random values.

    Boolean genomes get a random bit, numeric genomes a value drawn uniformly
    from ``[min_value, max_value)``.
    """

    name = "Random-Value-Mutation"

    def __init__(self, mutation_rate: float, min_value: Any = None, max_value: Any = None) -> None:
        super().__init__(mutation_rate)
        if min_value is not None and max_value is not None and not min_value < max_value:
            raise ValueError("min_value must be smaller than max_value.")
        self.min_value = min_value
        self.max_value = max_value

    def mutate(self, genome: Any, rng: RNG) -> np.ndarray:
        mutated = np.array(genome, copy=True)
        length = mutated.size
        if length == 0:
            return mutated
        is_bool = mutated.dtype == np.bool_
        if not is_bool and (self.min_value is None or self.max_value is None):
            raise ValueError("numeric genomes need min_value and max_value.")
        for _ in range(self.num_mutations(length, rng)):
            locus = random_index(rng, length)
            if is_bool:
                mutated[locus] = random_probability(rng) < 0.5
            else:
                mutated[locus] = _draw_value(mutated.dtype, self.min_value, self.max_value, rng)
        return mutated


class BreederValueMutator(MutationOp):
    """
    Mutation operator of the breeder genetic algorithm.

    A locus moves by ``range`` or by ``range / 2**precision`` (equal chance), up
    or down. Results below ``min_value`` are replaced by a random value from
    ``[min_value, max_value)``; results above ``max_value`` are clamped.
    """

    name = "Breeder-Value-Mutation"

    def __init__(
        self,
        mutation_rate: float,
        range: float,
        precision: int,
        min_value: float,
        max_value: float,
    ) -> None:
        super().__init__(mutation_rate)
        if precision < 0:
            raise ValueError("precision must be non-negative.")
        if not min_value < max_value:
            raise ValueError("min_value must be smaller than max_value.")
        self.range = range
        self.precision = int(precision)
        self.min_value = min_value
        self.max_value = max_value

    def mutate(self, genome: Any, rng: RNG) -> np.ndarray:
        mutated = np.array(genome, copy=True)
        length = mutated.size
        if length == 0:
            return mutated
        integral = np.issubdtype(mutated.dtype, np.integer)
        fine_step = 1.0 / (1 << self.precision)
        for _ in range(self.num_mutations(length, rng)):
            locus = random_index(rng, length)
            sign = -1.0 if random_probability(rng) < 0.5 else 1.0
            adjustment = fine_step if random_probability(rng) < 0.5 else 1.0
            value = float(mutated[locus]) + float(self.range) * adjustment * sign
            if integral:
                value = math.trunc(value)
            if value < self.min_value:
                mutated[locus] = _draw_value(mutated.dtype, self.min_value, self.max_value, rng)
            elif value > self.max_value:
                mutated[locus] = self.max_value
            else:
                mutated[locus] = value
        return mutated


class SwapOrderMutator(MutationOp):
    """Swaps the genes at two random positions of a permutation."""

    name = "Swap-Order-Mutation"

    def mutate(self, genome: Any, rng: RNG) -> np.ndarray:
        mutated = np.array(genome, copy=True)
        for _ in range(self.num_mutations(mutated.size, rng)):
            first, second = random_cut_points(rng, mutated.size)
            mutated[[first, second]] = mutated[[second, first]]
        return mutated


class InsertOrderMutator(MutationOp):
    """Moves the gene at one random position to just after another, shifting the genes in between."""

    name = "Insert-Order-Mutation"

    def mutate(self, genome: Any, rng: RNG) -> np.ndarray:
        mutated = np.array(genome, copy=True)
        for _ in range(self.num_mutations(mutated.size, rng)):
            target, source = random_cut_points(rng, mutated.size)
            gene = mutated[source]
            mutated[target + 2 : source + 1] = mutated[target + 1 : source]
            mutated[target + 1] = gene
        return mutated


__all__ = [
    "MutationOp",
    "RandomValueMutator",
    "BreederValueMutator",
    "SwapOrderMutator",
    "InsertOrderMutator",
]
