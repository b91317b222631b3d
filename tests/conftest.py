from __future__ import annotations

import numpy as np
import pytest

from genevo.foundation.concurrency import SerialExecutor


class CountOnes:
    """Number of set bits of a bit-string genome."""

    def __init__(self, genome_length: int) -> None:
        self.genome_length = genome_length

    def fitness_of(self, genome) -> int:
        return int(np.count_nonzero(genome))

    def average(self, fitness_values) -> int:
        return sum(fitness_values) // len(fitness_values)

    def highest_possible_fitness(self) -> int:
        return self.genome_length

    def lowest_possible_fitness(self) -> int:
        return 0


class Identity:
    """Fitness of an integer genotype is the integer itself."""

    def fitness_of(self, genome) -> int:
        return int(genome)

    def average(self, fitness_values) -> float:
        return sum(fitness_values) / len(fitness_values)

    def highest_possible_fitness(self) -> int:
        return 10**9

    def lowest_possible_fitness(self) -> int:
        return -(10**9)


@pytest.fixture
def seed() -> bytes:
    return bytes(range(32))


@pytest.fixture
def serial_executor() -> SerialExecutor:
    return SerialExecutor()


@pytest.fixture
def count_ones() -> CountOnes:
    return CountOnes(24)


@pytest.fixture
def identity() -> Identity:
    return Identity()
