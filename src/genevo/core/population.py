"""
Populations and the builder that creates random initial populations.

Example:
    population = (
        build_population()
        .with_genome_builder(BinaryEncodedGenomeBuilder(24))
        .of_size(200)
        .using_seed(seed)
    )
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any, overload

import numpy as np

from genevo.foundation.concurrency import TaskExecutor, concat, default_executor, fork_join, resolve_executor
from genevo.foundation.config import DEFAULT_POPULATION_THRESHOLD, EngineSettings
from genevo.foundation.exceptions import MissingConfigError
from genevo.foundation.random import RNG, Seed, from_seed, seed_random

from .genetic import GenomeFactory, genomes_equal

logger = logging.getLogger(__name__)


class Population(Sequence):
    """Ordered, read-only collection of genotypes."""

    __slots__ = ("_individuals",)

    def __init__(self, individuals: Iterable[Any] = ()) -> None:
        self._individuals: tuple[Any, ...] = tuple(individuals)

    def size(self) -> int:
        return len(self._individuals)

    def individuals(self) -> tuple[Any, ...]:
        return self._individuals

    def __len__(self) -> int:
        return len(self._individuals)

    @overload
    def __getitem__(self, index: int) -> Any: ...

    @overload
    def __getitem__(self, index: slice) -> "Population": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Population(self._individuals[index])
        return self._individuals[index]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._individuals)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Population):
            return NotImplemented
        if len(self) != len(other):
            return False
        return all(genomes_equal(a, b) for a, b in zip(self._individuals, other._individuals))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Population(size={len(self)})"


class BinaryEncodedGenomeBuilder:
    """Bit-string genomes as boolean arrays with each bit drawn uniformly."""

    def __init__(self, genome_length: int) -> None:
        if genome_length < 0:
            raise ValueError("genome_length must be non-negative.")
        self.genome_length = int(genome_length)

    def build_genome(self, index: int, rng: RNG) -> np.ndarray:
        return rng.integers(0, 2, size=self.genome_length).astype(bool)


class ValueEncodedGenomeBuilder:
    """
    Genomes of numbers drawn uniformly from ``[min_value, max_value)``.

    Integer bounds give integer genomes, anything else gives floats.
    """

    def __init__(self, genome_length: int, min_value: float, max_value: float) -> None:
        if genome_length < 0:
            raise ValueError("genome_length must be non-negative.")
        if not min_value < max_value:
            raise ValueError("min_value must be smaller than max_value.")
        self.genome_length = int(genome_length)
        self.min_value = min_value
        self.max_value = max_value
        self._integral = isinstance(min_value, (int, np.integer)) and isinstance(max_value, (int, np.integer))

    def build_genome(self, index: int, rng: RNG) -> np.ndarray:
        if self._integral:
            return rng.integers(self.min_value, self.max_value, size=self.genome_length)
        return rng.uniform(self.min_value, self.max_value, size=self.genome_length)


class PermutationGenomeBuilder:
    """Random orderings of a fixed set of alleles."""

    def __init__(self, alleles: Sequence[Any] | np.ndarray) -> None:
        self.alleles = np.asarray(alleles)
        if self.alleles.ndim != 1:
            raise ValueError("alleles must be a 1-D sequence.")

    def build_genome(self, index: int, rng: RNG) -> np.ndarray:
        return rng.permutation(self.alleles)


def _as_factory(genome_builder: GenomeFactory) -> Callable[[int, RNG], Any]:
    build = getattr(genome_builder, "build_genome", None)
    if callable(build):
        return build
    if callable(genome_builder):
        return genome_builder
    raise TypeError("genome builder must define build_genome(index, rng) or be a callable (index, rng).")


class PopulationBuilder:
    """Fluent builder for random populations; see ``build_population``."""

    def __init__(self) -> None:
        self._genome_builder: GenomeFactory | None = None
        self._size: int | None = None
        self._threshold = DEFAULT_POPULATION_THRESHOLD
        self._executor: TaskExecutor | None = None

    def with_genome_builder(self, genome_builder: GenomeFactory) -> "PopulationBuilder":
        _as_factory(genome_builder)
        self._genome_builder = genome_builder
        return self

    def of_size(self, size: int) -> "PopulationBuilder":
        if size < 0:
            raise ValueError("population size must be non-negative.")
        self._size = int(size)
        return self

    def with_threshold(self, threshold: int) -> "PopulationBuilder":
        if threshold < 2:
            raise ValueError("threshold must be at least 2.")
        self._threshold = int(threshold)
        return self

    def with_executor(self, executor: TaskExecutor) -> "PopulationBuilder":
        self._executor = executor
        return self

    def with_settings(self, settings: EngineSettings) -> "PopulationBuilder":
        """Take the threshold from ``settings``, and the executor unless one was given explicitly."""
        self._threshold = settings.population_threshold
        if self._executor is None:
            self._executor = resolve_executor(settings.executor, max_workers=settings.max_workers)
        return self

    def uniform_at_random(self) -> Population:
        return self.using_seed(seed_random())

    def using_seed(self, seed: Seed) -> Population:
        return self.using_rng(from_seed(seed))

    def using_rng(self, rng: RNG) -> Population:
        if self._genome_builder is None:
            raise MissingConfigError("genome_builder", "PopulationBuilder")
        if self._size is None:
            raise MissingConfigError("size", "PopulationBuilder", method="of_size")
        factory = _as_factory(self._genome_builder)

        def _leaf(indices: Sequence[int], leaf_rng: RNG | None) -> list[Any]:
            return [factory(index, leaf_rng) for index in indices]

        genomes = fork_join(
            range(self._size),
            _leaf,
            concat,
            threshold=self._threshold,
            executor=self._executor or default_executor(),
            rng=rng,
        )
        logger.debug("Built population of %d individuals", len(genomes))
        return Population(genomes)


def build_population() -> PopulationBuilder:
    return PopulationBuilder()


__all__ = [
    "Population",
    "PopulationBuilder",
    "BinaryEncodedGenomeBuilder",
    "ValueEncodedGenomeBuilder",
    "PermutationGenomeBuilder",
    "build_population",
]
