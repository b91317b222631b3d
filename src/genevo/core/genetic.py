"""
Contracts between the engine and user code.

Genotypes are opaque to the engine: any value works as long as the operators in
use understand it. The built-in genome builders and operators work on 1-D NumPy
arrays. Fitness values only need a total order (higher is better) plus the
arithmetic the user's ``average`` needs; plain ints and floats are the common case.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol, TypeAlias, Union, runtime_checkable

import numpy as np

Genotype: TypeAlias = Any
Fitness: TypeAlias = Any
Parents: TypeAlias = list
Children: TypeAlias = list
Offspring: TypeAlias = list


@runtime_checkable
class FitnessFunction(Protocol):
    """
    Scores genotypes.

    Implementations must be safe to call from several threads at once on
    different genotypes.
    """

    def fitness_of(self, genome: Any) -> Any: ...

    def average(self, fitness_values: Sequence[Any]) -> Any: ...

    def highest_possible_fitness(self) -> Any: ...

    def lowest_possible_fitness(self) -> Any: ...


@runtime_checkable
class GenomeBuilder(Protocol):
    """Creates one new genotype; called concurrently with distinct generators."""

    def build_genome(self, index: int, rng: np.random.Generator) -> Any: ...


GenomeFactory: TypeAlias = Union[GenomeBuilder, Callable[[int, np.random.Generator], Any]]


def as_scalar(value: Any) -> float:
    """Float view of a fitness value, honouring an ``as_scalar()`` method when the type has one."""
    to_scalar = getattr(value, "as_scalar", None)
    if callable(to_scalar):
        return float(to_scalar())
    return float(value)


def abs_diff(a: Any, b: Any) -> Any:
    return a - b if a >= b else b - a


def genomes_equal(a: Any, b: Any) -> bool:
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return bool(np.array_equal(a, b))
    return bool(a == b)


__all__ = [
    "Genotype",
    "Fitness",
    "Parents",
    "Children",
    "Offspring",
    "FitnessFunction",
    "GenomeBuilder",
    "GenomeFactory",
    "as_scalar",
    "abs_diff",
    "genomes_equal",
]
