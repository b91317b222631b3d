from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, NamedTuple

from genevo.foundation.concurrency import TaskExecutor, default_executor, fork_join
from genevo.foundation.config import DEFAULT_EVALUATION_THRESHOLD

from .genetic import FitnessFunction, genomes_equal
from .population import Population

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class EvaluatedPopulation:
    """
    One generation's genotypes paired with their fitness values.

    ``fitness_values[i]`` belongs to ``individuals[i]``. ``average_fitness`` is
    whatever the fitness function's own ``average`` returned, not necessarily an
    arithmetic mean.
    """

    individuals: tuple[Any, ...]
    fitness_values: tuple[Any, ...]
    highest_fitness: Any
    lowest_fitness: Any
    average_fitness: Any

    def __post_init__(self) -> None:
        if len(self.individuals) != len(self.fitness_values):
            raise ValueError(
                f"got {len(self.fitness_values)} fitness values for {len(self.individuals)} individuals."
            )

    def __len__(self) -> int:
        return len(self.individuals)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EvaluatedPopulation):
            return NotImplemented
        return (
            len(self) == len(other)
            and all(genomes_equal(a, b) for a, b in zip(self.individuals, other.individuals))
            and bool(self.fitness_values == other.fitness_values)
            and bool(self.highest_fitness == other.highest_fitness)
            and bool(self.lowest_fitness == other.lowest_fitness)
            and bool(self.average_fitness == other.average_fitness)
        )

    __hash__ = None  # type: ignore[assignment]

    def population(self) -> Population:
        return Population(self.individuals)

    def index_of_highest(self) -> int:
        """First index, in population order, whose fitness equals the highest fitness."""
        for index, fitness in enumerate(self.fitness_values):
            if fitness == self.highest_fitness:
                return index
        raise ValueError("no individual carries the highest fitness value.")

    def ranked_indices(self) -> list[int]:
        """Indices ordered from best to worst fitness; ties keep population order."""
        return sorted(range(len(self.fitness_values)), key=self.fitness_values.__getitem__, reverse=True)


class _Scores(NamedTuple):
    values: list[Any]
    highest: Any
    lowest: Any


def _merge_scores(left: _Scores, right: _Scores) -> _Scores:
    highest = left.highest if left.highest >= right.highest else right.highest
    lowest = left.lowest if left.lowest <= right.lowest else right.lowest
    return _Scores(left.values + right.values, highest, lowest)


def evaluate_fitness(
    population: Population | Sequence[Any],
    evaluator: FitnessFunction,
    *,
    threshold: int = DEFAULT_EVALUATION_THRESHOLD,
    executor: TaskExecutor | None = None,
) -> EvaluatedPopulation:
    """
    Score every genotype, splitting the work across the executor for large populations.

    The running maximum starts at the lowest possible fitness and the running
    minimum at the highest possible fitness; halves are merged preferring the
    left half on ties.
    """
    individuals = tuple(population)
    if not individuals:
        raise ValueError("cannot evaluate an empty population.")

    def _leaf(genomes: Sequence[Any], _rng: Any) -> _Scores:
        highest = evaluator.lowest_possible_fitness()
        lowest = evaluator.highest_possible_fitness()
        values = []
        for genome in genomes:
            fitness = evaluator.fitness_of(genome)
            values.append(fitness)
            if fitness > highest:
                highest = fitness
            if fitness < lowest:
                lowest = fitness
        return _Scores(values, highest, lowest)

    scores = fork_join(
        individuals,
        _leaf,
        _merge_scores,
        threshold=threshold,
        executor=executor or default_executor(),
    )
    average = evaluator.average(scores.values)
    logger.debug(
        "Evaluated %d individuals: highest=%s lowest=%s average=%s",
        len(individuals),
        scores.highest,
        scores.lowest,
        average,
    )
    return EvaluatedPopulation(
        individuals=individuals,
        fitness_values=tuple(scores.values),
        highest_fitness=scores.highest,
        lowest_fitness=scores.lowest,
        average_fitness=average,
    )


__all__ = ["EvaluatedPopulation", "evaluate_fitness"]
