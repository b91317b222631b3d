"""
Selection operators.

A selector turns an EvaluatedPopulation into a list of parent groups, each
holding ``num_individuals_per_parents`` genotypes that will be bred together.
How many groups are drawn is a fraction (``selection_ratio``) of the population
size; every selector returns at least one group for a non-empty population.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from genevo.core.evaluation import EvaluatedPopulation
from genevo.core.genetic import as_scalar
from genevo.foundation.random import RNG, WeightedDistribution, random_index, random_probability


class SelectionOp(ABC):
    """Base class for selection strategies."""

    name = "Selection"

    @abstractmethod
    def select(self, evaluated: EvaluatedPopulation, rng: RNG) -> list[list[Any]]:
        """Return the parent groups to breed from."""


class _RatioSelector(SelectionOp):
    def __init__(self, selection_ratio: float, num_individuals_per_parents: int) -> None:
        if not 0.0 < selection_ratio <= 1.0:
            raise ValueError("selection_ratio must be in (0, 1].")
        if num_individuals_per_parents < 1:
            raise ValueError("num_individuals_per_parents must be positive.")
        self.selection_ratio = float(selection_ratio)
        self.num_individuals_per_parents = int(num_individuals_per_parents)

    def _num_groups(self, population_size: int, rounded: bool = True) -> int:
        raw = population_size * self.selection_ratio
        return max(1, math.floor(raw + 0.5) if rounded else math.floor(raw))

    @staticmethod
    def _check(evaluated: EvaluatedPopulation) -> None:
        if len(evaluated) == 0:
            raise ValueError("population is empty.")

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(selection_ratio={self.selection_ratio}, "
            f"num_individuals_per_parents={self.num_individuals_per_parents})"
        )


class MaximizeSelector(_RatioSelector):
    """
    Truncation selection.

    Individuals are ranked from best to worst and parent groups are filled by
    cycling through that ranking, so the best individuals mate most often.
    """

    name = "Maximizing-Selection"

    def select(self, evaluated: EvaluatedPopulation, rng: RNG) -> list[list[Any]]:
        self._check(evaluated)
        ranked = evaluated.ranked_indices()
        num_groups = self._num_groups(len(evaluated), rounded=False)
        per_group = self.num_individuals_per_parents
        individuals = evaluated.individuals
        return [
            [individuals[ranked[(g * per_group + k) % len(ranked)]] for k in range(per_group)]
            for g in range(num_groups)
        ]


def _weights(evaluated: EvaluatedPopulation) -> WeightedDistribution:
    weights = np.array([as_scalar(f) for f in evaluated.fitness_values], dtype=float)
    if np.any(weights < 0.0):
        raise ValueError("fitness proportionate selection requires non-negative fitness values.")
    return WeightedDistribution(weights)


class RouletteWheelSelector(_RatioSelector):
    """Fitness proportionate selection with an independent spin per parent."""

    name = "Roulette-Wheel-Selection"

    def select(self, evaluated: EvaluatedPopulation, rng: RNG) -> list[list[Any]]:
        self._check(evaluated)
        distribution = _weights(evaluated)
        individuals = evaluated.individuals
        parents = []
        for _ in range(self._num_groups(len(evaluated))):
            group = []
            for _ in range(self.num_individuals_per_parents):
                pointer = random_probability(rng) * distribution.sum
                group.append(individuals[distribution.select(pointer)])
            parents.append(group)
        return parents


class UniversalSamplingSelector(_RatioSelector):
    """
    Stochastic universal sampling.

    One random spin places the first pointer; every further pointer sits a fixed
    distance after the previous one, wrapping around the total weight. This
    gives fitness proportionate selection with minimal spread.
    """

    name = "Stochastic-Universal-Sampling-Selection"

    def select(self, evaluated: EvaluatedPopulation, rng: RNG) -> list[list[Any]]:
        self._check(evaluated)
        distribution = _weights(evaluated)
        total = distribution.sum
        num_groups = self._num_groups(len(evaluated))
        distance = total / (num_groups * self.num_individuals_per_parents)
        pointer = random_probability(rng) * total
        individuals = evaluated.individuals
        parents = []
        for _ in range(num_groups):
            group = []
            for _ in range(self.num_individuals_per_parents):
                group.append(individuals[distribution.select(pointer)])
                pointer += distance
                if total > 0.0 and pointer > total:
                    pointer -= total
            parents.append(group)
        return parents


class TournamentSelector(_RatioSelector):
    """
    Tournament selection.

    Each tournament draws ``tournament_size`` participants from the mating pool
    and ranks them. The best wins with ``probability``; otherwise the next one
    gets the same chance, and so on down to the worst participant, which wins
    if nobody else did. With ``remove_selected_individuals`` a winner leaves the
    pool until every individual has won once.
    """

    name = "Tournament-Selection"

    def __init__(
        self,
        selection_ratio: float,
        num_individuals_per_parents: int,
        tournament_size: int,
        probability: float = 1.0,
        remove_selected_individuals: bool = False,
    ) -> None:
        super().__init__(selection_ratio, num_individuals_per_parents)
        if tournament_size < 1:
            raise ValueError("tournament_size must be positive.")
        if not 0.0 < probability <= 1.0:
            raise ValueError("probability must be in (0, 1].")
        self.tournament_size = int(tournament_size)
        self.probability = float(probability)
        self.remove_selected_individuals = bool(remove_selected_individuals)

    def select(self, evaluated: EvaluatedPopulation, rng: RNG) -> list[list[Any]]:
        self._check(evaluated)
        fitness = evaluated.fitness_values
        individuals = evaluated.individuals
        per_group = self.num_individuals_per_parents
        target = self._num_groups(len(evaluated)) * per_group

        pool = list(range(len(evaluated)))
        winners: list[int] = []
        while len(winners) < target:
            participants = [pool[random_index(rng, len(pool))] for _ in range(self.tournament_size)]
            participants.sort(key=fitness.__getitem__, reverse=True)
            winner = participants[-1]
            for candidate in participants[:-1]:
                if random_probability(rng) < self.probability:
                    winner = candidate
                    break
            winners.append(winner)
            if self.remove_selected_individuals:
                pool.remove(winner)
                if not pool:
                    pool = list(range(len(evaluated)))

        num_groups = len(winners) // per_group
        return [[individuals[i] for i in winners[g * per_group : (g + 1) * per_group]] for g in range(num_groups)]


__all__ = [
    "SelectionOp",
    "MaximizeSelector",
    "RouletteWheelSelector",
    "UniversalSamplingSelector",
    "TournamentSelector",
]
