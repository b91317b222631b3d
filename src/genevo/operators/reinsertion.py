"""
Reinsertion operators.

A reinserter builds the next generation from the offspring and the previous
evaluated population. Whatever the offspring count, the result always has
exactly as many individuals as the previous population. The offspring list
passed in is read, never modified.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from genevo.core.evaluation import EvaluatedPopulation
from genevo.core.genetic import FitnessFunction
from genevo.foundation.random import RNG, random_index


class ReinsertionOp(ABC):
    """Base class for reinsertion strategies."""

    name = "Reinsertion"

    def __init__(self, replace_ratio: float) -> None:
        if not 0.0 < replace_ratio <= 1.0:
            raise ValueError("replace_ratio must be in (0, 1].")
        self.replace_ratio = float(replace_ratio)

    def num_offspring_to_insert(self, population_size: int) -> int:
        return min(population_size, math.floor(population_size * self.replace_ratio + 0.5))

    @abstractmethod
    def combine(self, offspring: Sequence[Any], evaluated: EvaluatedPopulation, rng: RNG) -> list[Any]:
        """Return the individuals of the next generation."""


class UniformReinserter(ReinsertionOp):
    """
    Random replacement.

    Up to ``round(size * replace_ratio)`` offspring are picked uniformly at
    random (all of them if there are fewer); the remaining slots are filled
    with randomly drawn individuals of the previous population.
    """

    name = "Uniform-Reinserter"

    def combine(self, offspring: Sequence[Any], evaluated: EvaluatedPopulation, rng: RNG) -> list[Any]:
        old_individuals = evaluated.individuals
        population_size = len(old_individuals)
        num_offspring = self.num_offspring_to_insert(population_size)

        if num_offspring < len(offspring):
            chosen = rng.choice(len(offspring), size=num_offspring, replace=False)
            new_population = [offspring[int(i)] for i in chosen]
        else:
            new_population = list(offspring)

        while len(new_population) < population_size:
            new_population.append(old_individuals[random_index(rng, population_size)])
        return new_population


class ElitistReinserter(ReinsertionOp):
    """
    Fitness-based replacement.

    With ``offspring_has_precedence`` the best ``round(size * replace_ratio)``
    offspring enter first and the best individuals of the previous population
    fill the remaining slots. Without it, offspring and previous population
    compete purely on fitness and the best ``size`` individuals of both survive;
    on equal fitness the previous individual is kept.
    """

    name = "Elitist-Reinserter"

    def __init__(self, evaluator: FitnessFunction, offspring_has_precedence: bool, replace_ratio: float) -> None:
        super().__init__(replace_ratio)
        self.evaluator = evaluator
        self.offspring_has_precedence = bool(offspring_has_precedence)

    def _ranked_offspring(self, offspring: Sequence[Any]) -> list[tuple[Any, Any]]:
        scored = [(child, self.evaluator.fitness_of(child)) for child in offspring]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored

    def combine(self, offspring: Sequence[Any], evaluated: EvaluatedPopulation, rng: RNG) -> list[Any]:
        old_individuals = evaluated.individuals
        old_fitness = evaluated.fitness_values
        old_ranked = evaluated.ranked_indices()
        population_size = len(old_individuals)

        if self.offspring_has_precedence:
            num_offspring = self.num_offspring_to_insert(population_size)
            if num_offspring < len(offspring):
                new_population = [child for child, _ in self._ranked_offspring(offspring)[:num_offspring]]
            else:
                new_population = list(offspring)
            num_old = population_size - len(new_population)
            new_population.extend(old_individuals[i] for i in old_ranked[:num_old])
            return new_population

        ranked_offspring = self._ranked_offspring(offspring)
        new_population = []
        next_child = next_old = 0
        while len(new_population) < population_size:
            old_index = old_ranked[next_old]
            if next_child < len(ranked_offspring) and ranked_offspring[next_child][1] > old_fitness[old_index]:
                new_population.append(ranked_offspring[next_child][0])
                next_child += 1
            else:
                new_population.append(old_individuals[old_index])
                next_old += 1
        return new_population


__all__ = ["ReinsertionOp", "UniformReinserter", "ElitistReinserter"]
