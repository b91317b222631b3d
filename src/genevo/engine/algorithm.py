"""
The genetic algorithm: one call to ``next`` processes one generation.

A generation runs evaluate -> best solution -> select -> breed -> reinsert. The
resulting population replaces the held one; the time spent in those stages is
added to a running total that survives until ``reset``.

Example:
    algorithm = (
        genetic_algorithm()
        .with_evaluation(evaluator)
        .with_selection(MaximizeSelector(0.7, 2))
        .with_crossover(MultiPointCrossBreeder(3))
        .with_mutation(RandomValueMutator(0.01, 0, 2))
        .with_reinsertion(ElitistReinserter(evaluator, True, 0.7))
        .with_initial_population(population)
        .build()
    )
    state = algorithm.next(1, from_seed(seed))
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from genevo.core.evaluation import EvaluatedPopulation, evaluate_fitness
from genevo.core.genetic import FitnessFunction, genomes_equal
from genevo.core.population import Population
from genevo.foundation.concurrency import TaskExecutor, concat, default_executor, fork_join, resolve_executor
from genevo.foundation.config import (
    DEFAULT_BREEDING_THRESHOLD,
    DEFAULT_EVALUATION_THRESHOLD,
    DEFAULT_MIN_POPULATION_SIZE,
    EngineConfig,
    EngineSettings,
)
from genevo.foundation.exceptions import EmptyPopulationError, MissingConfigError, PopulationTooSmallError
from genevo.foundation.random import RNG
from genevo.foundation.timing import timed, utc_now
from genevo.operators.crossover import CrossoverOp
from genevo.operators.mutation import MutationOp
from genevo.operators.registry import resolve_operator
from genevo.operators.reinsertion import ReinsertionOp
from genevo.operators.selection import SelectionOp

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class EvaluatedIndividual:
    genome: Any
    fitness: Any

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EvaluatedIndividual):
            return NotImplemented
        return genomes_equal(self.genome, other.genome) and bool(self.fitness == other.fitness)

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True)
class BestSolution:
    """Fittest individual of one generation."""

    found_at: datetime
    generation: int
    solution: EvaluatedIndividual

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True)
class AlgorithmState:
    """Outcome of one generation; ``processing_time`` is cumulative since the last reset."""

    evaluated_population: EvaluatedPopulation
    best_solution: BestSolution
    processing_time: float


class GeneticAlgorithm:
    def __init__(
        self,
        *,
        evaluation: FitnessFunction,
        selection: SelectionOp,
        crossover: CrossoverOp,
        mutation: MutationOp,
        reinsertion: ReinsertionOp,
        initial_population: Population | Sequence[Any],
        min_population_size: int = DEFAULT_MIN_POPULATION_SIZE,
        evaluation_threshold: int = DEFAULT_EVALUATION_THRESHOLD,
        breeding_threshold: int = DEFAULT_BREEDING_THRESHOLD,
        executor: TaskExecutor | None = None,
    ) -> None:
        if min_population_size < 1:
            raise ValueError("min_population_size must be positive.")
        self._evaluator = evaluation
        self._selector = selection
        self._breeder = crossover
        self._mutator = mutation
        self._reinserter = reinsertion
        self._initial_population = (
            initial_population if isinstance(initial_population, Population) else Population(initial_population)
        )
        self._population = self._initial_population
        self.min_population_size = int(min_population_size)
        self.evaluation_threshold = int(evaluation_threshold)
        self.breeding_threshold = int(breeding_threshold)
        self._executor = executor
        self._processing_time = 0.0

    def evaluator(self) -> FitnessFunction:
        return self._evaluator

    def selector(self) -> SelectionOp:
        return self._selector

    def breeder(self) -> CrossoverOp:
        return self._breeder

    def mutator(self) -> MutationOp:
        return self._mutator

    def reinserter(self) -> ReinsertionOp:
        return self._reinserter

    def population(self) -> Population:
        return self._population

    def initial_population(self) -> Population:
        return self._initial_population

    @property
    def processing_time(self) -> float:
        return self._processing_time

    @property
    def executor(self) -> TaskExecutor:
        return self._executor or default_executor()

    def next(self, iteration: int, rng: RNG) -> AlgorithmState:
        """
        Process generation ``iteration``.

        Raises EmptyPopulationError or PopulationTooSmallError before touching
        any state when the held population cannot be processed.
        """
        population = self._population
        if population.size() == 0:
            logger.warning("Generation %d has an empty population", iteration)
            raise EmptyPopulationError(iteration, self.min_population_size)
        if population.size() < self.min_population_size:
            logger.warning(
                "Generation %d has %d individuals, minimum is %d",
                iteration,
                population.size(),
                self.min_population_size,
            )
            raise PopulationTooSmallError(iteration, population.size(), self.min_population_size)

        evaluation = timed(
            evaluate_fitness,
            population,
            self._evaluator,
            threshold=self.evaluation_threshold,
            executor=self.executor,
        )
        evaluated = evaluation.result
        best = timed(self._determine_best_solution, iteration, evaluated)
        selection = timed(self._selector.select, evaluated, rng)
        breeding = timed(self._breed, selection.result, rng)
        reinsertion = timed(self._reinserter.combine, breeding.result, evaluated, rng)

        self._processing_time += evaluation.time + best.time + selection.time + breeding.time + reinsertion.time
        self._population = Population(reinsertion.result)
        logger.debug(
            "Generation %d: %d parent groups, %d offspring, best fitness %s",
            iteration,
            len(selection.result),
            len(breeding.result),
            evaluated.highest_fitness,
        )
        return AlgorithmState(
            evaluated_population=evaluated,
            best_solution=best.result,
            processing_time=self._processing_time,
        )

    def reset(self) -> None:
        self._population = self._initial_population
        self._processing_time = 0.0

    @staticmethod
    def _determine_best_solution(generation: int, evaluated: EvaluatedPopulation) -> BestSolution:
        index = evaluated.index_of_highest()
        return BestSolution(
            found_at=utc_now(),
            generation=generation,
            solution=EvaluatedIndividual(evaluated.individuals[index], evaluated.fitness_values[index]),
        )

    def _breed(self, parents: Sequence[Sequence[Any]], rng: RNG) -> list[Any]:
        crossover = self._breeder.crossover
        mutate = self._mutator.mutate

        def _leaf(groups: Sequence[Sequence[Any]], leaf_rng: RNG | None) -> list[Any]:
            offspring: list[Any] = []
            for group in groups:
                offspring.extend(mutate(child, leaf_rng) for child in crossover(group, leaf_rng))
            return offspring

        return fork_join(
            list(parents),
            _leaf,
            concat,
            threshold=self.breeding_threshold,
            executor=self.executor,
            rng=rng,
        )

    def __repr__(self) -> str:
        return (
            f"GeneticAlgorithm(selection={self._selector.name}, crossover={self._breeder.name}, "
            f"mutation={self._mutator.name}, reinsertion={self._reinserter.name}, "
            f"population={self._population.size()})"
        )


class GeneticAlgorithmBuilder:
    """
    Fluent builder for GeneticAlgorithm.

    The fitness function, the four operators and the initial population are
    required; ``build`` raises MissingConfigError naming the first one missing.
    """

    _REQUIRED = ("evaluation", "selection", "crossover", "mutation", "reinsertion", "initial_population")

    def __init__(self) -> None:
        self._cfg: dict[str, Any] = {}
        self._settings: EngineSettings | None = None
        self._executor: TaskExecutor | None = None

    @classmethod
    def from_dict(
        cls,
        config: Mapping[str, Any],
        *,
        evaluation: FitnessFunction,
        initial_population: Population | Sequence[Any],
    ) -> GeneticAlgorithm:
        """
        Build an algorithm from operator specs.

        Keys ``selection``, ``crossover``, ``mutation`` and ``reinsertion`` hold
        operator specs understood by ``resolve_operator``; an optional ``engine``
        section holds EngineSettings values and ``min_population_size`` overrides
        the engine's.
        """
        builder = cls().with_evaluation(evaluation).with_initial_population(initial_population)
        if "engine" in config:
            builder.with_settings(EngineConfig.from_dict(config["engine"]))
        for kind in ("selection", "crossover", "mutation", "reinsertion"):
            if kind in config:
                builder._cfg[kind] = resolve_operator(kind, config[kind], evaluator=evaluation)
        if "min_population_size" in config:
            builder.with_min_population_size(config["min_population_size"])
        return builder.build()

    def with_evaluation(self, evaluation: FitnessFunction) -> "GeneticAlgorithmBuilder":
        self._cfg["evaluation"] = evaluation
        return self

    def with_selection(self, selection: SelectionOp) -> "GeneticAlgorithmBuilder":
        self._cfg["selection"] = selection
        return self

    def with_crossover(self, crossover: CrossoverOp) -> "GeneticAlgorithmBuilder":
        self._cfg["crossover"] = crossover
        return self

    def with_mutation(self, mutation: MutationOp) -> "GeneticAlgorithmBuilder":
        self._cfg["mutation"] = mutation
        return self

    def with_reinsertion(self, reinsertion: ReinsertionOp) -> "GeneticAlgorithmBuilder":
        self._cfg["reinsertion"] = reinsertion
        return self

    def with_initial_population(self, population: Population | Sequence[Any]) -> "GeneticAlgorithmBuilder":
        self._cfg["initial_population"] = population
        return self

    def with_min_population_size(self, size: int) -> "GeneticAlgorithmBuilder":
        self._cfg["min_population_size"] = int(size)
        return self

    def with_settings(self, settings: EngineSettings) -> "GeneticAlgorithmBuilder":
        self._settings = settings
        return self

    def with_executor(self, executor: TaskExecutor) -> "GeneticAlgorithmBuilder":
        self._executor = executor
        return self

    def build(self) -> GeneticAlgorithm:
        for field in self._REQUIRED:
            if field not in self._cfg:
                raise MissingConfigError(field, "GeneticAlgorithmBuilder")
        kwargs = dict(self._cfg)
        executor = self._executor
        if self._settings is not None:
            kwargs.setdefault("min_population_size", self._settings.min_population_size)
            kwargs["evaluation_threshold"] = self._settings.evaluation_threshold
            kwargs["breeding_threshold"] = self._settings.breeding_threshold
            if executor is None:
                executor = resolve_executor(self._settings.executor, max_workers=self._settings.max_workers)
        return GeneticAlgorithm(executor=executor, **kwargs)


def genetic_algorithm() -> GeneticAlgorithmBuilder:
    return GeneticAlgorithmBuilder()


__all__ = [
    "EvaluatedIndividual",
    "BestSolution",
    "AlgorithmState",
    "GeneticAlgorithm",
    "GeneticAlgorithmBuilder",
    "genetic_algorithm",
]
