"""Deterministic regression tests for one-generation processing."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from genevo.core.population import BinaryEncodedGenomeBuilder, Population, build_population
from genevo.engine.algorithm import EvaluatedIndividual, GeneticAlgorithmBuilder, genetic_algorithm
from genevo.foundation.concurrency import SerialExecutor
from genevo.foundation.config import EngineConfig
from genevo.foundation.exceptions import EmptyPopulationError, MissingConfigError, PopulationTooSmallError
from genevo.foundation.random import from_seed
from genevo.operators.crossover import MultiPointCrossBreeder
from genevo.operators.mutation import RandomValueMutator
from genevo.operators.reinsertion import ElitistReinserter
from genevo.operators.selection import MaximizeSelector


@pytest.fixture
def population(seed, serial_executor):
    return (
        build_population()
        .with_genome_builder(BinaryEncodedGenomeBuilder(24))
        .of_size(200)
        .with_executor(serial_executor)
        .using_seed(seed)
    )


def _builder(population, evaluator, executor):
    return (
        genetic_algorithm()
        .with_evaluation(evaluator)
        .with_selection(MaximizeSelector(0.5, 2))
        .with_crossover(MultiPointCrossBreeder(2))
        .with_mutation(RandomValueMutator(0.01))
        .with_reinsertion(ElitistReinserter(evaluator, True, 0.7))
        .with_initial_population(population)
        .with_executor(executor)
    )


def test_one_generation_finds_best_of_initial_population(population, count_ones, serial_executor, seed):
    algorithm = _builder(population, count_ones, serial_executor).build()
    state = algorithm.next(1, from_seed(seed))

    best_count = max(int(np.count_nonzero(genome)) for genome in population)
    assert state.best_solution.solution.fitness == best_count
    assert state.best_solution.generation == 1
    assert int(np.count_nonzero(state.best_solution.solution.genome)) == best_count
    assert state.evaluated_population.population() == population
    assert state.evaluated_population.highest_fitness == best_count
    assert algorithm.population().size() == 200
    assert algorithm.population() != population
    assert state.processing_time == algorithm.processing_time
    assert state.processing_time > 0.0


def test_elitist_best_fitness_never_drops(population, count_ones, serial_executor, seed):
    algorithm = _builder(population, count_ones, serial_executor).build()
    rng = from_seed(seed)
    best = [algorithm.next(generation, rng).best_solution.solution.fitness for generation in range(1, 11)]
    assert best == sorted(best)
    assert algorithm.population().size() == 200


def test_generation_is_reproducible_across_executors(population, count_ones, seed):
    def run(executor):
        algorithm = _builder(population, count_ones, executor).build()
        algorithm.evaluation_threshold = 8
        algorithm.breeding_threshold = 8
        algorithm.next(1, from_seed(seed))
        algorithm.next(2, from_seed(bytes(reversed(seed))))
        return algorithm.population()

    serial = run(SerialExecutor())
    with ThreadPoolExecutor(max_workers=4) as pool:
        threaded = run(pool)
    assert serial == threaded


def test_processing_time_accumulates_and_resets(population, count_ones, serial_executor, seed):
    algorithm = _builder(population, count_ones, serial_executor).build()
    first = algorithm.next(1, from_seed(seed)).processing_time
    second = algorithm.next(2, from_seed(seed)).processing_time
    assert second > first

    algorithm.reset()
    assert algorithm.processing_time == 0.0
    assert algorithm.population() is algorithm.initial_population()
    assert algorithm.population() == population


def test_empty_population_is_rejected(count_ones, serial_executor, seed):
    algorithm = _builder(Population(), count_ones, serial_executor).build()
    with pytest.raises(EmptyPopulationError) as excinfo:
        algorithm.next(4, from_seed(seed))
    assert excinfo.value.details == {"iteration": 4, "min_size": 6}
    assert algorithm.population().size() == 0
    assert algorithm.processing_time == 0.0


def test_too_small_population_is_rejected(population, count_ones, serial_executor, seed):
    small = population[:5]
    algorithm = _builder(small, count_ones, serial_executor).build()
    with pytest.raises(PopulationTooSmallError) as excinfo:
        algorithm.next(1, from_seed(seed))
    assert excinfo.value.details["size"] == 5
    assert algorithm.population() is algorithm.initial_population()

    algorithm.min_population_size = 5
    assert algorithm.next(1, from_seed(seed)).best_solution.generation == 1


def test_builder_reports_missing_component(population, count_ones):
    with pytest.raises(MissingConfigError) as excinfo:
        genetic_algorithm().with_evaluation(count_ones).with_initial_population(population).build()
    assert excinfo.value.details == {"field": "selection"}
    assert "with_selection" in str(excinfo.value)


def test_builder_applies_engine_settings(population, count_ones):
    settings = EngineConfig().evaluation_threshold(10).breeding_threshold(12).min_population_size(3).executor("serial").fixed()
    algorithm = (
        genetic_algorithm()
        .with_evaluation(count_ones)
        .with_selection(MaximizeSelector(0.5, 2))
        .with_crossover(MultiPointCrossBreeder(2))
        .with_mutation(RandomValueMutator(0.01))
        .with_reinsertion(ElitistReinserter(count_ones, True, 0.7))
        .with_initial_population(list(population))
        .with_settings(settings)
        .build()
    )
    assert algorithm.evaluation_threshold == 10
    assert algorithm.breeding_threshold == 12
    assert algorithm.min_population_size == 3
    assert isinstance(algorithm.executor, SerialExecutor)
    assert isinstance(algorithm.initial_population(), Population)


def test_explicit_min_population_size_wins_over_settings(population, count_ones, serial_executor):
    algorithm = (
        _builder(population, count_ones, serial_executor)
        .with_min_population_size(2)
        .with_settings(EngineConfig().min_population_size(10).fixed())
        .build()
    )
    assert algorithm.min_population_size == 2
    assert algorithm.executor is serial_executor


def test_from_dict(population, count_ones, seed):
    config = {
        "engine": {"executor": "serial", "evaluation_threshold": 20},
        "selection": {"method": "tournament", "selection_ratio": 0.5, "num_individuals_per_parents": 2, "tournament_size": 3},
        "crossover": ("uniform", {}),
        "mutation": {"method": "random_value", "mutation_rate": 0.02},
        "reinsertion": {"method": "elitist", "offspring_has_precedence": False, "replace_ratio": 0.5},
        "min_population_size": 10,
    }
    algorithm = GeneticAlgorithmBuilder.from_dict(config, evaluation=count_ones, initial_population=population)
    assert algorithm.selector().name == "Tournament-Selection"
    assert algorithm.breeder().name == "Uniform-Cross-Breeder"
    assert algorithm.mutator().mutation_rate == 0.02
    assert algorithm.reinserter().evaluator is count_ones
    assert algorithm.min_population_size == 10
    assert algorithm.evaluation_threshold == 20

    state = algorithm.next(1, from_seed(seed))
    assert algorithm.population().size() == 200
    assert state.best_solution.solution.fitness == state.evaluated_population.highest_fitness


def test_from_dict_requires_every_operator(population, count_ones):
    with pytest.raises(MissingConfigError, match="crossover"):
        GeneticAlgorithmBuilder.from_dict(
            {"selection": ("maximize", {"selection_ratio": 0.5, "num_individuals_per_parents": 2})},
            evaluation=count_ones,
            initial_population=population,
        )


def test_best_solutions_compare_by_value(population, count_ones, serial_executor, seed):
    first = _builder(population, count_ones, serial_executor).build().next(1, from_seed(seed))
    second = _builder(population, count_ones, serial_executor).build().next(1, from_seed(seed))
    assert first.best_solution.solution == second.best_solution.solution
    assert first.evaluated_population == second.evaluated_population
    other = EvaluatedIndividual(~first.best_solution.solution.genome, first.best_solution.solution.fitness)
    assert first.best_solution.solution != other
    with pytest.raises(TypeError):
        hash(first.best_solution)
