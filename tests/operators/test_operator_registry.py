from __future__ import annotations

import pytest

from genevo.foundation.exceptions import ConfigurationError, InvalidOperatorError
from genevo.operators.crossover import MultiPointCrossBreeder
from genevo.operators.mutation import SwapOrderMutator
from genevo.operators.registry import (
    CROSSOVER_OPERATORS,
    Registry,
    operator_registry,
    resolve_operator,
)
from genevo.operators.reinsertion import ElitistReinserter
from genevo.operators.selection import MaximizeSelector, TournamentSelector


def test_registry_register_and_get():
    registry: Registry[int] = Registry("numbers")
    assert registry.register("two", 2) == 2
    registry.register("one", 1)

    assert registry.get("one") == 1
    assert registry.list() == ["one", "two"]
    assert "one" in registry
    assert len(registry) == 2
    with pytest.raises(ValueError, match="already exists"):
        registry.register("one", 11)
    assert registry.get("one") == 1
    with pytest.raises(KeyError):
        registry.get("three")


def test_builtin_operator_names():
    assert CROSSOVER_OPERATORS.list() == ["multi_point", "order_one", "partially_mapped", "uniform"]
    assert operator_registry("selection").list() == ["maximize", "roulette_wheel", "tournament", "universal_sampling"]
    with pytest.raises(ConfigurationError, match="Unknown operator kind"):
        operator_registry("fitness")


def test_resolve_from_tuple():
    selector = resolve_operator("selection", ("maximize", {"selection_ratio": 0.7, "num_individuals_per_parents": 2}))
    assert isinstance(selector, MaximizeSelector)
    assert selector.selection_ratio == 0.7


def test_resolve_from_dict_accepts_type_key():
    breeder = resolve_operator("crossover", {"method": "multi-point", "num_cut_points": 3})
    assert isinstance(breeder, MultiPointCrossBreeder)
    assert breeder.num_cut_points == 3
    selector = resolve_operator(
        "selection",
        {"type": "Tournament", "selection_ratio": 0.5, "num_individuals_per_parents": 2, "tournament_size": 3},
    )
    assert isinstance(selector, TournamentSelector)


def test_resolve_passes_through_operator_objects():
    mutator = SwapOrderMutator(0.1)
    assert resolve_operator("mutation", mutator) is mutator


def test_resolve_elitist_needs_fitness_function(identity):
    reinserter = resolve_operator(
        "reinsertion",
        ("elitist", {"offspring_has_precedence": True, "replace_ratio": 0.5}),
        evaluator=identity,
    )
    assert isinstance(reinserter, ElitistReinserter)
    assert reinserter.evaluator is identity
    with pytest.raises(ConfigurationError, match="fitness function"):
        resolve_operator("reinsertion", ("elitist", {"offspring_has_precedence": True, "replace_ratio": 0.5}))


def test_unknown_operator_name():
    with pytest.raises(InvalidOperatorError) as excinfo:
        resolve_operator("mutation", ("gaussian", {}))
    assert "swap_order" in str(excinfo.value)
    assert excinfo.value.details["operator_name"] == "gaussian"


def test_invalid_parameters_become_configuration_errors():
    with pytest.raises(ConfigurationError, match="Invalid parameters"):
        resolve_operator("crossover", {"method": "multi_point", "cut_points": 3})
    with pytest.raises(ConfigurationError, match="method"):
        resolve_operator("crossover", {"num_cut_points": 3})
