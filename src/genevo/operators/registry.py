"""
Named operator factories, so operator choices can come from dicts or YAML files.

Examples:
    resolve_operator("selection", ("maximize", {"selection_ratio": 0.7, "num_individuals_per_parents": 2}))
    resolve_operator("crossover", {"method": "multi_point", "num_cut_points": 3})
    resolve_operator("mutation", "swap_order")  # only works when all params have defaults
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Generic, TypeVar

from genevo.foundation.exceptions import ConfigurationError, InvalidOperatorError

from .crossover import MultiPointCrossBreeder, OrderOneCrossover, PartiallyMappedCrossover, UniformCrossBreeder
from .mutation import BreederValueMutator, InsertOrderMutator, RandomValueMutator, SwapOrderMutator
from .reinsertion import ElitistReinserter, UniformReinserter
from .selection import MaximizeSelector, RouletteWheelSelector, TournamentSelector, UniversalSamplingSelector

T = TypeVar("T")

OPERATOR_KINDS = ("selection", "crossover", "mutation", "reinsertion")


class Registry(Generic[T]):
    """Maps names to items; names are unique."""

    def __init__(self, name: str = "Registry") -> None:
        self._name = name
        self._items: dict[str, T] = {}

    def register(self, key: str, item: T) -> T:
        if key in self._items:
            raise ValueError(f"Key '{key}' already exists in registry '{self._name}'")
        self._items[key] = item
        return item

    def get(self, key: str) -> T:
        if key not in self._items:
            raise KeyError(f"Key '{key}' not found in registry '{self._name}'")
        return self._items[key]

    def list(self) -> list[str]:
        return sorted(self._items)

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __iter__(self) -> Iterable[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


OperatorFactory = Callable[..., Any]

SELECTION_OPERATORS: Registry[OperatorFactory] = Registry("selection")
CROSSOVER_OPERATORS: Registry[OperatorFactory] = Registry("crossover")
MUTATION_OPERATORS: Registry[OperatorFactory] = Registry("mutation")
REINSERTION_OPERATORS: Registry[OperatorFactory] = Registry("reinsertion")

SELECTION_OPERATORS.register("maximize", MaximizeSelector)
SELECTION_OPERATORS.register("roulette_wheel", RouletteWheelSelector)
SELECTION_OPERATORS.register("universal_sampling", UniversalSamplingSelector)
SELECTION_OPERATORS.register("tournament", TournamentSelector)

CROSSOVER_OPERATORS.register("uniform", UniformCrossBreeder)
CROSSOVER_OPERATORS.register("multi_point", MultiPointCrossBreeder)
CROSSOVER_OPERATORS.register("order_one", OrderOneCrossover)
CROSSOVER_OPERATORS.register("partially_mapped", PartiallyMappedCrossover)

MUTATION_OPERATORS.register("random_value", RandomValueMutator)
MUTATION_OPERATORS.register("breeder_value", BreederValueMutator)
MUTATION_OPERATORS.register("swap_order", SwapOrderMutator)
MUTATION_OPERATORS.register("insert_order", InsertOrderMutator)

REINSERTION_OPERATORS.register("uniform", UniformReinserter)
REINSERTION_OPERATORS.register("elitist", ElitistReinserter)

_REGISTRIES: dict[str, Registry[OperatorFactory]] = {
    "selection": SELECTION_OPERATORS,
    "crossover": CROSSOVER_OPERATORS,
    "mutation": MUTATION_OPERATORS,
    "reinsertion": REINSERTION_OPERATORS,
}

# Factories whose first argument is the fitness function of the algorithm.
_NEEDS_EVALUATOR = {("reinsertion", "elitist")}


def operator_registry(kind: str) -> Registry[OperatorFactory]:
    try:
        return _REGISTRIES[kind]
    except KeyError:
        raise ConfigurationError(
            f"Unknown operator kind '{kind}'.",
            f"Available kinds: {', '.join(OPERATOR_KINDS)}",
        ) from None


def _split_spec(spec: Any) -> tuple[str, dict[str, Any]]:
    if isinstance(spec, str):
        return spec, {}
    if isinstance(spec, tuple) and len(spec) == 2:
        return str(spec[0]), dict(spec[1] or {})
    if isinstance(spec, Mapping):
        params = dict(spec)
        method = params.pop("method", params.pop("type", None))
        if method is None:
            raise ConfigurationError("Operator spec dict needs a 'method' entry.", details={"spec": dict(spec)})
        return str(method), params
    raise ConfigurationError(f"Cannot interpret operator spec {spec!r}.")


def resolve_operator(kind: str, spec: Any, *, evaluator: Any = None) -> Any:
    """
    Build an operator from a name, a ``(name, params)`` tuple or a dict with a ``method`` key.

    Objects that are already operators are returned unchanged.
    """
    registry = operator_registry(kind)
    if not isinstance(spec, (str, tuple, Mapping)):
        return spec
    name, params = _split_spec(spec)
    key = name.lower().replace("-", "_")
    if key not in registry:
        raise InvalidOperatorError(kind, name, registry.list())
    factory = registry.get(key)
    try:
        if (kind, key) in _NEEDS_EVALUATOR:
            if evaluator is None:
                raise ConfigurationError(f"The '{key}' {kind} operator needs the fitness function.")
            return factory(evaluator, **params)
        return factory(**params)
    except TypeError as exc:
        raise ConfigurationError(
            f"Invalid parameters for {kind} operator '{name}': {exc}",
            details={"operator_type": kind, "operator_name": name, "params": params},
        ) from exc


__all__ = [
    "OPERATOR_KINDS",
    "Registry",
    "SELECTION_OPERATORS",
    "CROSSOVER_OPERATORS",
    "MUTATION_OPERATORS",
    "REINSERTION_OPERATORS",
    "operator_registry",
    "resolve_operator",
]
