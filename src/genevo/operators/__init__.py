"""Selection, crossover, mutation and reinsertion operators."""

from .crossover import (
    CrossoverOp,
    MultiPointCrossBreeder,
    OrderOneCrossover,
    PartiallyMappedCrossover,
    UniformCrossBreeder,
    order_one_crossover,
    partially_mapped_crossover,
)
from .mutation import BreederValueMutator, InsertOrderMutator, MutationOp, RandomValueMutator, SwapOrderMutator
from .registry import resolve_operator
from .reinsertion import ElitistReinserter, ReinsertionOp, UniformReinserter
from .selection import (
    MaximizeSelector,
    RouletteWheelSelector,
    SelectionOp,
    TournamentSelector,
    UniversalSamplingSelector,
)

__all__ = [
    "CrossoverOp",
    "MultiPointCrossBreeder",
    "OrderOneCrossover",
    "PartiallyMappedCrossover",
    "UniformCrossBreeder",
    "order_one_crossover",
    "partially_mapped_crossover",
    "BreederValueMutator",
    "InsertOrderMutator",
    "MutationOp",
    "RandomValueMutator",
    "SwapOrderMutator",
    "resolve_operator",
    "ElitistReinserter",
    "ReinsertionOp",
    "UniformReinserter",
    "MaximizeSelector",
    "RouletteWheelSelector",
    "SelectionOp",
    "TournamentSelector",
    "UniversalSamplingSelector",
]
