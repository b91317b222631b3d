"""Genetic contracts, populations and fitness evaluation."""

from .evaluation import EvaluatedPopulation, evaluate_fitness
from .genetic import FitnessFunction, GenomeBuilder, as_scalar
from .population import (
    BinaryEncodedGenomeBuilder,
    PermutationGenomeBuilder,
    Population,
    PopulationBuilder,
    ValueEncodedGenomeBuilder,
    build_population,
)

__all__ = [
    "EvaluatedPopulation",
    "evaluate_fitness",
    "FitnessFunction",
    "GenomeBuilder",
    "as_scalar",
    "BinaryEncodedGenomeBuilder",
    "PermutationGenomeBuilder",
    "Population",
    "PopulationBuilder",
    "ValueEncodedGenomeBuilder",
    "build_population",
]
