"""
genevo: a generic genetic algorithm engine.

Build a population, describe the algorithm with a fitness function and four
operators, wrap it in a simulator with a termination condition and run it:

    population = build_population().with_genome_builder(BinaryEncodedGenomeBuilder(24)).of_size(200).uniform_at_random()
    algorithm = genetic_algorithm().with_evaluation(...).with_selection(...)...build()
    result = simulate(algorithm).until(GenerationLimit(100)).build().run()
"""

from .core import (
    BinaryEncodedGenomeBuilder,
    EvaluatedPopulation,
    FitnessFunction,
    GenomeBuilder,
    PermutationGenomeBuilder,
    Population,
    ValueEncodedGenomeBuilder,
    build_population,
    evaluate_fitness,
)
from .engine import (
    And,
    AlgorithmState,
    BestSolution,
    Final,
    FitnessLimit,
    GenerationLimit,
    GeneticAlgorithm,
    Intermediate,
    Or,
    RunMode,
    SimState,
    Simulator,
    StopFlag,
    Termination,
    TimeLimit,
    all_of,
    any_of,
    genetic_algorithm,
    simulate,
)
from .foundation.config import EngineConfig, EngineSettings, load_settings
from .foundation.logging import configure_genevo_logging
from .foundation.random import Seed, from_seed, jump, seed_random
from .foundation.version import get_version

__version__ = get_version()

__all__ = [
    "BinaryEncodedGenomeBuilder",
    "EvaluatedPopulation",
    "FitnessFunction",
    "GenomeBuilder",
    "PermutationGenomeBuilder",
    "Population",
    "ValueEncodedGenomeBuilder",
    "build_population",
    "evaluate_fitness",
    "And",
    "AlgorithmState",
    "BestSolution",
    "Final",
    "FitnessLimit",
    "GenerationLimit",
    "GeneticAlgorithm",
    "Intermediate",
    "Or",
    "RunMode",
    "SimState",
    "Simulator",
    "StopFlag",
    "Termination",
    "TimeLimit",
    "all_of",
    "any_of",
    "genetic_algorithm",
    "simulate",
    "EngineConfig",
    "EngineSettings",
    "load_settings",
    "configure_genevo_logging",
    "Seed",
    "from_seed",
    "jump",
    "seed_random",
    "__version__",
]
