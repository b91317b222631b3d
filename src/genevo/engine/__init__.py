"""Generation engine, termination conditions and the simulation driver."""

from .algorithm import (
    AlgorithmState,
    BestSolution,
    EvaluatedIndividual,
    GeneticAlgorithm,
    GeneticAlgorithmBuilder,
    genetic_algorithm,
)
from .simulation import Final, Intermediate, RunMode, SimState, Simulator, SimulatorBuilder, simulate
from .termination import (
    CONTINUE,
    And,
    FitnessLimit,
    GenerationLimit,
    Or,
    StopFlag,
    Termination,
    TimeLimit,
    all_of,
    any_of,
    stop_now,
)

__all__ = [
    "AlgorithmState",
    "BestSolution",
    "EvaluatedIndividual",
    "GeneticAlgorithm",
    "GeneticAlgorithmBuilder",
    "genetic_algorithm",
    "Final",
    "Intermediate",
    "RunMode",
    "SimState",
    "Simulator",
    "SimulatorBuilder",
    "simulate",
    "CONTINUE",
    "And",
    "FitnessLimit",
    "GenerationLimit",
    "Or",
    "StopFlag",
    "Termination",
    "TimeLimit",
    "all_of",
    "any_of",
    "stop_now",
]
