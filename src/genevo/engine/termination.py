"""
Termination conditions for simulations.

A termination inspects the simulation state after every generation and answers
with a StopFlag: ``CONTINUE`` or ``stop_now(reason)``. Conditions compose with
``And`` / ``Or`` (or the ``all_of`` / ``any_of`` helpers).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from genevo.foundation.timing import utc_now

if TYPE_CHECKING:
    from .simulation import SimState


@dataclass(frozen=True)
class StopFlag:
    stop: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.stop


CONTINUE = StopFlag(False)


def stop_now(reason: str) -> StopFlag:
    return StopFlag(True, reason)


class Termination(ABC):
    """Base class for termination conditions."""

    @abstractmethod
    def evaluate(self, state: "SimState") -> StopFlag: ...

    def reset(self) -> None:
        """Forget any history; called when the simulation is reset."""
        return None


class FitnessLimit(Termination):
    """Stops once the best fitness of a generation reaches ``fitness_target``."""

    def __init__(self, fitness_target: Any) -> None:
        self.fitness_target = fitness_target

    def evaluate(self, state: "SimState") -> StopFlag:
        best_fitness = state.result.best_solution.solution.fitness
        if best_fitness >= self.fitness_target:
            return stop_now(f"Simulation stopped after a solution with a fitness of {best_fitness} has been found.")
        return CONTINUE

    def __repr__(self) -> str:
        return f"FitnessLimit({self.fitness_target!r})"


class GenerationLimit(Termination):
    """Stops once ``max_generations`` generations have been processed."""

    def __init__(self, max_generations: int) -> None:
        if max_generations < 1:
            raise ValueError("max_generations must be positive.")
        self.max_generations = int(max_generations)

    def evaluate(self, state: "SimState") -> StopFlag:
        if state.iteration >= self.max_generations:
            return stop_now(
                f"Simulation stopped after the limit of {self.max_generations} generations have been processed."
            )
        return CONTINUE

    def __repr__(self) -> str:
        return f"GenerationLimit({self.max_generations})"


class TimeLimit(Termination):
    """Stops once the wall-clock time since the simulation started reaches ``max_time``."""

    def __init__(self, max_time: timedelta | float) -> None:
        if not isinstance(max_time, timedelta):
            max_time = timedelta(seconds=float(max_time))
        if max_time <= timedelta(0):
            raise ValueError("max_time must be positive.")
        self.max_time = max_time

    def evaluate(self, state: "SimState") -> StopFlag:
        elapsed = utc_now() - state.started_at
        if elapsed >= self.max_time:
            return stop_now(
                f"Simulation stopped after running for {elapsed} which exceeds the maximal runtime of {self.max_time}."
            )
        return CONTINUE

    def __repr__(self) -> str:
        return f"TimeLimit({self.max_time!r})"


class _Combinator(Termination):
    def __init__(self, *conditions: Termination) -> None:
        if len(conditions) < 2:
            raise ValueError(f"{type(self).__name__} needs at least two conditions.")
        self.conditions = tuple(conditions)

    def reset(self) -> None:
        for condition in self.conditions:
            condition.reset()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(map(repr, self.conditions))})"


class And(_Combinator):
    """Stops only when every condition stops; the reasons are joined with " and "."""

    def evaluate(self, state: "SimState") -> StopFlag:
        reasons = []
        for condition in self.conditions:
            flag = condition.evaluate(state)
            if not flag.stop:
                return CONTINUE
            reasons.append(flag.reason or "")
        return stop_now(" and ".join(reasons))


class Or(_Combinator):
    """Stops when any condition stops; reasons of all stopping conditions are joined with " and "."""

    def evaluate(self, state: "SimState") -> StopFlag:
        reasons = [flag.reason or "" for flag in (c.evaluate(state) for c in self.conditions) if flag.stop]
        if reasons:
            return stop_now(" and ".join(reasons))
        return CONTINUE


def all_of(*conditions: Termination) -> And:
    return And(*conditions)


def any_of(*conditions: Termination) -> Or:
    return Or(*conditions)


__all__ = [
    "StopFlag",
    "CONTINUE",
    "stop_now",
    "Termination",
    "FitnessLimit",
    "GenerationLimit",
    "TimeLimit",
    "And",
    "Or",
    "all_of",
    "any_of",
]
