"""
Simulation driver.

A Simulator wraps a GeneticAlgorithm and a Termination and runs generations
either to completion (``run``) or one at a time (``step``). It is a small state
machine over RunMode:

    NOT_RUNNING --run()--> LOOP --(stop reason | error | stop())--> NOT_RUNNING
    NOT_RUNNING --step()--> STEP --(stop reason | stop())--> NOT_RUNNING

Mode checks and transitions happen under a lock, so a second ``run`` from
another thread fails fast with SimulationAlreadyRunningError instead of
interfering with the running loop. Generations themselves are processed one at
a time, also when several threads call ``step`` concurrently; ``stop`` of a step
session and ``reset`` wait for the generation in flight.

Example:
    simulator = simulate(algorithm).until(any_of(GenerationLimit(200), FitnessLimit(24))).build()
    while True:
        result = simulator.step()
        if isinstance(result, Final):
            break
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Union

from genevo.foundation.exceptions import (
    MissingConfigError,
    SimulationAlreadyRunningError,
    UnexpectedSimulationError,
)
from genevo.foundation.random import Seed, from_seed, seed_random
from genevo.foundation.timing import utc_now

from .algorithm import AlgorithmState, GeneticAlgorithm
from .termination import Termination

logger = logging.getLogger(__name__)


class RunMode(Enum):
    NOT_RUNNING = "not running"
    LOOP = "loop"
    STEP = "step"


@dataclass(frozen=True)
class SimState:
    """
    Snapshot after one generation.

    ``duration`` is the wall-clock time of this generation, ``processing_time``
    the algorithm's cumulative processing time in seconds.
    """

    started_at: datetime
    iteration: int
    seed: Seed
    duration: timedelta
    processing_time: float
    result: AlgorithmState


@dataclass(frozen=True)
class Intermediate:
    state: SimState


@dataclass(frozen=True)
class Final:
    state: SimState
    processing_time: float
    duration: timedelta
    stop_reason: str


SimResult = Union[Intermediate, Final]


class Simulator:
    def __init__(self, algorithm: GeneticAlgorithm, termination: Termination) -> None:
        self._algorithm = algorithm
        self._termination = termination
        self._lock = threading.Lock()
        self._generation_lock = threading.Lock()
        self._run_mode = RunMode.NOT_RUNNING
        self._started_at: datetime | None = None
        self._iteration = 0
        self._processing_time = 0.0
        self._finished = False

    @property
    def algorithm(self) -> GeneticAlgorithm:
        return self._algorithm

    @property
    def termination(self) -> Termination:
        return self._termination

    @property
    def run_mode(self) -> RunMode:
        return self._run_mode

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def iteration(self) -> int:
        return self._iteration

    @property
    def processing_time(self) -> float:
        return self._processing_time

    def run(self) -> SimResult:
        """
        Process generations until the termination condition stops the simulation.

        Returns Final when the termination stopped the run, or the last
        Intermediate result when ``stop()`` interrupted it. Algorithm errors
        propagate after the simulator has returned to NOT_RUNNING.
        """
        with self._lock:
            if self._run_mode is not RunMode.NOT_RUNNING:
                raise SimulationAlreadyRunningError(self._run_mode.value, self._started_at)
            self._run_mode = RunMode.LOOP
            self._started_at = utc_now()
            self._finished = False
        logger.info("Simulation started in loop mode (%r)", self._algorithm)

        result: SimResult | None = None
        try:
            while True:
                state = self._process_one_iteration(seed_random())
                flag = self._termination.evaluate(state)
                if flag.stop:
                    result = self._final(state, flag.reason or "")
                    break
                result = Intermediate(state)
                with self._lock:
                    if self._finished:
                        break
        finally:
            with self._lock:
                self._finished = True
                self._run_mode = RunMode.NOT_RUNNING

        if result is None:
            raise UnexpectedSimulationError()
        return result

    def step(self) -> SimResult:
        return self.step_with_seed(seed_random())

    def step_with_seed(self, seed: Seed) -> SimResult:
        """Process exactly one generation with a generator built from ``seed``."""
        with self._lock:
            if self._run_mode is RunMode.LOOP:
                raise SimulationAlreadyRunningError(self._run_mode.value, self._started_at)
            if self._run_mode is RunMode.NOT_RUNNING:
                self._run_mode = RunMode.STEP
                self._started_at = utc_now()
                self._finished = False
                logger.info("Simulation started in step mode (%r)", self._algorithm)

        state = self._process_one_iteration(seed)
        flag = self._termination.evaluate(state)
        if not flag.stop:
            return Intermediate(state)
        with self._lock:
            self._finished = True
            self._run_mode = RunMode.NOT_RUNNING
        return self._final(state, flag.reason or "")

    def stop(self) -> bool:
        """
        Ask a running simulation to finish.

        A loop finishes after the generation in flight. A step session ends
        once the step in flight, if any, has been processed; this call waits
        for it. Returns False when nothing was running.
        """
        with self._lock:
            if self._run_mode is RunMode.NOT_RUNNING:
                return False
            self._finished = True
            mode = self._run_mode
        if mode is RunMode.STEP:
            with self._generation_lock, self._lock:
                if self._run_mode is RunMode.STEP:
                    self._run_mode = RunMode.NOT_RUNNING
        logger.info("Simulation stop requested")
        return True

    def reset(self) -> None:
        with self._lock:
            self._check_idle_for_reset()
        with self._generation_lock, self._lock:
            self._check_idle_for_reset()
            self._iteration = 0
            self._processing_time = 0.0
            self._started_at = None
            self._algorithm.reset()
            self._termination.reset()
        logger.debug("Simulation reset")

    def _check_idle_for_reset(self) -> None:
        if self._run_mode is not RunMode.NOT_RUNNING:
            raise SimulationAlreadyRunningError(
                self._run_mode.value,
                self._started_at,
                "Wait for the simulation to finish or stop it before resetting it.",
            )

    def _process_one_iteration(self, seed: Seed) -> SimState:
        with self._generation_lock:
            iteration = self._iteration + 1
            generation_started_at = utc_now()
            result = self._algorithm.next(iteration, from_seed(seed))
            self._iteration = iteration
            self._processing_time = result.processing_time
            state = SimState(
                started_at=self._started_at or generation_started_at,
                iteration=iteration,
                seed=seed,
                duration=utc_now() - generation_started_at,
                processing_time=result.processing_time,
                result=result,
            )
        logger.debug(
            "Generation %d done in %s, best fitness %s",
            iteration,
            state.duration,
            result.best_solution.solution.fitness,
        )
        return state

    def _final(self, state: SimState, reason: str) -> Final:
        duration = utc_now() - (self._started_at or state.started_at)
        logger.info("Simulation finished after %d generations: %s", state.iteration, reason)
        return Final(state=state, processing_time=self._processing_time, duration=duration, stop_reason=reason)


class SimulatorBuilder:
    def __init__(self, algorithm: GeneticAlgorithm) -> None:
        self._algorithm = algorithm
        self._termination: Termination | None = None

    def until(self, termination: Termination) -> "SimulatorBuilder":
        self._termination = termination
        return self

    def build(self) -> Simulator:
        if self._termination is None:
            raise MissingConfigError("termination", "SimulatorBuilder", method="until")
        return Simulator(self._algorithm, self._termination)


def simulate(algorithm: GeneticAlgorithm) -> SimulatorBuilder:
    return SimulatorBuilder(algorithm)


__all__ = [
    "RunMode",
    "SimState",
    "Intermediate",
    "Final",
    "SimResult",
    "Simulator",
    "SimulatorBuilder",
    "simulate",
]
