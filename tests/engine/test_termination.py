from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace

import pytest

from genevo.engine.termination import (
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
from genevo.foundation.timing import utc_now


def _state(iteration=1, fitness=0, started_ago=timedelta(0)):
    best = SimpleNamespace(solution=SimpleNamespace(fitness=fitness))
    return SimpleNamespace(
        iteration=iteration,
        started_at=utc_now() - started_ago,
        result=SimpleNamespace(best_solution=best),
    )


class Fixed(Termination):
    def __init__(self, reason=None):
        self.reason = reason
        self.calls = 0
        self.resets = 0

    def evaluate(self, state):
        self.calls += 1
        return stop_now(self.reason) if self.reason else CONTINUE

    def reset(self):
        self.resets += 1


def test_stop_flag_truthiness():
    assert not CONTINUE
    assert stop_now("done")
    assert stop_now("done") == StopFlag(True, "done")


def test_generation_limit():
    limit = GenerationLimit(20)
    assert limit.evaluate(_state(iteration=19)) == CONTINUE
    flag = limit.evaluate(_state(iteration=20))
    assert flag.stop
    assert flag.reason == "Simulation stopped after the limit of 20 generations have been processed."
    with pytest.raises(ValueError):
        GenerationLimit(0)


def test_fitness_limit():
    limit = FitnessLimit(24)
    assert not limit.evaluate(_state(fitness=23))
    flag = limit.evaluate(_state(fitness=24))
    assert flag.reason == "Simulation stopped after a solution with a fitness of 24 has been found."


def test_time_limit():
    assert TimeLimit(timedelta(seconds=5)).evaluate(_state(started_ago=timedelta(seconds=10))).stop
    assert not TimeLimit(60).evaluate(_state(started_ago=timedelta(seconds=10))).stop
    with pytest.raises(ValueError):
        TimeLimit(0)


def test_and_stops_only_when_all_stop():
    assert not And(Fixed("a"), Fixed()).evaluate(_state())
    flag = all_of(Fixed("a"), Fixed("b")).evaluate(_state())
    assert flag.reason == "a and b"


def test_and_short_circuits():
    second = Fixed("b")
    And(Fixed(), second).evaluate(_state())
    assert second.calls == 0


def test_or_stops_when_any_stops():
    assert not Or(Fixed(), Fixed()).evaluate(_state())
    assert Or(Fixed(), Fixed("b")).evaluate(_state()).reason == "b"
    assert any_of(Fixed("a"), Fixed(), Fixed("c")).evaluate(_state()).reason == "a and c"


def test_combined_limits():
    condition = any_of(GenerationLimit(200), FitnessLimit(24))
    assert not condition.evaluate(_state(iteration=10, fitness=20))
    assert condition.evaluate(_state(iteration=10, fitness=24))
    assert condition.evaluate(_state(iteration=200, fitness=3))


def test_combinators_need_two_conditions():
    with pytest.raises(ValueError):
        And(Fixed())
    with pytest.raises(ValueError):
        Or()


def test_reset_reaches_nested_conditions():
    inner = Fixed()
    outer = Fixed()
    any_of(all_of(inner, Fixed()), outer).reset()
    assert inner.resets == 1
    assert outer.resets == 1
