from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from flexman.core.mode_execution import ModeExecution
from tests.rate_model import RateResources


class TestManagerConfig:
    @pytest.mark.parametrize("field", ["time_delta", "time_max", "threshold"])
    def test_non_positive_values_rejected(self, make_manager, field):
        with pytest.raises(ValidationError):
            make_manager(**{field: 0.0})

    def test_negative_timeout_rejected(self, make_manager):
        with pytest.raises(ValidationError):
            make_manager(timeout=-1.0)

    def test_timeout_accepts_timespec(self, make_manager):
        manager = make_manager(timeout={"tv_sec": 2, "tv_nsec": 500_000_000})
        assert manager.timeout == pytest.approx(2.5)

    def test_timeout_timespec_missing_key(self, make_manager):
        with pytest.raises(ValidationError):
            make_manager(timeout={"tv_sec": 2})

    def test_timeout_serialized_as_timespec(self, make_manager):
        dumped = make_manager(timeout=1.25).model_dump()
        assert dumped["timeout"] == {"tv_sec": 1, "tv_nsec": 250_000_000}
        assert make_manager(timeout=None).model_dump()["timeout"] == {"tv_sec": 0, "tv_nsec": 0}

    def test_max_steps(self, make_manager):
        assert make_manager(time_max=20.0, time_delta=1.0).max_steps == 20
        assert make_manager(time_max=0.5, time_delta=1.0).max_steps == 1


class TestManagerHelpers:
    def test_initial_solution(self, manager):
        solution = manager.initial_solution([ModeExecution(mode=1, times=0)])
        assert solution.state == 0.0
        assert solution.resources == RateResources()
        assert math.isinf(solution.distance)
        assert solution.sequence == [ModeExecution(mode=1, times=0)]

    def test_initial_solution_copies_sequence(self, manager):
        sequence = [ModeExecution(mode=0, times=2)]
        solution = manager.initial_solution(sequence)
        solution.sequence[0].times = 7
        assert sequence[0].times == 2

    def test_resources_cost_of_model(self, manager):
        assert manager.resources_cost(RateResources(energy=2.0, time=3.5)) == 5.5

    def test_resources_cost_of_number_and_iterable(self, manager):
        assert manager.resources_cost(4) == 4.0
        assert manager.resources_cost([1.0, 2.0, 3]) == 6.0
