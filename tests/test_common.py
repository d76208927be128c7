from __future__ import annotations

import math

import pytest

from flexman.core.mode_execution import ModeExecution
from flexman.core.solution import Solution
from flexman.exceptions import PreconditionError, SearchError
from flexman.search.common import (
    SearchAlgorithm,
    SwitchingMode,
    extend_solutions,
    find_solution_closest_to_zero,
    remove_dominated_solutions,
    remove_duplicate_solutions,
    simulate_mode,
    split_complete_partial,
)
from tests.rate_model import RateResources


def _make_solution(sequence, state=0.0, energy=0.0, time=0.0, distance=math.inf) -> Solution:
    return Solution(
        sequence=[ModeExecution(mode=mode, times=times) for mode, times in sequence],
        state=state,
        resources=RateResources(energy=energy, time=time),
        distance=distance,
    )


def _complete(manager, sequence, state, energy):
    solution = _make_solution(sequence, state=state, energy=energy, time=energy)
    solution.distance = manager.distance(solution)
    assert manager.is_complete(solution)
    return solution


class TestSimulateMode:
    def test_steps_are_merged_into_one_entry(self, manager, modes):
        start = manager.initial_solution([ModeExecution(mode=0, times=0)])
        solution = simulate_mode(manager, modes[0], 4, start)
        assert solution.sequence == [ModeExecution(mode=0, times=4)]
        assert solution.state == 4.0
        assert solution.resources == RateResources(energy=4.0, time=4.0)
        assert solution.distance == 6.0

    def test_input_solution_is_untouched(self, manager, modes):
        start = manager.initial_solution()
        simulate_mode(manager, modes[0], 3, start)
        assert start.state == 0.0
        assert start.sequence == []

    def test_stops_at_completion_with_correction(self, manager, modes):
        start = manager.initial_solution()
        solution = simulate_mode(manager, modes[0], 15, start)
        assert manager.is_complete(solution)
        assert solution.sequence == [ModeExecution(mode=0, times=10)]
        assert 9.5 < solution.state < 10.0
        assert solution.resources.time < 10.0

    def test_zero_steps_rejected(self, manager, modes):
        with pytest.raises(PreconditionError):
            simulate_mode(manager, modes[0], 0, manager.initial_solution())

    def test_missing_manager_rejected(self, modes, manager):
        with pytest.raises(PreconditionError):
            simulate_mode(None, modes[0], 1, manager.initial_solution())


class TestOvershootCorrection:
    def test_interpolated_point_is_complete_and_closer(self, manager):
        previous = _make_solution([(0, 9)], state=9.0, energy=9.0, time=9.0, distance=1.0)
        current = _make_solution([(0, 10)], state=10.0, energy=10.0, time=10.0, distance=0.0)
        corrected = find_solution_closest_to_zero(manager, previous, current)
        assert corrected is not current
        assert manager.is_complete(corrected)
        assert corrected.distance == manager.distance(corrected)
        # Step of 0.05 with the scanning factor of 2 for a distance of 1.
        assert corrected.distance > manager.threshold - 0.05 - 1e-9
        assert corrected.sequence == current.sequence

    def test_infinite_previous_distance_is_recomputed(self, manager):
        previous = _make_solution([(0, 9)], state=9.0, energy=9.0, time=9.0)
        current = _make_solution([(0, 10)], state=10.0, energy=10.0, time=10.0, distance=0.0)
        corrected = find_solution_closest_to_zero(manager, previous, current)
        assert manager.is_complete(corrected)
        assert corrected.state < 10.0

    def test_current_returned_when_no_point_qualifies(self, manager):
        # Both ends are incomplete, so nothing in between can be.
        previous = _make_solution([(0, 1)], state=1.0, distance=9.0)
        current = _make_solution([(0, 2)], state=2.0, distance=8.0)
        assert find_solution_closest_to_zero(manager, previous, current) is current


class TestExtendSolutions:
    def _seeds(self, manager, count):
        return [manager.initial_solution([ModeExecution(mode=i, times=0)]) for i in range(count)]

    def test_free_switching_branches_on_every_mode(self, manager, make_modes):
        modes = make_modes(1.0, -1.0, 0.5)
        extended = extend_solutions(manager, modes, 2, self._seeds(manager, 3), SwitchingMode.FREE)
        assert len(extended) == 9

    def test_no_switching_keeps_the_active_mode(self, manager, make_modes):
        modes = make_modes(1.0, -1.0, 0.5)
        extended = extend_solutions(manager, modes, 2, self._seeds(manager, 3), SwitchingMode.NONE)
        assert [solution.sequence for solution in extended] == [
            [ModeExecution(mode=i, times=2)] for i in range(3)
        ]

    def test_increasing_switching_never_goes_back(self, manager, make_modes):
        modes = make_modes(1.0, -1.0, 0.5)
        extended = extend_solutions(manager, modes, 1, self._seeds(manager, 3), SwitchingMode.INCREASING)
        assert len(extended) == 3 + 2 + 1
        for solution in extended:
            ids = [execution.mode for execution in solution.sequence]
            assert ids == sorted(ids)

    def test_no_switching_needs_an_active_mode(self, manager, modes):
        with pytest.raises(SearchError):
            extend_solutions(manager, modes, 1, [manager.initial_solution()], SwitchingMode.NONE)

    def test_empty_modes_rejected(self, manager):
        with pytest.raises(PreconditionError):
            extend_solutions(manager, [], 1, [manager.initial_solution()])

    def test_zero_steps_rejected(self, manager, modes):
        with pytest.raises(PreconditionError):
            extend_solutions(manager, modes, 0, [manager.initial_solution()])


class TestRemoveDominated:
    def test_same_list_rejected(self, manager):
        solutions = [_make_solution([(0, 1)])]
        with pytest.raises(PreconditionError):
            remove_dominated_solutions(manager, solutions, solutions)
        assert len(solutions) == 1

    def test_empty_reference_set_keeps_everything(self, manager):
        solutions = [_make_solution([(0, 1)]), _make_solution([(1, 1)])]
        remove_dominated_solutions(manager, solutions, [])
        assert len(solutions) == 2

    def test_reference_set_prunes_dominated(self, manager):
        best = _complete(manager, [(0, 10)], state=9.6, energy=9.6)
        worse = _make_solution([(1, 12)], state=-12.0, energy=12.0, time=12.0)
        cheaper = _make_solution([(1, 2)], state=-2.0, energy=2.0, time=2.0)
        solutions = [worse, cheaper]
        remove_dominated_solutions(manager, solutions, [best])
        assert solutions == [cheaper]

    def test_self_pruning_leaves_no_dominated_pair(self, manager):
        solutions = [
            _complete(manager, [(0, 10)], state=9.6, energy=9.6),
            _complete(manager, [(0, 11)], state=10.6, energy=11.0),
            _complete(manager, [(0, 12)], state=11.6, energy=12.0),
        ]
        remove_dominated_solutions(manager, solutions)
        assert [solution.sequence[0].times for solution in solutions] == [10]
        for a in solutions:
            for b in solutions:
                assert not manager.is_strictly_better_than(a, b)

    def test_heuristic_uses_probable_dominance(self, manager):
        ahead = _make_solution([(0, 4)], state=4.0, energy=4.0, time=4.0, distance=6.0)
        behind = _make_solution([(1, 4)], state=-4.0, energy=4.0, time=4.0, distance=14.0)
        solutions = [ahead, behind]
        remove_dominated_solutions(manager, solutions, [ahead], SearchAlgorithm.EXHAUSTIVE)
        assert len(solutions) == 2
        remove_dominated_solutions(manager, solutions, list(solutions), SearchAlgorithm.HEURISTIC)
        assert solutions == [ahead]


class TestRemoveDuplicates:
    def test_duplicates_collapse(self, manager):
        solutions = [
            _make_solution([(0, 2)], energy=2.0, time=2.0),
            _make_solution([(1, 3)], energy=3.0, time=3.0),
            _make_solution([(0, 2)], energy=2.0, time=2.0),
        ]
        remove_duplicate_solutions(manager, solutions)
        assert len(solutions) == 2

    def test_idempotent(self, manager):
        solutions = [
            _make_solution([(0, 2)], energy=2.0, time=2.0),
            _make_solution([(1, 3)], energy=3.0, time=3.0),
            _make_solution([(0, 2)], energy=2.0, time=2.0),
            _make_solution([(1, 1), (0, 2)], energy=3.0, time=3.0),
            _make_solution([(2, 5)], energy=1.0, time=5.0),
        ]
        remove_duplicate_solutions(manager, solutions)
        once = [solution.sequence for solution in solutions]
        remove_duplicate_solutions(manager, solutions)
        assert [solution.sequence for solution in solutions] == once


class TestSplit:
    def test_split_moves_everything(self, manager):
        done = _complete(manager, [(0, 10)], state=9.6, energy=9.6)
        pending = _make_solution([(0, 3)], state=3.0)
        solutions = [done, pending]
        complete: list[Solution] = []
        partial: list[Solution] = []
        split_complete_partial(manager, solutions, complete, partial)
        assert complete == [done]
        assert partial == [pending]
        assert solutions == []
