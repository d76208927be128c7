from __future__ import annotations

import pytest

from flexman.core.mode_execution import ModeExecution
from flexman.exceptions import PreconditionError
from flexman.search.common import simulate_mode
from flexman.simulation import generate_solution, simulate_one_step, simulate_single_mode


def _sequence(*pairs):
    return [ModeExecution(mode=mode, times=times) for mode, times in pairs]


class TestGenerateSolution:
    def test_replays_an_incomplete_sequence(self, manager, modes):
        solution = generate_solution(manager, modes, _sequence((0, 3), (1, 2)))
        assert solution.sequence == _sequence((0, 3), (1, 2))
        assert solution.state == 1.0
        assert solution.resources.energy == 5.0
        assert not manager.is_complete(solution)

    def test_stops_at_first_completion(self, manager, modes):
        solution = generate_solution(manager, modes, _sequence((0, 15), (1, 3)))
        assert solution.sequence == _sequence((0, 10))
        assert manager.is_complete(solution)
        assert 9.5 <= solution.state < 10.0

    def test_matches_the_search_step_by_step(self, manager, modes):
        searched = simulate_mode(manager, modes[0], 12, manager.initial_solution())
        replayed = generate_solution(manager, modes, searched.sequence)
        assert replayed.state == searched.state
        assert replayed.resources == searched.resources

    def test_empty_sequence_gives_initial_solution(self, manager, modes):
        solution = generate_solution(manager, modes, [])
        assert solution.state == manager.initial_state
        assert solution.sequence == []

    def test_unknown_mode_rejected(self, manager, modes):
        with pytest.raises(PreconditionError):
            generate_solution(manager, modes, _sequence((5, 1)))


class TestSimulateSingleMode:
    def test_records_every_step_until_completion(self, manager, modes):
        simulation = simulate_single_mode(manager, modes[0], 20)
        assert len(simulation) == 10
        assert [solution.state for solution in simulation.evolution] == [float(i) for i in range(1, 11)]
        assert simulation.initial_state == 0.0
        assert simulation.target_state == 10.0
        assert manager.is_complete(simulation.final_solution())

    def test_limited_by_steps(self, manager, modes):
        simulation = simulate_single_mode(manager, modes[1], 5)
        assert len(simulation) == 5
        assert simulation.final_solution().state == -5.0

    def test_zero_steps_rejected(self, manager, modes):
        with pytest.raises(PreconditionError):
            simulate_single_mode(manager, modes[0], 0)


class TestSimulateOneStep:
    def test_updates_in_place(self, manager, modes):
        solution = manager.initial_solution()
        simulate_one_step(manager, modes[0], solution)
        assert solution.state == 1.0
        assert solution.resources.time == 1.0
        assert solution.distance == 9.0

    def test_missing_manager_rejected(self, manager, modes):
        with pytest.raises(PreconditionError):
            simulate_one_step(None, modes[0], manager.initial_solution())
