from flexman.search.common import (
    SearchAlgorithm,
    SwitchingMode,
    extend_solutions,
    find_solution_closest_to_zero,
    log_solutions,
    remove_dominated_solutions,
    remove_duplicate_solutions,
    simulate_mode,
    split_complete_partial,
)
from flexman.search.interactive import (
    InteractiveCommand,
    prompt_interactive_command,
    wait_for_keypress,
)
from flexman.search.search import (
    perform_search,
    perform_search_n_iterations,
    perform_search_single_iteration,
    stride_schedule,
)

__all__ = [
    "InteractiveCommand",
    "SearchAlgorithm",
    "SwitchingMode",
    "extend_solutions",
    "find_solution_closest_to_zero",
    "log_solutions",
    "perform_search",
    "perform_search_n_iterations",
    "perform_search_single_iteration",
    "prompt_interactive_command",
    "remove_dominated_solutions",
    "remove_duplicate_solutions",
    "simulate_mode",
    "split_complete_partial",
    "stride_schedule",
    "wait_for_keypress",
]
