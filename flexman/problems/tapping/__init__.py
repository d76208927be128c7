"""Reference domain model: a motor-driven tapping machine with selectable gear ratios."""

from flexman.problems.tapping.builder import (
    DiscreteStateSpace,
    StateSpace,
    TappingBuilder,
    TappingMode,
    c2d,
    linspace,
    make_modes,
)
from flexman.problems.tapping.parameters import TappingParameters
from flexman.problems.tapping.report import (
    Change,
    ResourceComparison,
    compare_results,
    compare_values,
    log_results,
    sort_results,
)
from flexman.problems.tapping.resources import TappingResources, approximately_equal
from flexman.problems.tapping.search import (
    ContinuousTappingManager,
    DiscreteTappingManager,
    TappingManager,
)

__all__ = [
    "Change",
    "ContinuousTappingManager",
    "DiscreteStateSpace",
    "DiscreteTappingManager",
    "ResourceComparison",
    "StateSpace",
    "TappingBuilder",
    "TappingManager",
    "TappingMode",
    "TappingParameters",
    "TappingResources",
    "approximately_equal",
    "c2d",
    "compare_results",
    "compare_values",
    "linspace",
    "log_results",
    "make_modes",
    "sort_results",
]
