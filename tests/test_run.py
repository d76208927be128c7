from __future__ import annotations

import pytest
from omegaconf import OmegaConf

from flexman.exceptions import ConfigError
from flexman.problems.tapping import ContinuousTappingManager, DiscreteTappingManager
from run import build_manager, check_config


def _make_cfg(**overrides):
    cfg = {
        "run": "search",
        "search": {
            "time_delta": 0.01,
            "time_max": 1.0,
            "threshold": 0.01,
            "timeout": 5.0,
            "interactive": False,
        },
        "problem": {"variant": "discrete", "depth": 40.0},
    }
    cfg.update(overrides)
    return OmegaConf.create(cfg)


class TestConfig:
    def test_known_run_modes(self):
        check_config(_make_cfg(run="search"))
        check_config(_make_cfg(run="simulation"))

    def test_unknown_run_mode(self):
        with pytest.raises(ConfigError):
            check_config(_make_cfg(run="plot"))

    def test_unknown_variant(self):
        with pytest.raises(ConfigError):
            build_manager(_make_cfg(problem={"variant": "hybrid", "depth": 40.0}))

    def test_manager_variants(self):
        discrete = build_manager(_make_cfg())
        continuous = build_manager(_make_cfg(problem={"variant": "continuous", "depth": 25.0}))
        assert isinstance(discrete, DiscreteTappingManager)
        assert isinstance(continuous, ContinuousTappingManager)
        assert continuous.target_state.tolist() == [0.0, 0.0, 25.0]
        assert discrete.timeout == 5.0
