"""Shared fixtures built on the rate model."""

from __future__ import annotations

import pytest

from flexman.core.mode import Mode
from tests.rate_model import RateManager, make_rate_manager, make_rate_modes


@pytest.fixture
def make_manager():
    return make_rate_manager


@pytest.fixture
def manager() -> RateManager:
    return make_rate_manager()


@pytest.fixture
def modes() -> list[Mode]:
    return make_rate_modes()


@pytest.fixture
def make_modes():
    return make_rate_modes
