"""
Pytest configuration for the test suite.

This file is automatically loaded by pytest and provides shared fixtures:
deterministic random sources and controller parameters with a known decision.
"""

import os
import sys
from typing import Sequence

import numpy as np
import pytest

# Headless pygame for renderer tests
os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config
from src.ai.network import ControllerParams


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


class ScriptedRandom:
    """RandomSource replaying a fixed sequence of [0, 1) values (cycled)."""

    def __init__(self, values: Sequence[float]):
        assert values, "ScriptedRandom needs at least one value"
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value

    def uniform(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)


def make_params(output_bias: float, config: Config = None) -> ControllerParams:
    """
    Controller parameters whose output is sigmoid(sigmoid(0) * 0 + bias).

    A large positive bias never jumps; a large negative bias always jumps.
    """
    cfg = config or Config()
    return ControllerParams.from_arrays([
        np.zeros((cfg.HIDDEN_SIZE, cfg.INPUT_SIZE)),
        np.zeros(cfg.HIDDEN_SIZE),
        np.zeros((cfg.OUTPUT_SIZE, cfg.HIDDEN_SIZE)),
        np.full(cfg.OUTPUT_SIZE, output_bias),
    ])


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRandom sources."""
    return ScriptedRandom


@pytest.fixture
def never_jump():
    """Parameters of a controller that never requests a jump."""
    return make_params(10.0)


@pytest.fixture
def always_jump():
    """Parameters of a controller that requests a jump every tick."""
    return make_params(-10.0)
