"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from buddhascope.config import BuddhabrotConfig, ChannelParams
from buddhascope.core.viewport import Viewport

TEST_SEED = 1234


@pytest.fixture
def seed() -> int:
    """Default seed for reproducible sampling."""
    return TEST_SEED


@pytest.fixture
def rng(seed: int) -> np.random.Generator:
    return np.random.default_rng(seed)


@pytest.fixture
def unit_viewport() -> Viewport:
    """The classic (-2, -2) .. (2, 2) window."""
    return Viewport.from_bounds(-2.0, -2.0, 2.0, 2.0)


@pytest.fixture
def small_config(seed: int) -> BuddhabrotConfig:
    """
    A 16x12 render that finishes in well under a second.

    Returns:
        Config with distinct budgets per channel and a fixed seed.
    """
    return BuddhabrotConfig(
        width=16,
        height=12,
        channels=[
            ChannelParams("red", 20, 4000),
            ChannelParams("green", 50, 4000),
            ChannelParams("blue", 200, 4000),
        ],
        seed=seed,
        batch_size=1024,
    )
