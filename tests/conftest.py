"""
Pytest configuration and fixtures for flowerpots tests.
"""

import numpy as np
import pytest

from flowerpots.config import Config
from flowerpots.genome import normalize
from flowerpots.population import Plant, Population


@pytest.fixture
def default_config() -> Config:
    """Default configuration for tests."""
    return Config()


@pytest.fixture
def small_config() -> Config:
    """Small sweep for fast tests."""
    return Config(founding_population_size=10, seeds_per_parent=3, trial_count=20)


@pytest.fixture
def rng() -> np.random.Generator:
    """Random generator for stochastic tests."""
    return np.random.default_rng(12345)


@pytest.fixture
def tagged_founders() -> Population:
    """
    Two founders told apart by which trait is exactly zero.

    The drought-sensitive founder has no predator_defense; the tolerant one
    has no seed_fluffyness. Zero traits are inherited, so every descendant
    carries its founder's tag.
    """
    population = Population()
    population.append_generation(1, [
        Plant(normalize([0.1, 0.0, 0.6, 0.3]), generation=1, position=0.0),
        Plant(normalize([0.5, 0.2, 0.3, 0.0]), generation=1, position=0.0),
    ])
    return population


@pytest.fixture
def close_bounds() -> tuple[tuple[float, float], ...]:
    """Pots close to the origin so many seeds land."""
    return ((0.5, 1.5), (2.0, 3.0), (3.5, 4.5))
