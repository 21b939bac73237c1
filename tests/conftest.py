"""Shared pytest fixtures for evoview tests."""

import numpy as np
import pytest

from evoview.config import PoolSettings
from evoview.genomes import StaticPopulation, genomes_from_values
from evoview.stats.pool import ViewPool


@pytest.fixture
def pool():
    """Create a private pool so tests do not share idle views."""
    return ViewPool(PoolSettings(max_idle=16))


@pytest.fixture
def rng():
    """Seeded random generator for reproducible fitness values."""
    return np.random.default_rng(1234)


@pytest.fixture
def make_population(pool):
    """Build a StaticPopulation over fitness values, bound to the test pool."""

    def _make(values):
        return StaticPopulation(genomes_from_values(values), pool=pool)

    return _make
