"""
Tests for plant records and the population log.
"""

import numpy as np
import pandas as pd
import pytest

from flowerpots.config import Config
from flowerpots.genome import TRAIT_NAMES, normalize
from flowerpots.landscape import Landscape
from flowerpots.population import Extinct, Plant, Population, create_founders


class TestPopulation:
    """Tests for the append-only population."""

    def test_append_and_query(self):
        """Generations are appended and queried by id."""
        population = Population()
        a = Plant(normalize([1, 1, 1, 1]), generation=1, position=0.0)
        b = Plant(normalize([1, 2, 3, 4]), generation=2, position=1.5, parent=0)
        population.append_generation(1, [a])
        population.append_generation(2, [b])

        assert len(population) == 2
        assert population.generations == [1, 2]
        assert population.latest_generation == 2
        assert population.generation(2) == [b]
        assert population.plants(2) == [(1, b)]
        assert population.generation(7) == []

    def test_extinct_generation(self):
        """Generations holding only a sentinel are extinct."""
        population = Population()
        population.append_generation(1, [Plant(normalize([1, 1, 1, 1]), 1, 0.0)])
        population.append_generation(2, [Extinct(2)])

        assert population.is_extinct(2)
        assert not population.is_extinct(1)
        assert not population.is_extinct(3)
        assert population.plants(2) == []

    def test_rejects_duplicate_generation(self):
        """A generation can only be appended once."""
        population = Population()
        population.append_generation(1, [Extinct(1)])

        with pytest.raises(ValueError, match="already appended"):
            population.append_generation(1, [Extinct(1)])

    def test_rejects_mismatched_generation(self):
        """Records must belong to the generation they are appended as."""
        with pytest.raises(ValueError, match="appended as generation"):
            Population().append_generation(2, [Extinct(3)])


class TestCreateFounders:
    """Tests for the founding generation."""

    def test_founders(self, default_config, rng):
        """Founders are normalized, at the origin, in generation 1."""
        population = create_founders(default_config, rng)
        founders = population.generation(1)

        assert len(founders) == default_config.founding_population_size
        for plant in founders:
            assert plant.generation == 1
            assert plant.position == 0.0
            assert plant.parent is None
            assert sum(plant.genome.values) == pytest.approx(1.0)
            assert min(plant.genome.values) >= 0.0

    def test_reproducibility(self):
        """Same seed produces the same founders."""
        config = Config(founding_population_size=5)
        a = create_founders(config, np.random.default_rng(3))
        b = create_founders(config, np.random.default_rng(3))

        assert list(a) == list(b)


class TestToFrame:
    """Tests for the population table."""

    def test_columns_and_sentinel(self):
        """Sentinel rows carry missing values in every derived column."""
        population = Population()
        population.append_generation(1, [Plant(normalize([4, 3, 2, 1]), 1, 0.0)])
        population.append_generation(2, [Plant(normalize([1, 2, 3, 4]), 2, 1.5, parent=0)])
        population.append_generation(3, [Extinct(3)])

        frame = population.to_frame(Landscape(1.0))

        assert list(frame.columns) == [
            *TRAIT_NAMES, "generation", "position", "flower_pot", "dominant_gene", "parent",
        ]
        assert frame["generation"].tolist() == [1, 2, 3]
        assert frame["flower_pot"].tolist()[:2] == [0, 1]
        assert frame["flower_pot"].isna().tolist() == [False, False, True]
        assert frame["dominant_gene"].tolist() == ["drought_tolerance", "seed_fluffyness", None]
        assert frame["parent"].isna().tolist() == [True, False, True]
        assert frame.loc[1, "parent"] == 0
        assert frame.loc[2, list(TRAIT_NAMES)].isna().all()
        assert pd.isna(frame.loc[2, "position"])

    def test_without_landscape(self):
        """Without a landscape the flower pot is left missing."""
        population = Population()
        population.append_generation(1, [Plant(normalize([1, 1, 1, 1]), 1, 0.0)])

        assert population.to_frame()["flower_pot"].isna().all()

    def test_precision(self):
        """Rounding applies to traits only."""
        population = Population()
        population.append_generation(1, [Plant(normalize([1, 1, 1, 0]), 1, 0.0)])

        frame = population.to_frame(precision=3)
        assert frame.loc[0, "drought_tolerance"] == 0.333
