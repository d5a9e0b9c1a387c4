"""
Tests for the generation transition.
"""

import numpy as np
import pytest

from flowerpots.genome import Genome, normalize
from flowerpots.generation import advance, disperse, mutate
from flowerpots.landscape import pot_index
from flowerpots.population import Extinct, Plant, Population


FAR_BOUNDS = ((1000.0, 1001.0), (2001.0, 2002.0), (3002.0, 3003.0))


def sensitive(plant: Plant) -> bool:
    """Descendant of the drought-sensitive founder in ``tagged_founders``."""
    return plant.genome.predator_defense == 0.0


class TestDisperse:
    """Tests for seed dispersal."""

    def test_nonnegative(self, rng):
        """Half-normal landing positions are never negative."""
        landing = disperse(np.zeros(1000), np.full(1000, 2.0), rng)

        assert np.all(landing >= 0)

    def test_zero_reach(self, rng):
        """A parent with no reach drops seeds where it stands."""
        landing = disperse(np.array([1.7, 1.7]), np.zeros(2), rng)

        assert landing.tolist() == [1.7, 1.7]


class TestMutate:
    """Tests for trait inheritance."""

    def test_zero_absorbing(self):
        """Zero traits stay zero whatever the noise."""
        parent = np.array([[0.0, 0.5, 0.5, 0.0]])
        noise = np.array([[0.1, 0.05, -0.05, 0.1]])

        child = mutate(parent, noise)

        assert child[0, 0] == 0.0
        assert child[0, 3] == 0.0
        assert child.sum() == pytest.approx(1.0)

    def test_clamps_negative(self):
        """Traits pushed below zero are clamped to zero before normalizing."""
        parent = np.array([[0.05, 0.35, 0.3, 0.3]])
        noise = np.array([[-0.1, 0.0, 0.0, 0.0]])

        child = mutate(parent, noise)

        assert child[0, 0] == 0.0
        assert child[0, 1:] == pytest.approx([0.35 / 0.95, 0.3 / 0.95, 0.3 / 0.95])


class TestAdvance:
    """Tests for advance."""

    def test_offspring_invariants(self, tagged_founders, close_bounds, rng):
        """Offspring are normalized, in a pot and one generation later."""
        advance(tagged_founders, 1, close_bounds, 200, False, rng)
        offspring = tagged_founders.plants(2)

        assert offspring
        for index, plant in offspring:
            assert plant.generation == 2
            assert plant.parent in (0, 1)
            assert min(plant.genome.values) >= 0.0
            assert sum(plant.genome.values) == pytest.approx(1.0)
            assert pot_index(np.array([plant.position]), close_bounds)[0] in (1, 2, 3)

    def test_returns_same_population(self, tagged_founders, close_bounds, rng):
        """The population is appended to in place."""
        result = advance(tagged_founders, 1, close_bounds, 5, False, rng)

        assert result is tagged_founders
        assert tagged_founders.latest_generation == 2

    def test_seed_count_bound(self, tagged_founders, close_bounds, rng):
        """No parent produces more offspring than seeds."""
        advance(tagged_founders, 1, close_bounds, 7, False, rng)

        assert len(tagged_founders.plants(2)) <= 2 * 7

    def test_no_survivors_appends_sentinel(self, tagged_founders, rng):
        """If no seed lands in a pot the new generation is a single sentinel."""
        advance(tagged_founders, 1, FAR_BOUNDS, 10, False, rng)

        assert tagged_founders.generation(2) == [Extinct(2)]

    def test_extinction_propagates(self, tagged_founders, close_bounds, rng):
        """Once extinct, every later generation is extinct."""
        advance(tagged_founders, 1, FAR_BOUNDS, 10, False, rng)
        for parent_generation in (2, 3, 4):
            advance(tagged_founders, parent_generation, close_bounds, 50, False, rng)

        for generation in (2, 3, 4, 5):
            assert tagged_founders.generation(generation) == [Extinct(generation)]

    def test_absorbing_zero_across_generations(self, tagged_founders, close_bounds, rng):
        """A zero trait in a parent is zero in every descendant."""
        for parent_generation in (1, 2, 3, 4):
            advance(tagged_founders, parent_generation, close_bounds, 10, False, rng)

        checked = 0
        for plant in tagged_founders:
            if plant.is_extinct or plant.parent is None:
                continue
            parent = tagged_founders[plant.parent]
            for parent_value, value in zip(parent.genome.values, plant.genome.values):
                if parent_value == 0.0:
                    assert value == 0.0
                    checked += 1
        assert checked > 0

    def test_deterministic(self, tagged_founders, close_bounds):
        """Same random stream gives the same offspring."""
        other = Population()
        other.append_generation(1, tagged_founders.generation(1))

        advance(tagged_founders, 1, close_bounds, 20, True, np.random.default_rng(9))
        advance(other, 1, close_bounds, 20, True, np.random.default_rng(9))

        assert list(tagged_founders) == list(other)


class TestDrought:
    """Tests for the drought filter."""

    def test_sensitive_parent_has_no_offspring(self, tagged_founders, close_bounds, rng):
        """Under drought, parents with drought_tolerance <= 0.25 leave no offspring."""
        advance(tagged_founders, 1, close_bounds, 200, True, rng)
        offspring = tagged_founders.plants(2)

        assert offspring
        for _, plant in offspring:
            assert plant.parent == 1
            assert tagged_founders[plant.parent].genome.drought_tolerance > 0.25
            assert not sensitive(plant)

    def test_differential(self, tagged_founders, close_bounds):
        """Drought removes exactly the sensitive lineage under identical draws."""
        wet = Population()
        wet.append_generation(1, tagged_founders.generation(1))
        dry = Population()
        dry.append_generation(1, tagged_founders.generation(1))

        advance(wet, 1, close_bounds, 200, False, np.random.default_rng(21))
        advance(dry, 1, close_bounds, 200, True, np.random.default_rng(21))

        wet_offspring = [plant for _, plant in wet.plants(2)]
        dry_offspring = [plant for _, plant in dry.plants(2)]

        assert any(sensitive(plant) for plant in wet_offspring)
        assert dry_offspring == [plant for plant in wet_offspring if not sensitive(plant)]

    def test_threshold_is_exclusive(self, close_bounds, rng):
        """A parent at exactly the threshold does not survive drought."""
        population = Population()
        population.append_generation(1, [
            Plant(Genome(0.25, 0.25, 0.5, 0.0), generation=1, position=0.0),
        ])

        advance(population, 1, close_bounds, 200, True, rng)

        assert population.is_extinct(2)

    def test_all_sensitive_goes_extinct(self, close_bounds, rng):
        """Drought with only sensitive parents leaves a sentinel."""
        population = Population()
        population.append_generation(1, [
            Plant(normalize([0.1, 0.0, 0.6, 0.3]), generation=1, position=0.0),
        ])

        advance(population, 1, close_bounds, 100, True, rng)

        assert population.generation(2) == [Extinct(2)]
