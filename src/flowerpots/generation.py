"""
Generation transition: dispersal, survival and inheritance.

Every parent of the latest generation disperses a fixed number of seeds.
A seed survives if it lands strictly inside a pot and, during a drought,
if its parent is drought tolerant. Surviving seeds become offspring whose
traits are the parent's traits plus uniform noise, renormalized.
"""

import logging

import numpy as np

from .genome import (
    DROUGHT_TOLERANCE,
    N_TRAITS,
    Genome,
    dispersal_reach,
    normalize_rows,
)
from .landscape import Bounds, pot_index
from .population import Extinct, Plant, Population


logger = logging.getLogger(__name__)


def disperse(
    positions: np.ndarray,
    reach: np.ndarray,
    rng: np.random.Generator,
) -> np.ndarray:
    """
    Landing positions of seeds.

    Half-normal dispersal: a normal draw centred on the parent position with
    the parent's reach as standard deviation, reflected to be nonnegative.

    Args:
        positions: Parent position for every seed [S]
        reach: Parent dispersal reach for every seed [S]
        rng: Random generator

    Returns:
        Landing positions [S]
    """
    return np.abs(rng.normal(loc=positions, scale=reach))


def mutate(parent_traits: np.ndarray, noise: np.ndarray) -> np.ndarray:
    """
    Offspring traits from parent traits and mutation noise.

    Traits that are exactly zero in the parent stay zero. Other traits get
    the noise added and are clamped at zero before renormalization.

    Args:
        parent_traits: Parent trait rows [S, 4]
        noise: Mutation noise [S, 4]

    Returns:
        Normalized offspring trait rows [S, 4]
    """
    mutated = np.where(
        parent_traits > 0,
        np.clip(parent_traits + noise, 0.0, None),
        0.0,
    )
    return normalize_rows(mutated)


def advance(
    population: Population,
    parent_generation: int,
    bounds: Bounds,
    seeds_per_parent: int,
    drought_active: bool,
    rng: np.random.Generator,
    *,
    mutation_range: float = 0.1,
    drought_threshold: float = 0.25,
    stalk_height_weight: float = 3.0,
    seed_fluffyness_weight: float = 0.3,
) -> Population:
    """
    Produce the next generation and append it to the population.

    Random draws are taken for every seed before any filtering: first one
    dispersal draw per seed, then four mutation draws per seed. Filters only
    mask those draws, so turning the drought on or off never shifts the
    random stream.

    If the parent generation has no real plants, or no seed survives, a
    single Extinct record is appended for the new generation.

    Args:
        population: Population so far; appended to in place
        parent_generation: Id of the generation whose plants reproduce
        bounds: Pot intervals from ``patch_bounds``
        seeds_per_parent: Seeds dispersed per parent
        drought_active: Whether the drought filter applies to this transition
        rng: Random generator for this trial
        mutation_range: Half-width of the uniform mutation noise
        drought_threshold: Minimum (exclusive) parent drought_tolerance under drought

    Returns:
        The same population, now including the new generation
    """
    child_generation = parent_generation + 1
    parents = population.plants(parent_generation)

    if not parents:
        logger.debug("Generation %d has no parents; generation %d extinct",
                     parent_generation, child_generation)
        population.append_generation(child_generation, [Extinct(child_generation)])
        return population

    parent_index = np.array([index for index, _ in parents])
    traits = np.array([plant.genome.values for _, plant in parents], dtype=float)
    positions = np.array([plant.position for _, plant in parents], dtype=float)
    reach = dispersal_reach(traits, stalk_height_weight, seed_fluffyness_weight)

    # Parent row of every seed, parents in population order
    seed_parent = np.repeat(np.arange(len(parents)), seeds_per_parent)

    landing = disperse(positions[seed_parent], reach[seed_parent], rng)
    noise = rng.uniform(-mutation_range, mutation_range, size=(len(seed_parent), N_TRAITS))

    survives = pot_index(landing, bounds) > 0
    landed = int(survives.sum())
    if drought_active:
        survives &= traits[seed_parent, DROUGHT_TOLERANCE] > drought_threshold

    logger.debug(
        "Generation %d -> %d: %d parents, %d seeds, %d landed in pots, %d survived%s",
        parent_generation, child_generation, len(parents), len(seed_parent),
        landed, int(survives.sum()), " (drought)" if drought_active else "",
    )

    if not survives.any():
        population.append_generation(child_generation, [Extinct(child_generation)])
        return population

    survivor_parent = seed_parent[survives]
    offspring_traits = mutate(traits[survivor_parent], noise[survives])

    population.append_generation(
        child_generation,
        (
            Plant(
                genome=Genome.from_array(row),
                generation=child_generation,
                position=float(position),
                parent=int(parent_index[p]),
            )
            for row, position, p in zip(offspring_traits, landing[survives], survivor_parent)
        ),
    )
    return population
