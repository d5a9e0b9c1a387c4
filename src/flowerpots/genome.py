"""
Four-trait genome model.

A genome is a nonnegative 4-vector summing to 1. The trait order below is
fixed and doubles as the tie-break order for the dominant gene.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np


TRAIT_NAMES = ("drought_tolerance", "predator_defense", "stalk_height", "seed_fluffyness")
N_TRAITS = len(TRAIT_NAMES)

# Trait column indices
DROUGHT_TOLERANCE = 0
PREDATOR_DEFENSE = 1
STALK_HEIGHT = 2
SEED_FLUFFYNESS = 3


class DegenerateGenomeError(ValueError):
    """Raised when normalizing a trait vector whose traits are all zero."""


@dataclass(frozen=True)
class Genome:
    """
    Normalized trait vector of a single plant.

    Construct through ``normalize`` or ``Genome.from_array``; the constructor
    itself does not renormalize.
    """

    drought_tolerance: float
    predator_defense: float
    stalk_height: float
    seed_fluffyness: float

    @classmethod
    def from_array(cls, values: Sequence[float]) -> "Genome":
        """Wrap an already-normalized row of four trait values."""
        return cls(*(float(v) for v in values))

    @property
    def values(self) -> tuple[float, float, float, float]:
        """Trait values in the fixed trait order."""
        return (self.drought_tolerance, self.predator_defense, self.stalk_height, self.seed_fluffyness)

    @property
    def dominant_gene(self) -> str:
        """Name of the largest trait; ties go to the earliest trait."""
        return TRAIT_NAMES[int(np.argmax(self.values))]


def normalize(values: Sequence[float]) -> Genome:
    """
    Scale a raw nonnegative 4-vector so it sums to 1.

    Args:
        values: Raw trait values in trait order

    Returns:
        Normalized Genome

    Raises:
        DegenerateGenomeError: If every trait is zero
    """
    arr = np.asarray(values, dtype=float)
    if arr.shape != (N_TRAITS,):
        raise ValueError(f"genome needs {N_TRAITS} trait values, got shape {arr.shape}")
    if np.any(arr < 0):
        raise ValueError(f"trait values must be nonnegative, got {arr.tolist()}")
    return Genome.from_array(normalize_rows(arr[np.newaxis, :])[0])


def normalize_rows(traits: np.ndarray) -> np.ndarray:
    """
    Normalize every row of an [N, 4] trait matrix to sum to 1.

    Raises:
        DegenerateGenomeError: If any row is all zero
    """
    totals = traits.sum(axis=1, keepdims=True)
    degenerate = totals[:, 0] <= 0
    if np.any(degenerate):
        raise DegenerateGenomeError(
            f"cannot normalize all-zero genome (rows {np.flatnonzero(degenerate).tolist()})"
        )
    return traits / totals


def dispersal_reach(
    traits: np.ndarray,
    stalk_height_weight: float = 3.0,
    seed_fluffyness_weight: float = 0.3,
) -> np.ndarray:
    """
    Vectorized dispersal reach for an [N, 4] trait matrix.

    reach = stalk_height_weight * stalk_height + seed_fluffyness_weight * seed_fluffyness
    """
    return (
        stalk_height_weight * traits[:, STALK_HEIGHT]
        + seed_fluffyness_weight * traits[:, SEED_FLUFFYNESS]
    )
