"""
One-dimensional landscape with three flower pots.

Pot k (1-indexed) spans [k*gap + (k-1)*width, k*gap + k*width]. The gap is
derived once per trial from the founders' dispersal reach; the origin is
pot 0, the founders' off-landscape starting point.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from .genome import dispersal_reach


POT_COUNT = 3

Bounds = Sequence[tuple[float, float]]


def compute_gap(
    founders: Iterable,
    quantile: float,
    stalk_height_weight: float = 3.0,
    seed_fluffyness_weight: float = 0.3,
) -> float:
    """
    Gap between pots from the founders' dispersal reach.

    Uses the inclusive, linearly interpolated quantile of
    ``stalk_height_weight * stalk_height + seed_fluffyness_weight * seed_fluffyness``.

    Args:
        founders: Founding Plants
        quantile: Quantile in (0, 1)

    Returns:
        The gap between consecutive pots
    """
    traits = np.array([plant.genome.values for plant in founders], dtype=float)
    if traits.size == 0:
        raise ValueError("cannot compute gap without founders")
    reach = dispersal_reach(traits, stalk_height_weight, seed_fluffyness_weight)
    return float(np.quantile(reach, quantile, method="linear"))


def patch_bounds(gap: float, pot_width: float = 1.0) -> tuple[tuple[float, float], ...]:
    """(low, high) interval of each of the three pots, left to right."""
    return tuple(
        (k * gap + (k - 1) * pot_width, k * gap + k * pot_width)
        for k in range(1, POT_COUNT + 1)
    )


def pot_index(positions: np.ndarray, bounds: Bounds) -> np.ndarray:
    """
    Pot number (1-based) strictly containing each position, 0 for none.

    Args:
        positions: Landing positions [N]
        bounds: Pot intervals from ``patch_bounds``

    Returns:
        Integer array [N]
    """
    positions = np.asarray(positions, dtype=float)
    index = np.zeros(positions.shape, dtype=int)
    for k, (low, high) in enumerate(bounds, start=1):
        inside = (positions > low) & (positions < high)
        index = np.where(inside & (index == 0), k, index)
    return index


@dataclass(frozen=True)
class Landscape:
    """
    Pot geometry of a single trial.

    Attributes:
        gap: Distance between the origin and pot 1, and between pots
        pot_width: Width of each pot
    """

    gap: float
    pot_width: float = 1.0

    @property
    def bounds(self) -> tuple[tuple[float, float], ...]:
        return patch_bounds(self.gap, self.pot_width)

    def classify(self, positions: np.ndarray) -> np.ndarray:
        """
        Flower pot of each real plant: 0 at the origin, 1-3 inside a pot.

        Raises:
            ValueError: If a position is neither the origin nor inside a pot
        """
        positions = np.asarray(positions, dtype=float)
        pots = pot_index(positions, self.bounds)
        pots = np.where(positions == 0.0, 0, pots)
        stray = (pots == 0) & (positions != 0.0)
        if np.any(stray):
            raise ValueError(f"positions outside every pot: {positions[stray].tolist()}")
        return pots
