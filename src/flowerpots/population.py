"""
Plant records and the append-only population log.

A population holds every record produced by a trial, generation after
generation. Each record is either a real Plant or an Extinct marker for a
generation that had no survivors.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

import numpy as np
import pandas as pd

from .config import Config
from .genome import Genome, TRAIT_NAMES, N_TRAITS, normalize_rows
from .landscape import Landscape


FOUNDER_GENERATION = 1
ORIGIN = 0.0


@dataclass(frozen=True)
class Plant:
    """
    A living plant.

    Attributes:
        genome: Normalized trait vector
        generation: Generation id (1 = founders)
        position: Location on the landscape (founders sit at the origin)
        parent: Index of the parent record in the population, None for founders
    """

    genome: Genome
    generation: int
    position: float
    parent: Optional[int] = None

    is_extinct = False

    @property
    def dominant_gene(self) -> str:
        return self.genome.dominant_gene


@dataclass(frozen=True)
class Extinct:
    """Marker for a generation with zero survivors. Never has descendants."""

    generation: int

    is_extinct = True


PlantRecord = Union[Plant, Extinct]


class Population:
    """
    Ordered, append-only log of plant records across all generations.

    Records of one generation are contiguous; a generation is appended at
    once and never modified afterwards.
    """

    def __init__(self) -> None:
        self._records: list[PlantRecord] = []
        self._slices: dict[int, slice] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PlantRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> PlantRecord:
        return self._records[index]

    @property
    def generations(self) -> list[int]:
        """Generation ids in the order they were appended."""
        return list(self._slices)

    @property
    def latest_generation(self) -> int:
        """Id of the most recently appended generation (0 if empty)."""
        return max(self._slices, default=0)

    def append_generation(self, generation: int, records: Iterable[PlantRecord]) -> None:
        """
        Append all records of a new generation.

        Raises:
            ValueError: If the generation already exists or a record disagrees
                with the declared generation
        """
        if generation in self._slices:
            raise ValueError(f"generation {generation} already appended")
        records = list(records)
        for record in records:
            if record.generation != generation:
                raise ValueError(
                    f"record of generation {record.generation} appended as generation {generation}"
                )
        start = len(self._records)
        self._records.extend(records)
        self._slices[generation] = slice(start, len(self._records))

    def generation(self, generation: int) -> list[PlantRecord]:
        """All records (real or extinct) of one generation."""
        if generation not in self._slices:
            return []
        return self._records[self._slices[generation]]

    def plants(self, generation: int) -> list[tuple[int, Plant]]:
        """Real plants of one generation together with their record indices."""
        if generation not in self._slices:
            return []
        s = self._slices[generation]
        return [
            (index, record)
            for index, record in zip(range(s.start, s.stop), self._records[s])
            if not record.is_extinct
        ]

    def is_extinct(self, generation: int) -> bool:
        """True if the generation exists and holds no real plants."""
        return generation in self._slices and not self.plants(generation)

    def to_frame(
        self,
        landscape: Optional[Landscape] = None,
        precision: Optional[int] = None,
    ) -> pd.DataFrame:
        """
        Export the population as a table, one row per record.

        Columns: the four traits, generation, position, flower_pot,
        dominant_gene and parent. Extinct rows carry NaN traits and position
        and missing flower_pot, dominant_gene and parent.

        Args:
            landscape: Landscape used to classify plants into pots. Without it
                the flower_pot column is left missing.
            precision: Round trait values to this many decimals (display only)
        """
        n = len(self._records)
        traits = np.full((n, N_TRAITS), np.nan)
        generation = np.empty(n, dtype=int)
        position = np.full(n, np.nan)
        parent = [pd.NA] * n
        dominant: list[Optional[str]] = [None] * n

        real = np.zeros(n, dtype=bool)
        for i, record in enumerate(self._records):
            generation[i] = record.generation
            if record.is_extinct:
                continue
            real[i] = True
            traits[i] = record.genome.values
            position[i] = record.position
            dominant[i] = record.dominant_gene
            if record.parent is not None:
                parent[i] = record.parent

        flower_pot = pd.array([pd.NA] * n, dtype="Int64")
        if landscape is not None and real.any():
            flower_pot[real] = landscape.classify(position[real])

        if precision is not None:
            traits = np.round(traits, precision)

        frame = pd.DataFrame(traits, columns=list(TRAIT_NAMES))
        frame["generation"] = generation
        frame["position"] = position
        frame["flower_pot"] = flower_pot
        frame["dominant_gene"] = pd.Series(dominant, dtype=object)
        frame["parent"] = pd.array(parent, dtype="Int64")
        return frame


def create_founders(config: Config, rng: np.random.Generator) -> Population:
    """
    Create the founding generation.

    Each founder draws four independent uniform [0, 1) values which are then
    normalized. All founders sit at the origin.

    Args:
        config: Simulation configuration
        rng: Random generator for this trial

    Returns:
        Population containing generation 1 only
    """
    raw = rng.random((config.founding_population_size, N_TRAITS))
    traits = normalize_rows(raw)

    population = Population()
    population.append_generation(
        FOUNDER_GENERATION,
        (Plant(Genome.from_array(row), FOUNDER_GENERATION, ORIGIN) for row in traits),
    )
    return population
