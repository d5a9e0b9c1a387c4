"""
Single-trial simulation.

Creates the founders, lays out the pots from their traits and advances the
population one generation at a time following the drought schedule.
"""

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Callable, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from .config import Config
from .generation import advance
from .landscape import Landscape, compute_gap
from .population import FOUNDER_GENERATION, Population, create_founders


logger = logging.getLogger(__name__)


@dataclass
class TrialResult:
    """
    Outcome of one trial.

    Attributes:
        population: Every record produced, founders through the final generation
        gap: Distance between pots for this trial
        landscape: Pot geometry built from the gap
        precision: Decimals used by ``rounded_table``
    """

    population: Population
    gap: float
    landscape: Landscape
    precision: int = 3
    final_generation: int = 5

    @cached_property
    def table(self) -> pd.DataFrame:
        """Population table with flower_pot and dominant_gene classification."""
        return self.population.to_frame(self.landscape)

    def rounded_table(self) -> pd.DataFrame:
        """Population table with trait values rounded for display."""
        return self.population.to_frame(self.landscape, precision=self.precision)

    @property
    def survivors(self) -> int:
        """Number of real plants in the final generation."""
        return len(self.population.plants(self.final_generation))


class Simulation:
    """
    Trial manager.

    Attributes:
        config: Simulation configuration
        seed: Seed the random generator was built from (None if supplied externally)
        rng: Random generator threaded through every stochastic step
        population: Population so far
        landscape: Pot geometry of this trial
        generation: Id of the latest generation
    """

    def __init__(
        self,
        config: Config,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize a trial: founders and landscape.

        Args:
            config: Simulation configuration
            seed: Random seed for reproducibility
            rng: Pre-built random generator; takes precedence over seed
        """
        self.config = config
        self.seed = seed
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._initialize()

    def _initialize(self) -> None:
        self.population = create_founders(self.config, self.rng)
        self.gap = compute_gap(
            self.population.generation(FOUNDER_GENERATION),
            self.config.pot_distance_quantile,
            self.config.stalk_height_weight,
            self.config.seed_fluffyness_weight,
        )
        self.landscape = Landscape(self.gap, self.config.pot_width)
        self.generation = FOUNDER_GENERATION

    @property
    def step_count(self) -> int:
        """Number of transitions executed."""
        return self.generation - FOUNDER_GENERATION

    @property
    def finished(self) -> bool:
        return self.generation >= self.config.final_generation

    def step(self) -> None:
        """
        Advance the population by one generation.

        Raises:
            RuntimeError: If the final generation was already reached
        """
        if self.finished:
            raise RuntimeError(
                f"trial already reached generation {self.config.final_generation}"
            )

        drought = self.config.drought_schedule[self.step_count]
        advance(
            self.population,
            self.generation,
            self.landscape.bounds,
            self.config.seeds_per_parent,
            drought,
            self.rng,
            mutation_range=self.config.mutation_range,
            drought_threshold=self.config.drought_threshold,
            stalk_height_weight=self.config.stalk_height_weight,
            seed_fluffyness_weight=self.config.seed_fluffyness_weight,
        )
        self.generation += 1

        if self.population.is_extinct(self.generation) and not self.population.is_extinct(self.generation - 1):
            logger.info("Trial went extinct at generation %d", self.generation)

    def run(
        self,
        steps: Optional[int] = None,
        callback: Optional[Callable[["Simulation"], None]] = None,
        show_progress: bool = False,
    ) -> TrialResult:
        """
        Run the trial.

        Args:
            steps: Number of transitions to run (default: until the final generation)
            callback: Optional function called after every transition
            show_progress: Whether to show progress bar

        Returns:
            Result of the trial so far
        """
        if steps is None:
            steps = self.config.final_generation - self.generation

        iterator = range(steps)
        if show_progress:
            iterator = tqdm(iterator, desc="Generations")

        for _ in iterator:
            self.step()
            if callback is not None:
                callback(self)

        return self.result()

    def result(self) -> TrialResult:
        return TrialResult(
            population=self.population,
            gap=self.gap,
            landscape=self.landscape,
            precision=self.config.precision,
            final_generation=self.config.final_generation,
        )

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the trial to a fresh founding population.

        Args:
            seed: New random seed (uses original if not provided)
        """
        if seed is not None:
            self.seed = seed
        self.rng = np.random.default_rng(self.seed)
        self._initialize()

    def get_state_dict(self) -> dict:
        """Get serializable state dictionary."""
        table = self.population.to_frame(self.landscape)
        return {
            "generation": self.generation,
            "seed": self.seed,
            "gap": self.gap,
            "bounds": [list(b) for b in self.landscape.bounds],
            "config": self.config.to_dict(),
            "population": table.astype(object).where(table.notna(), None).to_dict(orient="records"),
        }


def run_trial(
    config: Config,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> TrialResult:
    """
    Run one complete trial, founders through the final generation.

    Args:
        config: Simulation configuration
        rng: Random generator for this trial
        seed: Random seed, used when no generator is given

    Returns:
        TrialResult with the full population and the pot gap
    """
    return Simulation(config, seed=seed, rng=rng).run()
