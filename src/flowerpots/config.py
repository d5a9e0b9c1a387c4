"""
Configuration dataclass for flower pot dispersal simulations.

Holds both the experiment inputs (pot spacing quantile, drought schedule,
population sizes) and the model constants of the dispersal process.
"""

from dataclasses import dataclass, asdict
from typing import Any


def _parse_schedule(schedule: Any) -> tuple[bool, ...]:
    """Drought flags as bools; only bools and the integers 0 and 1 are accepted."""
    if isinstance(schedule, str) or not hasattr(schedule, "__iter__"):
        raise ValueError(f"drought_schedule must be a sequence of flags, got {schedule!r}")
    flags = []
    for flag in schedule:
        if not (isinstance(flag, bool) or (isinstance(flag, int) and flag in (0, 1))):
            raise ValueError(f"drought_schedule entries must be bool or 0/1, got {flag!r}")
        flags.append(bool(flag))
    return tuple(flags)


@dataclass
class Config:
    """
    Complete configuration for a single trial or a Monte Carlo sweep.

    Attributes:
        pot_distance_quantile: Quantile of the founders' dispersal reach used
            as the gap between pots. Closer to 1 spreads the pots further apart.
        drought_schedule: One flag per generation transition (1->2 ... 4->5);
            a True entry applies the drought filter to that transition.
        seeds_per_parent: Seeds dispersed by every surviving parent
        founding_population_size: Number of founders in generation 1
        trial_count: Number of independent trials in a sweep

        # Model constants
        mutation_range: Half-width of the uniform mutation noise per trait
        drought_threshold: Parent drought_tolerance must exceed this under drought
        pot_width: Width of each of the three pots
        stalk_height_weight: Dispersal reach contributed per unit stalk_height
        seed_fluffyness_weight: Dispersal reach contributed per unit seed_fluffyness
        precision: Decimal places used when displaying trait values
    """

    # Experiment inputs
    pot_distance_quantile: float = 0.85
    drought_schedule: tuple[bool, ...] = (False, False, False, False)
    seeds_per_parent: int = 5
    founding_population_size: int = 20
    trial_count: int = 500

    # Mutation and survival
    mutation_range: float = 0.1
    drought_threshold: float = 0.25

    # Landscape and dispersal
    pot_width: float = 1.0
    stalk_height_weight: float = 3.0
    seed_fluffyness_weight: float = 0.3

    # Display
    precision: int = 3

    def __post_init__(self) -> None:
        """Coerce the schedule and validate configuration parameters."""
        self.drought_schedule = _parse_schedule(self.drought_schedule)
        self._validate()

    def _validate(self) -> None:
        """Check that all parameters are in valid ranges."""
        for name in ("seeds_per_parent", "founding_population_size", "trial_count", "precision"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an integer, got {value!r}")

        if not 0 < self.pot_distance_quantile < 1:
            raise ValueError(
                f"pot_distance_quantile must be in (0, 1), got {self.pot_distance_quantile}"
            )

        if len(self.drought_schedule) != 4:
            raise ValueError(
                f"drought_schedule must have 4 entries, got {len(self.drought_schedule)}"
            )

        if self.seeds_per_parent < 1:
            raise ValueError(f"seeds_per_parent must be >= 1, got {self.seeds_per_parent}")

        if self.founding_population_size < 1:
            raise ValueError(
                f"founding_population_size must be >= 1, got {self.founding_population_size}"
            )

        if self.trial_count < 1:
            raise ValueError(f"trial_count must be >= 1, got {self.trial_count}")

        if self.mutation_range < 0:
            raise ValueError(f"mutation_range must be >= 0, got {self.mutation_range}")

        if self.pot_width <= 0:
            raise ValueError(f"pot_width must be > 0, got {self.pot_width}")

        if self.stalk_height_weight < 0 or self.seed_fluffyness_weight < 0:
            raise ValueError(
                "dispersal weights must be >= 0, got "
                f"{self.stalk_height_weight} and {self.seed_fluffyness_weight}"
            )

        if self.precision < 0:
            raise ValueError(f"precision must be >= 0, got {self.precision}")

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        d = asdict(self)
        d["drought_schedule"] = list(self.drought_schedule)
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        d = dict(d)
        if "drought_schedule" in d and isinstance(d["drought_schedule"], list):
            d["drought_schedule"] = tuple(d["drought_schedule"])
        return cls(**d)

    @classmethod
    def from_args(cls, args: Any) -> "Config":
        """Create config from argparse namespace."""
        # Extract only known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        config_dict = {k: v for k, v in vars(args).items() if k in known_fields and v is not None}
        return cls(**config_dict)

    @property
    def num_generations(self) -> int:
        """Generations per trial, founders included."""
        return len(self.drought_schedule) + 1

    @property
    def final_generation(self) -> int:
        """Id of the last generation produced by a trial."""
        return self.num_generations

    def __repr__(self) -> str:
        schedule = "".join("T" if flag else "F" for flag in self.drought_schedule)
        return (
            f"Config(\n"
            f"  pot_distance_quantile={self.pot_distance_quantile}, drought_schedule={schedule},\n"
            f"  seeds_per_parent={self.seeds_per_parent}, "
            f"founding_population_size={self.founding_population_size}, "
            f"trial_count={self.trial_count},\n"
            f"  mutation_range={self.mutation_range}, drought_threshold={self.drought_threshold},\n"
            f"  pot_width={self.pot_width}, stalk_height_weight={self.stalk_height_weight}, "
            f"seed_fluffyness_weight={self.seed_fluffyness_weight}\n"
            f")"
        )
