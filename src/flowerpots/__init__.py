"""
flowerpots - seed dispersal and inheritance across three flower pots

Multi-generation simulation of a four-trait plant genome dispersing over a
one-dimensional landscape, with Monte Carlo sweeps over many trials.
"""

__version__ = "0.1.0"

from .config import Config
from .genome import Genome, DegenerateGenomeError, TRAIT_NAMES, normalize
from .landscape import Landscape, compute_gap, patch_bounds
from .population import Extinct, Plant, Population, create_founders
from .generation import advance
from .simulation import Simulation, TrialResult, run_trial
from .montecarlo import sweep, summarize_trial

__all__ = [
    "Config",
    "Genome",
    "DegenerateGenomeError",
    "TRAIT_NAMES",
    "normalize",
    "Landscape",
    "compute_gap",
    "patch_bounds",
    "Plant",
    "Extinct",
    "Population",
    "create_founders",
    "advance",
    "Simulation",
    "TrialResult",
    "run_trial",
    "sweep",
    "summarize_trial",
    "__version__",
]
