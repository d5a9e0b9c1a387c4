"""
Monte Carlo sweeps over independent trials.

Each trial gets its own random stream spawned from a master seed, so a
sweep is reproducible and gives the same table whether trials run one
after another or across worker processes.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from typing import Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from .config import Config
from .genome import TRAIT_NAMES
from .simulation import TrialResult, run_trial


logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    "flower_pot",
    *TRAIT_NAMES,
    "position",
    "iteration",
    "num_survivors_gen_5",
    "num_survivors_gen_5_pot_3",
]
SWEEP_COLUMNS = SUMMARY_COLUMNS + ["experiment"]


def summarize_trial(result: TrialResult, iteration: int) -> pd.DataFrame:
    """
    Per-pot means of the final generation of one trial.

    One row per occupied pot with the mean of every trait and of position,
    tagged with the trial index, the final generation size and the number of
    final-generation plants in pot 3. A trial without survivors yields an
    empty table.

    Args:
        result: Outcome of a single trial
        iteration: Trial index within the sweep

    Returns:
        Summary rows with ``SUMMARY_COLUMNS``
    """
    table = result.table
    final = table[(table["generation"] == result.final_generation) & table["position"].notna()]
    if final.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    final = final.astype({"flower_pot": int})
    rows = (
        final.groupby("flower_pot")[list(TRAIT_NAMES) + ["position"]]
        .mean()
        .reset_index()
    )
    rows["iteration"] = iteration
    rows["num_survivors_gen_5"] = len(final)
    rows["num_survivors_gen_5_pot_3"] = int((final["flower_pot"] == 3).sum())
    return rows[SUMMARY_COLUMNS]


def _run_and_summarize(config: Config, seed_seq: np.random.SeedSequence, iteration: int) -> pd.DataFrame:
    rng = np.random.default_rng(seed_seq)
    return summarize_trial(run_trial(config, rng=rng), iteration)


def sweep(
    config: Config,
    seed: Optional[int] = None,
    label: Optional[str] = None,
    workers: int = 1,
    show_progress: bool = True,
) -> pd.DataFrame:
    """
    Run ``config.trial_count`` independent trials and collect their summaries.

    Args:
        config: Simulation configuration shared by all trials
        seed: Master seed; each trial's stream is spawned from it
        label: Experiment label written to the ``experiment`` column
        workers: Worker processes (1 runs trials in this process)
        show_progress: Whether to show progress bar

    Returns:
        Table with ``SWEEP_COLUMNS``, ordered by trial index. Trials without
        final-generation survivors contribute no rows.
    """
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    children = np.random.SeedSequence(seed).spawn(config.trial_count)
    logger.info(
        "Starting sweep of %d trials (quantile=%s, drought=%s, workers=%d)",
        config.trial_count, config.pot_distance_quantile, config.drought_schedule, workers,
    )

    if workers == 1:
        iterator = enumerate(children)
        if show_progress:
            iterator = tqdm(iterator, total=config.trial_count, desc="Trials")
        summaries = [_run_and_summarize(config, child, i) for i, child in iterator]
    else:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = executor.map(
                _run_and_summarize,
                [config] * config.trial_count,
                children,
                range(config.trial_count),
            )
            if show_progress:
                futures = tqdm(futures, total=config.trial_count, desc="Trials")
            summaries = list(futures)

    extinct = sum(1 for s in summaries if s.empty)
    logger.info("Sweep finished: %d of %d trials extinct by the final generation",
                extinct, config.trial_count)

    kept = [s for s in summaries if not s.empty]
    if kept:
        table = pd.concat(kept, ignore_index=True)
    else:
        table = pd.DataFrame(columns=SUMMARY_COLUMNS)
    table["experiment"] = label
    return table[SWEEP_COLUMNS]
