"""
Metrics and analysis utilities for trial and sweep tables.

Extinct rows (missing position) are excluded from every aggregate.
"""

from typing import Mapping, Optional

import numpy as np
import pandas as pd

from .genome import TRAIT_NAMES
from .simulation import TrialResult


def _real(table: pd.DataFrame) -> pd.DataFrame:
    return table[table["position"].notna()]


def generation_sizes(table: pd.DataFrame) -> pd.Series:
    """
    Number of real plants in each generation.

    Args:
        table: Single-trial population table

    Returns:
        Series indexed by generation; extinct generations count 0
    """
    generations = sorted(table["generation"].unique())
    return (
        _real(table)
        .groupby("generation")
        .size()
        .reindex(generations, fill_value=0)
        .rename("plants")
    )


def dominant_gene_composition(table: pd.DataFrame, generation: Optional[int] = None) -> pd.DataFrame:
    """
    Count plants by flower pot and dominant gene.

    Args:
        table: Single-trial population table
        generation: Restrict to one generation (default: all)

    Returns:
        Pot x gene count table with a column for every trait
    """
    real = _real(table)
    if generation is not None:
        real = real[real["generation"] == generation]
    counts = pd.crosstab(real["flower_pot"].astype(int), real["dominant_gene"])
    return counts.reindex(columns=list(TRAIT_NAMES), fill_value=0)


def trait_means_by_pot(sweep_table: pd.DataFrame) -> pd.DataFrame:
    """
    Mean of the per-trial trait means, per experiment and pot.

    Args:
        sweep_table: Output of ``sweep`` or ``combine_sweeps``

    Returns:
        Table indexed by (experiment, flower_pot)
    """
    return sweep_table.groupby(["experiment", "flower_pot"], dropna=False)[list(TRAIT_NAMES)].mean()


def survival_statistics(sweep_table: pd.DataFrame, trial_count: int) -> dict[str, float]:
    """
    Survival statistics of a sweep.

    Args:
        sweep_table: Output of ``sweep`` for a single experiment
        trial_count: Number of trials the sweep ran

    Returns:
        Dictionary with extinction rate and final-generation survivor counts

    Raises:
        ValueError: If the table mixes experiments or holds more trials
            than ``trial_count``
    """
    if "experiment" in sweep_table.columns and sweep_table["experiment"].nunique(dropna=False) > 1:
        raise ValueError(
            "survival_statistics needs a single experiment; filter the combined table "
            "by its experiment column first"
        )
    per_trial = sweep_table.drop_duplicates("iteration")
    if len(per_trial) > trial_count:
        raise ValueError(
            f"sweep table holds {len(per_trial)} trials but trial_count is {trial_count}"
        )
    survivors = np.zeros(trial_count)
    pot_3 = np.zeros(trial_count)
    survivors[: len(per_trial)] = per_trial["num_survivors_gen_5"].to_numpy(dtype=float)
    pot_3[: len(per_trial)] = per_trial["num_survivors_gen_5_pot_3"].to_numpy(dtype=float)

    total = survivors.sum()
    return {
        "trials": trial_count,
        "trials_with_survivors": len(per_trial),
        "extinction_rate": 1.0 - len(per_trial) / trial_count,
        "mean_survivors": float(survivors.mean()),
        "std_survivors": float(survivors.std()),
        "max_survivors": float(survivors.max()),
        "mean_survivors_pot_3": float(pot_3.mean()),
        "pot_3_share": float(pot_3.sum() / total) if total > 0 else 0.0,
    }


def combine_sweeps(sweeps: Mapping[str, pd.DataFrame]) -> pd.DataFrame:
    """
    Label and concatenate sweep tables for comparison across experiments.

    Args:
        sweeps: Experiment label -> sweep table

    Returns:
        Single table whose ``experiment`` column holds the labels
    """
    labelled = [table.assign(experiment=label) for label, table in sweeps.items()]
    return pd.concat(labelled, ignore_index=True)


def compute_all_metrics(result: TrialResult) -> dict:
    """
    Compute all available metrics for one trial.

    Args:
        result: Outcome of a single trial

    Returns:
        Comprehensive dictionary of all metrics
    """
    table = result.table
    final = _real(table[table["generation"] == result.final_generation])
    sizes = generation_sizes(table)

    return {
        "gap": result.gap,
        "bounds": [list(b) for b in result.landscape.bounds],
        "generation_sizes": {int(k): int(v) for k, v in sizes.items()},
        "final_generation": {
            "survivors": len(final),
            "by_pot": {int(k): int(v) for k, v in final["flower_pot"].value_counts().sort_index().items()},
            "mean_traits": {name: float(final[name].mean()) for name in TRAIT_NAMES} if len(final) else {},
            "dominant_genes": {str(k): int(v) for k, v in final["dominant_gene"].value_counts().items()},
        },
    }


def print_metrics_summary(metrics: dict) -> None:
    """
    Print formatted metrics summary.

    Args:
        metrics: Output from compute_all_metrics
    """
    print("\n=== Trial Metrics Summary ===\n")

    print(f"Gap: {metrics['gap']:.4f}")
    for k, (low, high) in enumerate(metrics["bounds"], start=1):
        print(f"  Pot {k}: ({low:.3f}, {high:.3f})")

    print("\nPlants per generation:")
    for generation, count in metrics["generation_sizes"].items():
        print(f"  Generation {generation}: {count}")

    final = metrics["final_generation"]
    print("\nFinal generation:")
    print(f"  Survivors: {final['survivors']}")
    for pot, count in final["by_pot"].items():
        print(f"  Pot {pot}: {count}")
    for name, mean in final["mean_traits"].items():
        print(f"  {name}: mean={mean:.3f}")
    for gene, count in final["dominant_genes"].items():
        print(f"  dominant {gene}: {count}")

    print()


def print_sweep_summary(stats: dict[str, float]) -> None:
    """
    Print formatted sweep statistics.

    Args:
        stats: Output from survival_statistics
    """
    print("\n=== Sweep Summary ===\n")
    print(f"  Trials: {stats['trials']}")
    print(f"  Trials with survivors: {stats['trials_with_survivors']}")
    print(f"  Extinction rate: {stats['extinction_rate']:.3f}")
    print(f"  Survivors: mean={stats['mean_survivors']:.2f}, std={stats['std_survivors']:.2f}, "
          f"max={stats['max_survivors']:.0f}")
    print(f"  Pot 3 survivors: mean={stats['mean_survivors_pot_3']:.2f}, share={stats['pot_3_share']:.3f}")
    print()
