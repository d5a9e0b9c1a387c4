#!/usr/bin/env python3
"""
Basic flower pot simulation example.

This script demonstrates:
1. Running a single trial and inspecting its population table
2. Running sweeps with and without a late drought
3. Comparing the sweeps by experiment label
"""

from flowerpots import Config, Simulation, sweep
from flowerpots.metrics import (
    combine_sweeps,
    compute_all_metrics,
    dominant_gene_composition,
    print_metrics_summary,
    print_sweep_summary,
    survival_statistics,
    trait_means_by_pot,
)


def main():
    print("=" * 60)
    print("Flower pots - seed dispersal across three pots")
    print("Basic Simulation Example")
    print("=" * 60)
    print()

    config = Config(
        pot_distance_quantile=0.85,  # Pot spacing from the founders' reach
        seeds_per_parent=5,
        founding_population_size=20,
        trial_count=200,
    )
    print(config)
    print()

    # Single trial
    sim = Simulation(config, seed=42)
    result = sim.run(show_progress=True)
    print_metrics_summary(compute_all_metrics(result))

    print("Dominant genes per pot in generation 5:")
    print(dominant_gene_composition(result.table, generation=5))
    print()

    # Sweeps
    drought = Config(**{**config.to_dict(), "drought_schedule": (False, False, False, True)})
    wet = sweep(config, seed=42, label="no drought")
    dry = sweep(drought, seed=42, label="late drought")

    for label, table in (("no drought", wet), ("late drought", dry)):
        print(f"--- {label} ---")
        print_sweep_summary(survival_statistics(table, config.trial_count))

    print("Mean trait values per pot:")
    print(trait_means_by_pot(combine_sweeps({"no drought": wet, "late drought": dry})).round(3))


if __name__ == "__main__":
    main()
