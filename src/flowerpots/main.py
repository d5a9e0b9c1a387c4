"""
Command-line interface for flower pot dispersal simulations.

Usage:
    python -m flowerpots.main --help
    python -m flowerpots.main --seed 7 --print-metrics
    python -m flowerpots.main --trials 500 --drought-schedule FFFT --save-table sweep.csv
"""

import argparse
import json
import logging
import os
import sys
from typing import Optional

from .config import Config
from .metrics import (
    compute_all_metrics,
    print_metrics_summary,
    print_sweep_summary,
    survival_statistics,
)
from .montecarlo import sweep
from .simulation import Simulation


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure logging for command-line runs.

    Args:
        level: Explicit log level. Falls back to ``FLOWERPOTS_LOG_LEVEL`` or WARNING.

    Returns:
        The package logger
    """
    resolved = (level or os.getenv("FLOWERPOTS_LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    logger = logging.getLogger("flowerpots")
    logger.setLevel(resolved)
    return logger


def parse_schedule(text: str) -> tuple[bool, ...]:
    """Parse a drought schedule such as ``0001`` or ``FFFT``."""
    flags = {"1": True, "t": True, "0": False, "f": False}
    try:
        return tuple(flags[c] for c in text.strip().lower())
    except KeyError:
        raise argparse.ArgumentTypeError(
            f"drought schedule must use 0/1 or F/T per transition, got {text!r}"
        ) from None


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all options."""
    parser = argparse.ArgumentParser(
        description="Seed dispersal and inheritance across three flower pots",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Basic options
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for reproducibility"
    )
    parser.add_argument(
        "--trials", type=int, default=None, dest="trial_count",
        help="Run a Monte Carlo sweep of this many trials instead of a single trial"
    )
    parser.add_argument(
        "--label", type=str, default=None,
        help="Experiment label for sweep rows"
    )
    parser.add_argument(
        "--workers", type=int, default=1,
        help="Worker processes for sweeps"
    )
    parser.add_argument(
        "--progress", action="store_true",
        help="Show progress bar"
    )

    # Output options
    parser.add_argument(
        "--save-table", type=str, default=None,
        help="Write the population (or sweep) table to this CSV file"
    )
    parser.add_argument(
        "--print-metrics", action="store_true",
        help="Print all metrics at end"
    )
    parser.add_argument(
        "--save-metrics", type=str, default=None,
        help="Save metrics to JSON file"
    )
    parser.add_argument(
        "--log-level", type=str, default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: $FLOWERPOTS_LOG_LEVEL or WARNING)"
    )

    # Config parameter overrides
    parser.add_argument("--quantile", type=float, default=None, dest="pot_distance_quantile")
    parser.add_argument(
        "--drought-schedule", type=parse_schedule, default=None, dest="drought_schedule",
        help="Drought flag per transition, e.g. 0001 or FFFT"
    )
    parser.add_argument("--seeds-per-parent", type=int, default=None, dest="seeds_per_parent")
    parser.add_argument("--founders", type=int, default=None, dest="founding_population_size")
    parser.add_argument("--mutation-range", type=float, default=None, dest="mutation_range")
    parser.add_argument("--drought-threshold", type=float, default=None, dest="drought_threshold")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = Config.from_args(args)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    schedule = "".join("T" if flag else "F" for flag in config.drought_schedule)
    print("Flower pot simulation")
    print(f"  Quantile: {config.pot_distance_quantile}")
    print(f"  Drought schedule: {schedule}")
    print(f"  Founders: {config.founding_population_size}, seeds per parent: {config.seeds_per_parent}")
    print(f"  Seed: {args.seed if args.seed is not None else 'random'}")
    print()

    if args.trial_count is not None:
        print(f"Running sweep of {config.trial_count} trials...")
        table = sweep(
            config,
            seed=args.seed,
            label=args.label,
            workers=args.workers,
            show_progress=args.progress,
        )
        metrics = survival_statistics(table, config.trial_count)
        if args.print_metrics:
            print_sweep_summary(metrics)
    else:
        print("Running trial...")
        sim = Simulation(config, seed=args.seed)
        result = sim.run(show_progress=args.progress)
        table = result.rounded_table()
        print(f"  Gap: {result.gap:.4f}")
        print(f"  Survivors in generation {config.final_generation}: {result.survivors}")
        metrics = compute_all_metrics(result)
        if args.print_metrics:
            print_metrics_summary(metrics)

    if args.save_table:
        table.to_csv(args.save_table, index=False)
        print(f"Table saved to {args.save_table}")

    if args.save_metrics:
        metrics_json = json.loads(json.dumps(metrics, default=str))
        with open(args.save_metrics, "w") as f:
            json.dump(metrics_json, f, indent=2)
        print(f"Metrics saved to {args.save_metrics}")

    print("Simulation complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
