#!/usr/bin/env python3
"""
Run Monte-Carlo Throughput Experiments for the Toll Plaza Simulation

Usage:
    python run_batch_experiment.py <arrivals.csv> <plaza> [duration] [runs] [L] [B1,B2,...]

Example:
    python run_batch_experiment.py lambda_per_second_all_plazas.csv M9
    python run_batch_experiment.py lambda_per_second_all_plazas.csv M9 86000 100 5 5,11
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from core.config import ConfigurationError, PlazaConfig
from experiments.throughput import ThroughputExperiment, ThroughputExperimentConfig
from input.arrival_parser import ArrivalTableParser


def main():
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(1)

    csv_file = sys.argv[1]
    plaza = sys.argv[2]
    duration = int(sys.argv[3]) if len(sys.argv) > 3 else 86000
    runs = int(sys.argv[4]) if len(sys.argv) > 4 else 100
    num_highway = int(sys.argv[5]) if len(sys.argv) > 5 else 5
    booth_values = [int(b) for b in sys.argv[6].split(",")] if len(sys.argv) > 6 else [5, 11]

    print("=" * 60)
    print("Toll Plaza Throughput Evaluation")
    print("=" * 60)

    # Parse arrivals
    print(f"\nParsing arrival table: {csv_file}")
    parser = ArrivalTableParser(csv_file)
    print(f"  Plazas: {', '.join(parser.plazas())}")
    try:
        arrivals = parser.series(plaza)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    print(f"  Seconds with arrival data for {plaza}: {len(arrivals)}")

    config = ThroughputExperimentConfig(
        plaza=plaza,
        duration=duration,
        monte_carlo_runs=runs,
        num_highway_lanes=num_highway,
        booth_lane_values=booth_values,
        base_config=PlazaConfig(),
        verbose=True,
    )

    try:
        experiment = ThroughputExperiment(config)
    except ConfigurationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print()
    experiment.run(arrivals)

    # Print summary
    summary = experiment.summarize()
    print("\n" + "=" * 60)
    print("Throughput Summary")
    print("=" * 60)
    for row in summary.itertuples(index=False):
        print(f"  L={row.L}, B={row.B}: mean={row.mean:.1f} std={row.std:.1f} "
              f"[{row.min:.0f}, {row.max:.0f}] over {row.runs} runs")

    paths = experiment.export_results()
    print(f"\nLog saved to: {paths['log']}")

    return summary


if __name__ == "__main__":
    main()
