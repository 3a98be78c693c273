"""
Monte-Carlo Throughput Experiments

Drives the toll plaza engine with a measured per-second arrival series and
counts completed vehicles for each lane topology. Every simulated second
the configuration is replaced with the arrival probability for that second
(update_params) and the engine is stepped once.

Outputs:
- raw table: one row per (plaza, L, B, run) with vehicles_completed
- summary table: per (L, B) run count, mean, std, min, max, p5, p95
- log file with the progress lines printed during the run
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Mapping, Optional
import time

import numpy as np
import pandas as pd

from core.config import PlazaConfig
from core.simulation import TollPlazaSimulation

RAW_COLUMNS = ['plaza', 'L', 'B', 'run', 'vehicles_completed']


@dataclass
class ThroughputExperimentConfig:
    """Configuration for a batch of Monte-Carlo runs"""
    plaza: str = "M9"                       # Column of the arrival table
    duration: int = 86000                   # Simulated seconds (one tick each)
    monte_carlo_runs: int = 100             # Repetitions per topology
    num_highway_lanes: int = 5              # L
    booth_lane_values: List[int] = field(default_factory=lambda: [5, 11])
    base_config: PlazaConfig = field(default_factory=PlazaConfig)
    base_seed: int = 0                      # Run r uses base_seed + r
    output_dir: str = "./throughput_results_mc"
    verbose: bool = True

    def plaza_configs(self) -> List[PlazaConfig]:
        """One validated engine configuration per booth lane count"""
        configs = []
        for num_booths in self.booth_lane_values:
            config = replace(
                self.base_config,
                num_highway_lanes=self.num_highway_lanes,
                num_booth_lanes=num_booths,
                arrival_probability=0.0,
                verbose=False,
            )
            configs.append(config.with_defaults().validate())
        return configs


class ThroughputExperiment:
    """
    Monte-Carlo throughput evaluation over several booth counts

    Usage:
        experiment = ThroughputExperiment(ThroughputExperimentConfig(plaza="M9"))
        raw = experiment.run(load_arrival_series("arrivals.csv", "M9"))
        summary = experiment.summarize()
        experiment.export_results()
    """

    def __init__(self, config: Optional[ThroughputExperimentConfig] = None):
        """
        Args:
            config: Experiment configuration

        Raises:
            ConfigurationError: if any topology is invalid (e.g. B < L)
        """
        self.config = config or ThroughputExperimentConfig()
        self._plaza_configs = self.config.plaza_configs()
        self._raw: Optional[pd.DataFrame] = None
        self._log_lines: List[str] = []

    def _log(self, message: str) -> None:
        self._log_lines.append(message)
        if self.config.verbose:
            print(message)

    def run_single(self, plaza_config: PlazaConfig, arrivals: Mapping[int, float],
                   seed: int) -> int:
        """
        Run one replication and return the completed vehicle count

        Arrival values outside [0, 1] are clamped; a measured rate >= 1 spawns
        on every tick the entry cell allows.
        """
        sim = TollPlazaSimulation(replace(plaza_config, random_seed=seed))
        for t in range(self.config.duration):
            arrival = min(1.0, max(0.0, arrivals.get(t, 0.0)))
            sim.update_params(replace(plaza_config, arrival_probability=arrival))
            sim.step()
        return sim.get_stats().vehicles_completed

    def run(self, arrivals: Mapping[int, float]) -> pd.DataFrame:
        """
        Run every (B, replication) pair

        Args:
            arrivals: Arrival probability per simulated second

        Returns:
            Raw results table with columns plaza, L, B, run, vehicles_completed
        """
        cfg = self.config
        self._log_lines = []
        self._log("Monte Carlo Throughput Evaluation")
        self._log(f"Plaza = {cfg.plaza}")
        self._log(f"L = {cfg.num_highway_lanes}")
        self._log(f"B values = {', '.join(str(b) for b in cfg.booth_lane_values)}")
        self._log(f"Monte Carlo runs = {cfg.monte_carlo_runs}")
        self._log(f"Duration = {cfg.duration}s")
        self._log("-" * 40)

        start_time = time.time()
        rows = []
        for plaza_config in self._plaza_configs:
            L, B = plaza_config.num_highway_lanes, plaza_config.num_booth_lanes
            self._log(f"Running configuration: L={L}, B={B}")

            for run_idx in range(1, cfg.monte_carlo_runs + 1):
                completed = self.run_single(plaza_config, arrivals, cfg.base_seed + run_idx)
                rows.append((cfg.plaza, L, B, run_idx, completed))
                self._log(f"  L={L}, B={B} | run {run_idx}/{cfg.monte_carlo_runs} -> {completed}")

        self._log("-" * 40)
        self._log(f"All runs completed in {time.time() - start_time:.2f}s")

        self._raw = pd.DataFrame(rows, columns=RAW_COLUMNS)
        return self._raw

    def get_results(self) -> pd.DataFrame:
        """Raw results of the last run"""
        if self._raw is None:
            raise RuntimeError("No results. Call run() first.")
        return self._raw

    def summarize(self) -> pd.DataFrame:
        """Per-topology statistics of vehicles_completed"""
        return summarize_runs(self.get_results())

    def export_results(self, output_dir: Optional[str] = None) -> Dict[str, Path]:
        """
        Write raw results, summary and log

        Returns:
            Mapping of 'raw', 'summary' and 'log' to the written paths
        """
        raw = self.get_results()
        out = Path(output_dir or self.config.output_dir)
        out.mkdir(parents=True, exist_ok=True)

        stem = f"throughput_{self.config.plaza}"
        paths = {
            'raw': out / f"{stem}_raw.csv",
            'summary': out / f"{stem}_summary.csv",
            'log': out / f"{stem}.log",
        }
        raw.to_csv(paths['raw'], index=False)
        self.summarize().to_csv(paths['summary'], index=False)

        export_lines = [
            f"CSV saved to: {paths['raw']}",
            f"Summary saved to: {paths['summary']}",
        ]
        if self.config.verbose:
            for line in export_lines:
                print(line)
        paths['log'].write_text("\n".join(self._log_lines + export_lines) + "\n")
        return paths


def summarize_runs(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Aggregate raw Monte-Carlo results per (plaza, L, B)

    std is the sample standard deviation (0 for a single run).
    """
    rows = []
    for (plaza, L, B), group in raw.groupby(['plaza', 'L', 'B'], sort=True):
        counts = group['vehicles_completed'].to_numpy(dtype=float)
        rows.append({
            'plaza': plaza,
            'L': L,
            'B': B,
            'runs': len(counts),
            'mean': float(np.mean(counts)),
            'std': float(np.std(counts, ddof=1)) if len(counts) > 1 else 0.0,
            'min': float(np.min(counts)),
            'max': float(np.max(counts)),
            'p5': float(np.percentile(counts, 5)),
            'p95': float(np.percentile(counts, 95)),
        })
    return pd.DataFrame(rows, columns=['plaza', 'L', 'B', 'runs', 'mean', 'std',
                                       'min', 'max', 'p5', 'p95'])
