"""
Arrival Table Parser

Parses per-second arrival probability tables for the batch throughput
harness. The table is a CSV whose first column is the integer second and
whose remaining columns are plazas:

    time,M9,M12,...
    0,0.41,0.38,...
    1,0.43,0.35,...

Each value is the spawn probability (lambda) for that plaza in that second.
"""

from pathlib import Path
from typing import Dict, List, Union

import pandas as pd

PathLike = Union[str, Path]


class ArrivalTableParser:
    """
    Parser for arrival probability tables

    Usage:
        parser = ArrivalTableParser("lambda_per_second_all_plazas.csv")
        series = parser.series("M9")
    """

    def __init__(self, filepath: PathLike):
        self.filepath = Path(filepath)
        self._table = None

    @property
    def table(self) -> pd.DataFrame:
        if self._table is None:
            self._table = self._read()
        return self._table

    def _read(self) -> pd.DataFrame:
        table = pd.read_csv(self.filepath, skip_blank_lines=True)
        if table.shape[1] < 2:
            raise ValueError(
                f"Arrival table {self.filepath} needs a time column and at least one plaza column")
        table.columns = [str(c).strip() for c in table.columns]
        return table

    @property
    def time_column(self) -> str:
        return self.table.columns[0]

    def plazas(self) -> List[str]:
        """Plaza names from the header row"""
        return list(self.table.columns[1:])

    def series(self, plaza: str) -> Dict[int, float]:
        """
        Arrival probability per second for one plaza

        Rows whose time or value is not numeric are skipped.

        Raises:
            ValueError: if the plaza is not a column of the table
        """
        if plaza not in self.plazas():
            raise ValueError(f'Plaza "{plaza}" not found in {self.filepath}. '
                             f"Available: {', '.join(self.plazas())}")

        times = pd.to_numeric(self.table[self.time_column], errors='coerce')
        values = pd.to_numeric(self.table[plaza], errors='coerce')
        valid = times.notna() & values.notna()

        return {int(t): float(v) for t, v in zip(times[valid], values[valid])}


def load_arrival_series(filepath: PathLike, plaza: str) -> Dict[int, float]:
    """Load the per-second arrival probabilities for one plaza"""
    return ArrivalTableParser(filepath).series(plaza)


def list_plazas(filepath: PathLike) -> List[str]:
    """Plaza names available in an arrival table"""
    return ArrivalTableParser(filepath).plazas()
