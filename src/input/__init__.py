"""
Input Parsing Module for the Toll Plaza Simulation

This module provides parsers for:
- Per-second arrival probability tables (CSV, one column per plaza)
"""

from .arrival_parser import (
    ArrivalTableParser,
    list_plazas,
    load_arrival_series,
)

__all__ = [
    'ArrivalTableParser',
    'list_plazas',
    'load_arrival_series',
]
