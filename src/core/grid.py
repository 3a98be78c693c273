"""
Occupancy Grid Utilities

The grid is indexed grid[lane][position] and holds a vehicle id or None.
All queries here are read-only and scan at most one lane.
"""

from typing import List, Optional, Sequence

from .constants import COLS, GAP_SENTINEL

Grid = List[List[Optional[int]]]


def new_grid(num_lanes: int, cols: int = COLS) -> Grid:
    """Create an empty grid with num_lanes lanes"""
    return [[None] * cols for _ in range(num_lanes)]


def is_on_grid(grid: Sequence[Sequence[Optional[int]]], lane: int, position: int) -> bool:
    """Check whether (lane, position) lies inside the grid"""
    return 0 <= lane < len(grid) and 0 <= position < len(grid[lane])


def get_gap(grid: Sequence[Sequence[Optional[int]]], lane: int, position: int) -> int:
    """
    Count empty cells strictly ahead of position

    Returns:
        Number of empty cells before the next occupied one, GAP_SENTINEL if
        the lane is clear to the end, 0 for an off-grid coordinate
    """
    if not is_on_grid(grid, lane, position):
        return 0

    row = grid[lane]
    gap = 0
    for x in range(position + 1, len(row)):
        if row[x] is not None:
            return gap
        gap += 1
    return GAP_SENTINEL


def get_queue_length(grid: Sequence[Sequence[Optional[int]]], lane: int, position: int) -> int:
    """Count contiguous occupied cells strictly behind position"""
    row = grid[lane]
    queue = 0
    x = position - 1
    while x >= 0 and row[x] is not None:
        queue += 1
        x -= 1
    return queue


def count_vehicles(grid: Sequence[Sequence[Optional[int]]]) -> int:
    """Number of occupied cells"""
    return sum(1 for row in grid for cell in row if cell is not None)
