"""
Lane-Change Safety Primitive

Shared by lateral escape and fan-in. A move into target_lane at position is
physically safe when the target cell and the cell just ahead of it are both
empty in the current grid. The engine must additionally find the target
still unclaimed in the grid being built for the next tick.
"""

from typing import Optional, Sequence

GridView = Sequence[Sequence[Optional[int]]]


def can_change_lane(grid: GridView, target_lane: int, position: int) -> bool:
    """Two-cell look-ahead feasibility check against the current grid"""
    if target_lane < 0 or target_lane >= len(grid):
        return False

    row = grid[target_lane]
    if row[position] is not None:
        return False

    ahead = position + 1
    if ahead < len(row) and row[ahead] is not None:
        return False

    return True


def is_claimable(grid: GridView, next_grid: GridView, target_lane: int, position: int) -> bool:
    """Safe now and not yet claimed by an earlier vehicle this tick"""
    return (can_change_lane(grid, target_lane, position)
            and next_grid[target_lane][position] is None)
