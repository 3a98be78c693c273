"""
Fan-Out Rule

One-shot routing of a highway vehicle into a booth lane at the divergence
column DIV_START. Highway lane l maps onto booth space at

    j* = round((l + 0.5) * B / L - 0.5)

and booth lanes are ranked by quota score around j* with radius ceil(B / L).
The vehicle claims the best-ranked lane whose cell at DIV_START is free in
the current grid (or holds the vehicle itself) and is still unclaimed in the
next grid. When nothing is claimable the vehicle waits at the stop line.
"""

import math
from typing import List, Optional, Sequence

from .quota import QuotaCandidate, influence_radius, rank_by_quota

GridView = Sequence[Sequence[Optional[int]]]


def ideal_booth_lane(origin_lane: int, num_highway_lanes: int, num_booth_lanes: int) -> int:
    """Booth lane centred under an origin lane (half-up rounding)"""
    mapped = (origin_lane + 0.5) * num_booth_lanes / num_highway_lanes - 0.5
    return int(math.floor(mapped + 0.5))


def get_fan_out_candidates(origin_lane: int, num_highway_lanes: int,
                           num_booth_lanes: int) -> List[QuotaCandidate]:
    """
    Ranked booth lanes for a vehicle from origin_lane

    With L = B this is exactly [QuotaCandidate(origin_lane, 1.0)].
    """
    ideal = ideal_booth_lane(origin_lane, num_highway_lanes, num_booth_lanes)
    radius = influence_radius(num_highway_lanes, num_booth_lanes)
    return rank_by_quota(ideal, radius, num_booth_lanes)


def select_fan_out_lane(grid: GridView, next_grid: GridView, vehicle_id: int, position: int,
                        candidates: Sequence[QuotaCandidate]) -> Optional[int]:
    """
    First claimable booth lane in ranked order

    Returns:
        Lane index to claim, or None if the vehicle has to wait
    """
    for candidate in candidates:
        occupant = grid[candidate.lane][position]
        if occupant is not None and occupant != vehicle_id:
            continue
        if next_grid[candidate.lane][position] is not None:
            continue
        return candidate.lane
    return None
