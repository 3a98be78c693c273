"""
Fan-In Rule

Vehicles in vanishing lanes (index >= L) cannot drive past the merge wall
and must merge back into a highway lane. The ranking mirrors fan-out:

    ratio = (booth_lane + 0.5) / B
    l*    = ratio * L - 0.5
    R     = ceil(B / L)

Only the single best-ranked feasible highway lane is tried each tick. The
merge is accepted with probability

    p_merge = min(1, p0 + alpha * queue)

where queue is the number of vehicles stacked directly behind the merging
vehicle in its own lane, so pressure from a growing queue makes the
receiving lane yield more often.
"""

from typing import List, Optional, Sequence

from core.constants import MERGE_BASE_PROBABILITY

from .lane_change import is_claimable
from .quota import QuotaCandidate, influence_radius, rank_by_quota

GridView = Sequence[Sequence[Optional[int]]]


def ideal_highway_lane(booth_lane: int, num_highway_lanes: int, num_booth_lanes: int) -> float:
    """Fractional highway lane centred over a booth lane"""
    ratio = (booth_lane + 0.5) / num_booth_lanes
    return ratio * num_highway_lanes - 0.5


def get_merge_candidates(booth_lane: int, num_highway_lanes: int,
                         num_booth_lanes: int) -> List[QuotaCandidate]:
    """Ranked highway lanes for a vehicle merging out of booth_lane"""
    ideal = ideal_highway_lane(booth_lane, num_highway_lanes, num_booth_lanes)
    radius = influence_radius(num_highway_lanes, num_booth_lanes)
    return rank_by_quota(ideal, radius, num_highway_lanes)


def select_merge_lane(grid: GridView, next_grid: GridView, position: int,
                      candidates: Sequence[QuotaCandidate]) -> Optional[int]:
    """Best-ranked highway lane that is safe and unclaimed, if any"""
    for candidate in candidates:
        if is_claimable(grid, next_grid, candidate.lane, position):
            return candidate.lane
    return None


def merge_probability(queue_length: int, alpha: float,
                      base: float = MERGE_BASE_PROBABILITY) -> float:
    """Acceptance probability for a merge attempt"""
    return min(1.0, base + alpha * queue_length)
