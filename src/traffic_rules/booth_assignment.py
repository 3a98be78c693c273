"""
Booth Assignment

Maps a spawning vehicle's origin lane to the booth lane it will target for
its whole lifetime. The origin lane is mapped linearly onto the booth lanes
and a lane is sampled from a discretised Gaussian around that centre:

    mu_c = (B - 1) / 2                          if L = 1
    mu_c = origin / (L - 1) * (B - 1)           otherwise
    w_j  = exp(-(j - mu_c)^2 / (2 sigma^2))     for j in [0, B)
"""

import math
import random
from typing import List


def booth_center(origin_lane: int, num_highway_lanes: int, num_booth_lanes: int) -> float:
    """Ideal (fractional) booth index for an origin lane"""
    if num_highway_lanes <= 1:
        return (num_booth_lanes - 1) / 2
    return origin_lane / (num_highway_lanes - 1) * (num_booth_lanes - 1)


def booth_weights(origin_lane: int, num_highway_lanes: int,
                  num_booth_lanes: int, sigma: float) -> List[float]:
    """Unnormalised Gaussian weight for every booth lane"""
    center = booth_center(origin_lane, num_highway_lanes, num_booth_lanes)
    two_sigma_sq = 2.0 * sigma * sigma
    return [math.exp(-((j - center) ** 2) / two_sigma_sq) for j in range(num_booth_lanes)]


def assign_target_booth(origin_lane: int, num_highway_lanes: int, num_booth_lanes: int,
                        sigma: float, rng: random.Random) -> int:
    """
    Sample the lifetime target booth for a vehicle

    Consumes exactly one draw from rng.

    Args:
        origin_lane: Spawn lane in [0, L)
        num_highway_lanes: L
        num_booth_lanes: B
        sigma: Spread of the distribution [lanes], > 0
        rng: Random source

    Returns:
        Booth lane index in [0, B - 1]
    """
    weights = booth_weights(origin_lane, num_highway_lanes, num_booth_lanes, sigma)
    total = sum(weights)
    r = rng.random()

    if total <= 0.0:
        # Every weight underflowed (tiny sigma, fractional centre)
        center = booth_center(origin_lane, num_highway_lanes, num_booth_lanes)
        return min(max(int(math.floor(center + 0.5)), 0), num_booth_lanes - 1)

    threshold = r * total
    accumulated = 0.0
    for j, weight in enumerate(weights):
        accumulated += weight
        if threshold < accumulated:
            return j

    # Cumulative rounding left the threshold just past the last bucket
    return num_booth_lanes - 1
