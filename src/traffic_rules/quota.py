"""
Quota Scoring

Deterministic proximity ranking shared by the fan-out and fan-in rules.
A destination lane k is scored by its distance to an ideal (possibly
fractional) index, clipped at an influence radius R:

    score(k) = max(0, 1 - |k - ideal| / R)

Lanes with a positive score are returned best first; equal scores are
ordered by ascending lane index so the ranking never depends on chance.
"""

from dataclasses import dataclass
from functools import cmp_to_key
from typing import List

from core.constants import SCORE_TOLERANCE


@dataclass(frozen=True)
class QuotaCandidate:
    """A destination lane and its quota score"""
    lane: int
    score: float


def influence_radius(num_highway_lanes: int, num_booth_lanes: int) -> int:
    """R = ceil(B / L), the number of booth lanes served by one highway lane"""
    return -(-num_booth_lanes // num_highway_lanes)


def rank_by_quota(ideal: float, radius: float, num_lanes: int) -> List[QuotaCandidate]:
    """Score lanes [0, num_lanes) around ideal and sort best first"""
    candidates = []
    for k in range(num_lanes):
        score = max(0.0, 1.0 - abs(k - ideal) / radius)
        if score > 0.0:
            candidates.append(QuotaCandidate(lane=k, score=score))

    candidates.sort(key=cmp_to_key(compare_candidates))
    return candidates


def compare_candidates(a: QuotaCandidate, b: QuotaCandidate) -> int:
    """Higher score first; scores within SCORE_TOLERANCE tie and go to the lower lane"""
    if abs(b.score - a.score) > SCORE_TOLERANCE:
        return -1 if a.score > b.score else 1
    return a.lane - b.lane
