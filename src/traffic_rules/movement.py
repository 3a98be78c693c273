"""
Movement Rule

Forward-advance probability for one vehicle in one tick.

Constant mode:  p = a
Adaptive mode:  p = a_min + (a_max - a_min) * sigmoid(-beta * (d0 - gap))

so a larger gap ahead pushes p towards a_max. The engine always uses
max(p, p_min), which keeps every unblocked vehicle moving with non-zero
probability.
"""

import math

from core.config import PlazaConfig
from core.constants import DEFAULT_A_MAX, DEFAULT_A_MIN, DEFAULT_BETA, DEFAULT_D0


def sigmoid(z: float) -> float:
    """Logistic function, safe for large |z|"""
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    e = math.exp(z)
    return e / (1.0 + e)


def compute_adaptive_probability(gap: float,
                                 a_min: float = DEFAULT_A_MIN,
                                 a_max: float = DEFAULT_A_MAX,
                                 d0: float = DEFAULT_D0,
                                 beta: float = DEFAULT_BETA) -> float:
    """Gap-dependent advance probability in [a_min, a_max]"""
    return a_min + (a_max - a_min) * sigmoid(beta * (gap - d0))


def get_raw_probability(config: PlazaConfig, gap: float) -> float:
    """Advance probability before the p_min floor is applied"""
    if not config.use_adaptive:
        return config.advance_probability

    return compute_adaptive_probability(
        gap,
        DEFAULT_A_MIN if config.a_min is None else config.a_min,
        DEFAULT_A_MAX if config.a_max is None else config.a_max,
        DEFAULT_D0 if config.d0 is None else config.d0,
        DEFAULT_BETA if config.beta is None else config.beta,
    )


def get_forward_probability(config: PlazaConfig, gap: float) -> float:
    """Advance probability used by the engine (floored at p_min)"""
    return max(get_raw_probability(config, gap), config.p_min)
