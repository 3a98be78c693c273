"""
Service Rule

Booth dwell-time state machine for MANUAL vehicles:

    NOT_SERVED --(reaches BOOTH_X)--> IN_SERVICE --(countdown hits 0)--> SERVED

A vehicle is held in its cell on every tick it spends in service,
including the tick on which the countdown reaches zero. ETC vehicles pass
the booth without stopping.
"""

import math
import random

from core.config import ServiceMode
from core.constants import BOOTH_X
from core.vehicle import Vehicle


def draw_service_ticks(mu: float, mode: ServiceMode, rng: random.Random) -> int:
    """
    Number of ticks a vehicle stays at the booth

    Fixed mode returns mu. Exponential mode returns ceil(-mu * ln(1 - U))
    with U drawn from the open interval (0, 1). Both are at least one tick.
    """
    if mode is ServiceMode.FIXED:
        return max(1, int(math.ceil(mu)))

    u = rng.random()
    while u <= 0.0 or u >= 1.0:
        u = rng.random()
    return max(1, int(math.ceil(-mu * math.log(1.0 - u))))


def update_service_state(vehicle: Vehicle, position: int, mu: float,
                         mode: ServiceMode, rng: random.Random) -> bool:
    """
    Advance the service state of a vehicle by one tick

    Args:
        vehicle: Vehicle being processed (mutated in place)
        position: Current column of the vehicle
        mu: Service time parameter [ticks]
        mode: Fixed or exponential dwell time
        rng: Random source (only used when exponential service starts)

    Returns:
        True if the vehicle was at the booth this tick and must be held
    """
    if not vehicle.is_manual:
        return False

    if position == BOOTH_X and not vehicle.in_service and not vehicle.has_been_served:
        vehicle.in_service = True
        vehicle.remaining_service_ticks = draw_service_ticks(mu, mode, rng)

    if not vehicle.in_service:
        return False

    vehicle.remaining_service_ticks -= 1
    if vehicle.remaining_service_ticks <= 0:
        vehicle.remaining_service_ticks = 0
        vehicle.in_service = False
        vehicle.has_been_served = True
    return True
