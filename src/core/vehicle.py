"""
Vehicle Record

Per-car state owned by the simulation engine. Vehicles live in an arena
keyed by id; grid cells only hold ids.
"""

from dataclasses import dataclass
from enum import Enum


class VehicleClass(Enum):
    """Vehicle payment class"""
    ETC = "etc"          # Electronic toll collection, no booth stop
    MANUAL = "manual"    # Stops at the booth for service


class ServiceState(Enum):
    """Booth service progress (MANUAL vehicles only)"""
    NOT_SERVED = "not_served"
    IN_SERVICE = "in_service"
    SERVED = "served"


@dataclass
class Vehicle:
    """
    State of a single vehicle

    origin_lane and assigned_booth_lane are fixed at spawn. has_been_served
    and has_passed_fan_out are set once and never cleared. is_teleporting is
    only true during the tick the vehicle crosses the fan-out junction.
    """
    id: int
    vehicle_class: VehicleClass
    origin_lane: int
    assigned_booth_lane: int

    in_service: bool = False
    remaining_service_ticks: int = 0
    has_been_served: bool = False

    lane_change_cooldown: int = 0      # 0 = may change lane
    has_passed_fan_out: bool = False
    is_teleporting: bool = False

    @property
    def is_manual(self) -> bool:
        return self.vehicle_class is VehicleClass.MANUAL

    @property
    def service_state(self) -> ServiceState:
        if self.in_service:
            return ServiceState.IN_SERVICE
        if self.has_been_served:
            return ServiceState.SERVED
        return ServiceState.NOT_SERVED

    @property
    def can_change_lane(self) -> bool:
        return self.lane_change_cooldown == 0

    def tick_cooldown(self) -> None:
        if self.lane_change_cooldown > 0:
            self.lane_change_cooldown -= 1
