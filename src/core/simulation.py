"""
Simulation Engine for the Toll Plaza Cellular Automaton

This module provides the engine that owns all mutable simulation state:
- Lane x position occupancy grid (double-buffered per tick)
- Vehicle arena keyed by vehicle id
- Tick, spawn and completion counters

Each call to step() advances exactly one tick:
1. Increment the tick counter
2. Spawn at most one vehicle at position 0 of a random highway lane
3. Sweep the current grid lanes ascending, positions descending, writing
   every decision into a fresh next grid
4. Commit the next grid

Contention for a destination cell is settled by first claim: a cell may only
be written while it is still empty in the next grid, and vehicles that lose
simply retry on the next tick.
"""

from dataclasses import dataclass, replace
from itertools import count
from typing import Dict, List, Optional, Tuple
import random

from traffic_rules.booth_assignment import assign_target_booth
from traffic_rules.fan_in import get_merge_candidates, merge_probability, select_merge_lane
from traffic_rules.fan_out import get_fan_out_candidates, select_fan_out_lane
from traffic_rules.lane_change import is_claimable
from traffic_rules.movement import get_forward_probability
from traffic_rules.service import update_service_state

from .config import ConfigurationError, PlazaConfig
from .constants import COLS, DIV_START, ESCAPE_ACCEPT_PROBABILITY, LOCK_START, MERGE_START
from .grid import Grid, count_vehicles, get_gap, get_queue_length, new_grid
from .vehicle import Vehicle, VehicleClass


@dataclass(frozen=True)
class SimulationStats:
    """Counters reported by the engine"""
    elapsed_ticks: int
    vehicles_completed: int
    vehicles_spawned: int
    vehicles_on_grid: int


@dataclass(frozen=True)
class CellView:
    """Read-only view of an occupied cell for rendering"""
    id: int
    vehicle_class: VehicleClass
    is_teleporting: bool
    assigned_booth_lane: int


GridSnapshot = Tuple[Tuple[Optional[CellView], ...], ...]


class TollPlazaSimulation:
    """
    Toll plaza traffic engine

    The engine is stepped externally and synchronously. Collaborators may
    only call step(), update_params() and the query methods; the grid and
    vehicle records never leave the engine except as copies.

    Random draws happen in a fixed order each tick:
    - spawn: arrival, then lane, then (if the entry cell is free) class and
      booth assignment
    - sweep, per vehicle in scan order: exponential service start, forward
      move (only if the forward cell is free), lateral escape (only if an
      adjacent lane is feasible), fan-in (only if a highway lane is feasible)

    Usage:
        sim = TollPlazaSimulation(PlazaConfig(num_highway_lanes=2, num_booth_lanes=4))
        for _ in range(3600):
            sim.step()
        stats = sim.get_stats()
    """

    def __init__(self, config: Optional[PlazaConfig] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize the engine

        Args:
            config: Plaza configuration (defaults fill any unset fields)
            rng: Random source; seeded from config.random_seed if omitted

        Raises:
            ConfigurationError: if the configuration is invalid
        """
        self.config = (config or PlazaConfig()).with_defaults().validate()
        self.rng = rng if rng is not None else random.Random(self.config.random_seed)

        self._grid: Grid = new_grid(self.config.num_booth_lanes)
        self._vehicles: Dict[int, Vehicle] = {}
        self._ids = count(1)

        self._tick = 0
        self._completed = 0
        self._spawned = 0

        if self.config.verbose:
            print(f"Toll plaza: L={self.config.num_highway_lanes}, "
                  f"B={self.config.num_booth_lanes}, lambda={self.config.arrival_probability}, "
                  f"service={self.config.service_mode.value}(mu={self.config.service_time})")

    # -------------------------------------------------------------------------
    # Public interface
    # -------------------------------------------------------------------------

    def update_params(self, config: PlazaConfig) -> None:
        """
        Replace the configuration wholesale, effective from the next tick

        Raises:
            ConfigurationError: if the configuration is invalid or changes
                the lane topology of a running engine
        """
        new_config = config.with_defaults().validate()
        if (new_config.num_highway_lanes != self.config.num_highway_lanes
                or new_config.num_booth_lanes != self.config.num_booth_lanes):
            raise ConfigurationError(
                f"Lane topology is fixed for an engine instance "
                f"(L={self.config.num_highway_lanes}, B={self.config.num_booth_lanes}); "
                f"create a new simulation for L={new_config.num_highway_lanes}, "
                f"B={new_config.num_booth_lanes}")
        self.config = new_config

    def step(self) -> None:
        """Advance the simulation by exactly one tick"""
        self._tick += 1
        self._spawn()

        grid = self._grid
        next_grid = new_grid(self.config.num_booth_lanes)

        for lane in range(self.config.num_booth_lanes):
            for position in range(COLS - 1, -1, -1):
                vehicle_id = grid[lane][position]
                if vehicle_id is not None:
                    self._update_vehicle(self._vehicles[vehicle_id], lane, position,
                                         grid, next_grid)

        self._grid = next_grid

        if self.config.verbose and self.config.log_interval > 0 \
                and self._tick % self.config.log_interval == 0:
            print(f"[t={self._tick}] vehicles={len(self._vehicles)} "
                  f"completed={self._completed} in_service={self.vehicles_in_service()}")

    def run(self, ticks: int) -> SimulationStats:
        """Step the simulation ticks times and return the final counters"""
        for _ in range(ticks):
            self.step()
        return self.get_stats()

    def get_stats(self) -> SimulationStats:
        """Current counters"""
        return SimulationStats(
            elapsed_ticks=self._tick,
            vehicles_completed=self._completed,
            vehicles_spawned=self._spawned,
            vehicles_on_grid=len(self._vehicles),
        )

    def get_grid_snapshot(self) -> GridSnapshot:
        """Immutable (lane, position) view of the committed grid"""
        return tuple(
            tuple(self._cell_view(vehicle_id) for vehicle_id in row)
            for row in self._grid
        )

    def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        """Copy of a vehicle record, or None if it is not on the grid"""
        vehicle = self._vehicles.get(vehicle_id)
        return replace(vehicle) if vehicle is not None else None

    def find_vehicle(self, vehicle_id: int) -> Optional[Tuple[int, int]]:
        """(lane, position) of a vehicle on the committed grid"""
        for lane, row in enumerate(self._grid):
            for position, occupant in enumerate(row):
                if occupant == vehicle_id:
                    return lane, position
        return None

    def lane_occupancy(self) -> List[int]:
        """Number of vehicles in each lane"""
        return [sum(1 for cell in row if cell is not None) for row in self._grid]

    def vehicles_in_service(self) -> int:
        """Number of MANUAL vehicles currently held at a booth"""
        return sum(1 for v in self._vehicles.values() if v.in_service)

    def occupied_cells(self) -> int:
        """Number of occupied cells in the committed grid"""
        return count_vehicles(self._grid)

    # -------------------------------------------------------------------------
    # Spawn
    # -------------------------------------------------------------------------

    def _spawn(self) -> None:
        cfg = self.config
        if self.rng.random() >= cfg.arrival_probability:
            return

        lane = self.rng.randrange(cfg.num_highway_lanes)
        if self._grid[lane][0] is not None:
            return

        vehicle_class = VehicleClass.ETC if self.rng.random() < cfg.etc_ratio else VehicleClass.MANUAL
        booth = assign_target_booth(lane, cfg.num_highway_lanes, cfg.num_booth_lanes,
                                    cfg.sigma, self.rng)
        vehicle = Vehicle(
            id=next(self._ids),
            vehicle_class=vehicle_class,
            origin_lane=lane,
            assigned_booth_lane=booth,
        )
        self._vehicles[vehicle.id] = vehicle
        self._grid[lane][0] = vehicle.id
        self._spawned += 1

    # -------------------------------------------------------------------------
    # Per-vehicle update
    # -------------------------------------------------------------------------

    def _update_vehicle(self, vehicle: Vehicle, lane: int, position: int,
                        grid: Grid, next_grid: Grid) -> None:
        """Resolve one vehicle's move for this tick and write it into next_grid"""
        cfg = self.config
        vehicle.tick_cooldown()
        vehicle.is_teleporting = False

        if update_service_state(vehicle, position, cfg.service_time, cfg.service_mode, self.rng):
            next_grid[lane][position] = vehicle.id
            return

        if (position == DIV_START and not vehicle.has_passed_fan_out
                and not cfg.is_degenerate):
            self._fan_out(vehicle, lane, position, grid, next_grid)
            return

        at_wall = self._is_vanishing(lane) and position >= MERGE_START
        forward_blocked = at_wall or self._forward_occupied(lane, position, grid, next_grid)

        if not forward_blocked:
            gap = get_gap(grid, lane, position)
            if self.rng.random() < get_forward_probability(cfg, gap):
                self._advance(vehicle, lane, position, next_grid)
                return
        elif self._try_escape(vehicle, lane, position, grid, next_grid):
            return

        if at_wall and not cfg.is_degenerate and self._try_fan_in(vehicle, lane, position,
                                                                 grid, next_grid):
            return

        next_grid[lane][position] = vehicle.id

    def _fan_out(self, vehicle: Vehicle, lane: int, position: int,
                 grid: Grid, next_grid: Grid) -> None:
        cfg = self.config
        candidates = get_fan_out_candidates(vehicle.origin_lane, cfg.num_highway_lanes,
                                            cfg.num_booth_lanes)
        target = select_fan_out_lane(grid, next_grid, vehicle.id, position, candidates)

        if target is None:
            next_grid[lane][position] = vehicle.id
            return

        vehicle.has_passed_fan_out = True
        vehicle.is_teleporting = target != lane
        next_grid[target][position] = vehicle.id

    def _advance(self, vehicle: Vehicle, lane: int, position: int, next_grid: Grid) -> None:
        if position + 1 < COLS:
            next_grid[lane][position + 1] = vehicle.id
            return

        del self._vehicles[vehicle.id]
        self._completed += 1

    def _try_escape(self, vehicle: Vehicle, lane: int, position: int,
                    grid: Grid, next_grid: Grid) -> bool:
        """Lateral move to an adjacent lane when the lane ahead is blocked"""
        if not vehicle.can_change_lane:
            return False
        if LOCK_START <= position < MERGE_START:
            return False
        if position >= MERGE_START and self._is_vanishing(lane):
            return False

        for target in self._escape_lanes(lane, position):
            if is_claimable(grid, next_grid, target, position):
                if self.rng.random() < ESCAPE_ACCEPT_PROBABILITY:
                    next_grid[target][position] = vehicle.id
                    vehicle.lane_change_cooldown = self.config.lane_change_cooldown
                    return True
                return False
        return False

    def _escape_lanes(self, lane: int, position: int) -> List[int]:
        """Adjacent lanes a vehicle at (lane, position) may escape into"""
        # Upstream of the junction and past the merge wall only highway lanes exist
        if position < DIV_START or position >= MERGE_START:
            upper = self.config.num_highway_lanes
        else:
            upper = self.config.num_booth_lanes
        return [target for target in (lane - 1, lane + 1) if 0 <= target < upper]

    def _try_fan_in(self, vehicle: Vehicle, lane: int, position: int,
                    grid: Grid, next_grid: Grid) -> bool:
        cfg = self.config
        candidates = get_merge_candidates(lane, cfg.num_highway_lanes, cfg.num_booth_lanes)
        target = select_merge_lane(grid, next_grid, position, candidates)
        if target is None:
            return False

        queue = get_queue_length(grid, lane, position)
        if self.rng.random() >= merge_probability(queue, cfg.alpha):
            return False

        next_grid[target][position] = vehicle.id
        vehicle.lane_change_cooldown = cfg.lane_change_cooldown
        return True

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _is_vanishing(self, lane: int) -> bool:
        return lane >= self.config.num_highway_lanes

    @staticmethod
    def _forward_occupied(lane: int, position: int, grid: Grid, next_grid: Grid) -> bool:
        ahead = position + 1
        if ahead >= COLS:
            return False
        return grid[lane][ahead] is not None or next_grid[lane][ahead] is not None

    def _cell_view(self, vehicle_id: Optional[int]) -> Optional[CellView]:
        if vehicle_id is None:
            return None
        vehicle = self._vehicles[vehicle_id]
        return CellView(
            id=vehicle.id,
            vehicle_class=vehicle.vehicle_class,
            is_teleporting=vehicle.is_teleporting,
            assigned_booth_lane=vehicle.assigned_booth_lane,
        )
