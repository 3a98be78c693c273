"""
Integration Test Suite: Toll Plaza Simulation

This test bench runs the engine over many ticks and checks properties that
must hold for every tick and every vehicle:

1. Invariants
   - Mutual exclusion (one vehicle per cell, no vehicle in two cells)
   - Conservation (spawned = completed + on grid)
   - Vanishing lanes stay inside the plaza

2. Scenarios
   - Scenario A: single lane, deterministic advance and fixed service
   - Scenario B: narrow booth assignment spread
   - Scenario C: degenerate plaza without fan-out/fan-in

3. Liveness
   - No permanent gridlock for any valid topology
   - Identical seeds give identical runs
"""

import random
import sys
import os
from typing import Dict, Tuple

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.config import PlazaConfig, ServiceMode
from core.constants import BOOTH_X, COLS, DIV_START, MERGE_START
from core.simulation import TollPlazaSimulation
from core.vehicle import VehicleClass


def positions(sim: TollPlazaSimulation) -> Dict[int, Tuple[int, int]]:
    """Vehicle id -> (lane, position) from a snapshot"""
    result = {}
    for lane, row in enumerate(sim.get_grid_snapshot()):
        for position, cell in enumerate(row):
            if cell is not None:
                assert cell.id not in result, f"vehicle {cell.id} appears twice"
                result[cell.id] = (lane, position)
    return result


# =============================================================================
# Test Class: Invariants
# =============================================================================

@pytest.mark.integration
class TestInvariants:
    """Properties checked at every tick boundary"""

    @pytest.mark.parametrize("config", [
        PlazaConfig(num_highway_lanes=2, num_booth_lanes=4, arrival_probability=0.9,
                    random_seed=1),
        PlazaConfig(num_highway_lanes=3, num_booth_lanes=7, arrival_probability=1.0,
                    use_adaptive=True, service_mode=ServiceMode.EXPONENTIAL,
                    service_time=10, random_seed=2),
        PlazaConfig(num_highway_lanes=1, num_booth_lanes=3, arrival_probability=0.8,
                    lane_change_cooldown=0, random_seed=3),
        PlazaConfig(num_highway_lanes=3, num_booth_lanes=3, arrival_probability=0.9,
                    random_seed=4),
    ])
    def test_exclusion_and_conservation(self, config):
        """Every tick: unique cells, and no vehicle is created or lost"""
        sim = TollPlazaSimulation(config)
        for _ in range(600):
            sim.step()
            on_grid = positions(sim)
            stats = sim.get_stats()

            assert stats.vehicles_on_grid == len(on_grid)
            assert stats.vehicles_spawned == stats.vehicles_completed + len(on_grid)

    def test_vanishing_lanes_stay_inside_plaza(self):
        """Vanishing lanes are empty upstream of DIV_START and past MERGE_START"""
        config = PlazaConfig(num_highway_lanes=2, num_booth_lanes=5,
                             arrival_probability=0.9, random_seed=5)
        sim = TollPlazaSimulation(config)
        for _ in range(600):
            sim.step()
            for lane, position in positions(sim).values():
                if lane >= 2:
                    assert DIV_START <= position <= MERGE_START

    def test_manual_vehicles_served_before_leaving_booth(self):
        """Any MANUAL vehicle past BOOTH_X has been served; ETC never is"""
        config = PlazaConfig(num_highway_lanes=2, num_booth_lanes=4,
                             arrival_probability=0.7, service_time=4, random_seed=6)
        sim = TollPlazaSimulation(config)
        for _ in range(500):
            sim.step()
            for vehicle_id, (_, position) in positions(sim).items():
                vehicle = sim.get_vehicle(vehicle_id)
                if vehicle.vehicle_class is VehicleClass.ETC:
                    assert not vehicle.in_service and not vehicle.has_been_served
                elif position > BOOTH_X:
                    assert vehicle.has_been_served

    def test_every_vehicle_routed_past_junction(self):
        """Vehicles beyond DIV_START have passed fan-out exactly once"""
        config = PlazaConfig(num_highway_lanes=2, num_booth_lanes=4,
                             arrival_probability=0.8, random_seed=7)
        sim = TollPlazaSimulation(config)
        for _ in range(400):
            sim.step()
            for vehicle_id, (_, position) in positions(sim).items():
                vehicle = sim.get_vehicle(vehicle_id)
                if position > DIV_START:
                    assert vehicle.has_passed_fan_out
                if position < DIV_START:
                    assert not vehicle.has_passed_fan_out


# =============================================================================
# Test Class: Scenarios
# =============================================================================

@pytest.mark.integration
class TestScenarios:
    """Reference scenarios with known outcomes"""

    def test_scenario_a_single_lane_exit_tick(self):
        """L=B=1, a=1: first vehicle exits at BOOTH_X + 3 + (COLS - BOOTH_X)"""
        config = PlazaConfig(num_highway_lanes=1, num_booth_lanes=1,
                             arrival_probability=1.0, advance_probability=1.0,
                             service_time=3, service_mode=ServiceMode.FIXED,
                             p_min=0.1, etc_ratio=0.0, random_seed=0)
        sim = TollPlazaSimulation(config)
        trace = {}
        exit_tick = None

        for tick in range(1, 2 * COLS):
            sim.step()
            trace[tick] = sim.find_vehicle(1)
            if sim.get_stats().vehicles_completed >= 1:
                exit_tick = tick
                break

        assert exit_tick == BOOTH_X + 3 + (COLS - BOOTH_X)
        assert trace[1] == (0, 1)
        assert trace[BOOTH_X] == (0, BOOTH_X)
        assert [trace[BOOTH_X + k] for k in (1, 2, 3)] == [(0, BOOTH_X)] * 3
        assert trace[BOOTH_X + 4] == (0, BOOTH_X + 1)
        assert trace[exit_tick] is None

    def test_scenario_a_etc_drives_straight_through(self):
        """Without service the first vehicle exits at tick COLS"""
        config = PlazaConfig(num_highway_lanes=1, num_booth_lanes=1,
                             arrival_probability=1.0, advance_probability=1.0,
                             etc_ratio=1.0, random_seed=0)
        sim = TollPlazaSimulation(config)

        ticks = 0
        while sim.get_stats().vehicles_completed == 0:
            sim.step()
            ticks += 1

        assert ticks == COLS

    def test_scenario_b_narrow_spread(self):
        """L=2, B=4, sigma -> 0: lane 0 targets {0, 1}, lane 1 targets {2, 3}"""
        config = PlazaConfig(num_highway_lanes=2, num_booth_lanes=4,
                             arrival_probability=1.0, sigma=1e-3, random_seed=9)
        sim = TollPlazaSimulation(config)
        seen = set()

        for _ in range(200):
            sim.step()
            for vehicle_id in positions(sim):
                vehicle = sim.get_vehicle(vehicle_id)
                expected = (0, 1) if vehicle.origin_lane == 0 else (2, 3)
                assert vehicle.assigned_booth_lane in expected
                seen.add(vehicle.origin_lane)

        assert seen == {0, 1}

    def test_scenario_c_degenerate_lane_changes_are_lateral(self):
        """L=B=2: lanes only change by one, in place, and nothing is routed"""
        config = PlazaConfig(num_highway_lanes=2, num_booth_lanes=2,
                             arrival_probability=0.9, lane_change_cooldown=1,
                             random_seed=10)
        sim = TollPlazaSimulation(config)
        previous = positions(sim)
        lane_changes = 0

        for _ in range(800):
            sim.step()
            current = positions(sim)
            for vehicle_id, (lane, position) in current.items():
                vehicle = sim.get_vehicle(vehicle_id)
                assert not vehicle.has_passed_fan_out
                assert not vehicle.is_teleporting
                if vehicle_id in previous:
                    old_lane, old_position = previous[vehicle_id]
                    if lane != old_lane:
                        lane_changes += 1
                        assert abs(lane - old_lane) == 1
                        assert position == old_position
            previous = current

        assert lane_changes > 0


# =============================================================================
# Test Class: Liveness and Reproducibility
# =============================================================================

@pytest.mark.integration
class TestLiveness:
    """Long-run behaviour"""

    @pytest.mark.slow
    @pytest.mark.parametrize("L,B", [(1, 1), (1, 3), (2, 2), (2, 4), (3, 6), (2, 5)])
    def test_no_permanent_gridlock(self, L, B):
        """Throughput stays positive under heavy demand"""
        config = PlazaConfig(num_highway_lanes=L, num_booth_lanes=B,
                             arrival_probability=0.8, p_min=0.1, random_seed=L * 10 + B)
        sim = TollPlazaSimulation(config)

        sim.run(1000)
        early = sim.get_stats().vehicles_completed
        stats = sim.run(1000)

        assert early > 0
        assert stats.vehicles_completed > early
        assert stats.vehicles_completed / stats.elapsed_ticks > 0

    def test_same_seed_same_run(self):
        """Two engines with the same seed evolve identically"""
        config = PlazaConfig(num_highway_lanes=2, num_booth_lanes=4, random_seed=42)
        first = TollPlazaSimulation(config)
        second = TollPlazaSimulation(config)

        for _ in range(300):
            first.step()
            second.step()

        assert first.get_grid_snapshot() == second.get_grid_snapshot()
        assert first.get_stats() == second.get_stats()

    def test_injected_rng_overrides_seed(self):
        """An injected random source is used instead of the config seed"""
        config = PlazaConfig(num_highway_lanes=2, num_booth_lanes=4, random_seed=42)
        seeded = TollPlazaSimulation(config)
        injected = TollPlazaSimulation(config, rng=random.Random(42))

        for _ in range(200):
            seeded.step()
            injected.step()

        assert seeded.get_grid_snapshot() == injected.get_grid_snapshot()
