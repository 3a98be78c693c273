"""
Pytest Configuration and Shared Fixtures

This module provides shared fixtures and configuration for all test modules.
"""

import pytest
import random
import sys
import os

# Ensure src is in path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.config import PlazaConfig
from core.vehicle import Vehicle, VehicleClass


def pytest_configure(config):
    """Configure custom pytest markers"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


class ScriptedRandom(random.Random):
    """
    Random source that replays a fixed sequence of random() values

    Once the script runs out every draw returns `default`, which is high
    enough to reject any move with probability below 1.
    """

    def __init__(self, values=(), default=0.999):
        super().__init__(0)
        self.values = list(values)
        self.default = default
        self.draws = 0

    def random(self):
        self.draws += 1
        if self.values:
            return self.values.pop(0)
        return self.default


def place_vehicle(sim, lane, position, vehicle_class=VehicleClass.ETC, **fields):
    """Put a vehicle directly onto an engine's committed grid"""
    vehicle_id = next(sim._ids)
    fields.setdefault('origin_lane', min(lane, sim.config.num_highway_lanes - 1))
    fields.setdefault('assigned_booth_lane', lane)
    vehicle = Vehicle(id=vehicle_id, vehicle_class=vehicle_class, **fields)
    sim._vehicles[vehicle_id] = vehicle
    sim._grid[lane][position] = vehicle_id
    sim._spawned += 1
    return vehicle


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRandom instances"""
    return ScriptedRandom


@pytest.fixture
def place():
    """Expose place_vehicle as a fixture"""
    return place_vehicle


@pytest.fixture
def empty_plaza_config() -> PlazaConfig:
    """L=2, B=4 plaza with no arrivals"""
    return PlazaConfig(num_highway_lanes=2, num_booth_lanes=4, arrival_probability=0.0)
