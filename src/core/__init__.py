"""
Core Module for the Toll Plaza Simulation

This module owns all mutable simulation state.

Components:
- Plaza geometry and defaults (constants)
- Configuration (PlazaConfig, ServiceMode, ConfigurationError)
- Vehicle records (Vehicle, VehicleClass, ServiceState)
- Occupancy grid queries (gap ahead, queue behind)
- Simulation engine (core.simulation.TollPlazaSimulation), imported from
  its own module because it depends on the traffic_rules package
"""

from .config import (
    ConfigurationError,
    PlazaConfig,
    ServiceMode,
)

from .vehicle import (
    ServiceState,
    Vehicle,
    VehicleClass,
)

from .grid import (
    Grid,
    get_gap,
    get_queue_length,
    is_on_grid,
    new_grid,
)

__all__ = [
    'ConfigurationError',
    'PlazaConfig',
    'ServiceMode',
    'ServiceState',
    'Vehicle',
    'VehicleClass',
    'Grid',
    'get_gap',
    'get_queue_length',
    'is_on_grid',
    'new_grid',
]
