"""
Configuration for the Toll Plaza Simulation

A PlazaConfig describes one parameter set for the engine. Optional numeric
fields may be left as None; with_defaults() fills them from core.constants.
The configuration is replaced wholesale between ticks via
TollPlazaSimulation.update_params().
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from . import constants as C


class ConfigurationError(ValueError):
    """Raised for parameter sets the engine cannot run (e.g. B < L)"""


class ServiceMode(Enum):
    """How booth dwell time is drawn for MANUAL vehicles"""
    FIXED = "fixed"
    EXPONENTIAL = "exp"


@dataclass
class PlazaConfig:
    """Parameters for one toll plaza simulation"""
    # Topology
    num_highway_lanes: int = C.DEFAULT_L           # L
    num_booth_lanes: int = C.DEFAULT_B             # B (B >= L)

    # Demand
    arrival_probability: float = C.DEFAULT_LAMBDA  # lambda, per tick

    # Movement
    advance_probability: float = C.DEFAULT_ACC     # a
    p_min: float = C.DEFAULT_P_MIN                 # Forward probability floor
    use_adaptive: bool = False                     # Gap-adaptive acceleration
    a_min: Optional[float] = None
    a_max: Optional[float] = None
    d0: Optional[float] = None                     # Gap threshold [cells]
    beta: Optional[float] = None                   # Sigmoid sensitivity

    # Service
    service_time: float = C.DEFAULT_MU             # mu [ticks]
    service_mode: ServiceMode = ServiceMode.FIXED
    etc_ratio: Optional[float] = None              # Share of ETC vehicles

    # Lane changing / routing
    lane_change_cooldown: Optional[int] = None     # [ticks]
    sigma: Optional[float] = None                  # Booth assignment spread
    alpha: Optional[float] = None                  # Merge pressure sensitivity

    # Run control
    random_seed: Optional[int] = None              # For reproducibility
    verbose: bool = False                          # Print progress
    log_interval: int = C.DEFAULT_LOG_INTERVAL     # Progress interval [ticks]

    @property
    def is_degenerate(self) -> bool:
        """True when every booth lane is a highway lane (no fan-out/fan-in)"""
        return self.num_highway_lanes == self.num_booth_lanes

    def with_defaults(self) -> 'PlazaConfig':
        """Return a copy with every unset optional field filled in"""
        defaults = {
            'a_min': C.DEFAULT_A_MIN,
            'a_max': C.DEFAULT_A_MAX,
            'd0': C.DEFAULT_D0,
            'beta': C.DEFAULT_BETA,
            'etc_ratio': C.DEFAULT_ETC_RATIO,
            'lane_change_cooldown': C.LC_COOLDOWN,
            'sigma': C.DEFAULT_SIGMA,
            'alpha': C.DEFAULT_ALPHA,
        }
        missing = {k: v for k, v in defaults.items() if getattr(self, k) is None}
        return replace(self, **missing)

    def validate(self) -> 'PlazaConfig':
        """
        Check the parameter set

        Returns:
            self, so the call can be chained

        Raises:
            ConfigurationError: if the engine cannot run with these values
        """
        L, B = self.num_highway_lanes, self.num_booth_lanes
        if L < 1:
            raise ConfigurationError(f"At least one highway lane is required, got L={L}")
        if B < L:
            raise ConfigurationError(f"Booth lanes must be >= highway lanes, got L={L}, B={B}")

        for name in ('arrival_probability', 'advance_probability', 'p_min',
                     'a_min', 'a_max', 'etc_ratio'):
            value = getattr(self, name)
            if value is not None and not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1], got {value}")

        if self.sigma is not None and self.sigma <= 0:
            raise ConfigurationError(f"sigma must be positive, got {self.sigma}")
        if self.service_time < 0:
            raise ConfigurationError(f"service_time must be >= 0, got {self.service_time}")
        if self.lane_change_cooldown is not None and self.lane_change_cooldown < 0:
            raise ConfigurationError(
                f"lane_change_cooldown must be >= 0, got {self.lane_change_cooldown}")
        if self.alpha is not None and self.alpha < 0:
            raise ConfigurationError(f"alpha must be >= 0, got {self.alpha}")
        if not isinstance(self.service_mode, ServiceMode):
            raise ConfigurationError(f"Unknown service mode: {self.service_mode!r}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary view (service mode as its string value)"""
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        result['service_mode'] = self.service_mode.value
        return result

    @classmethod
    def from_dict(cls, params: Mapping[str, Any]) -> 'PlazaConfig':
        """
        Build a configuration from a plain mapping

        Keys are field names; None values are treated as unset.

        Raises:
            ConfigurationError: for unknown keys or an unknown service mode
        """
        known = {f.name for f in fields(cls)}
        unknown = set(params) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")

        values = {k: v for k, v in params.items() if v is not None}
        mode = values.get('service_mode')
        if mode is not None and not isinstance(mode, ServiceMode):
            try:
                values['service_mode'] = ServiceMode(mode)
            except ValueError:
                raise ConfigurationError(f"Unknown service mode: {mode!r}") from None
        return cls(**values)
