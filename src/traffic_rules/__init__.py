"""
Traffic Rules Module

Stateless per-vehicle rules invoked by the simulation engine:
- Booth assignment (lifetime target booth drawn at spawn)
- Movement (constant or gap-adaptive forward probability)
- Service (booth dwell-time state machine)
- Lane-change safety (two-cell look-ahead)
- Fan-out and fan-in routing (deterministic quota ranking)
"""

from .booth_assignment import (
    assign_target_booth,
    booth_center,
)

from .movement import (
    compute_adaptive_probability,
    get_forward_probability,
)

from .service import (
    draw_service_ticks,
    update_service_state,
)

from .lane_change import (
    can_change_lane,
    is_claimable,
)

from .quota import (
    QuotaCandidate,
    compare_candidates,
    rank_by_quota,
)

from .fan_out import (
    get_fan_out_candidates,
    select_fan_out_lane,
)

from .fan_in import (
    get_merge_candidates,
    merge_probability,
    select_merge_lane,
)

__all__ = [
    'assign_target_booth',
    'booth_center',
    'compute_adaptive_probability',
    'get_forward_probability',
    'draw_service_ticks',
    'update_service_state',
    'can_change_lane',
    'is_claimable',
    'QuotaCandidate',
    'compare_candidates',
    'rank_by_quota',
    'get_fan_out_candidates',
    'select_fan_out_lane',
    'get_merge_candidates',
    'merge_probability',
    'select_merge_lane',
]
