"""Effect resolution engine components."""

from castline.core.timeline.engine.engine import (
    EffectResolutionEngine,
    UnknownTargetError,
)
from castline.core.timeline.engine.instance_expander import (
    InstanceExpander,
    expand_instances,
)
from castline.core.timeline.engine.lane_allocator import allocate_lanes, peak_concurrency
from castline.core.timeline.engine.overwrite_resolver import (
    group_by_slot,
    resolve_overwrites,
    trim_slot,
)
from castline.core.timeline.engine.stat_aggregator import (
    active_instances,
    compute_stats_at,
    select_latest_per_stack,
)
from castline.core.timeline.engine.target_resolver import TargetResolver

__all__ = [
    "EffectResolutionEngine",
    "InstanceExpander",
    "TargetResolver",
    "UnknownTargetError",
    "active_instances",
    "allocate_lanes",
    "compute_stats_at",
    "expand_instances",
    "group_by_slot",
    "peak_concurrency",
    "resolve_overwrites",
    "select_latest_per_stack",
    "trim_slot",
]
