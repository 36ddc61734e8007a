"""Lane allocator: packs one target's instances into display rows.

Greedy interval partitioning over instances sorted by start.  Each
instance goes to the first (lowest-index) lane whose last end is at or
before its start, opening a new lane only when none fits.  This uses the
minimum number of lanes, equal to the peak number of simultaneously
active instances.
"""

from __future__ import annotations

from collections.abc import Iterable

from castline.core.timeline.models.effect_instance import EffectInstance
from castline.core.timeline.models.results import LaneAssignment


def allocate_lanes(target_id: str, instances: Iterable[EffectInstance]) -> LaneAssignment:
    """Assign non-overlapping lanes to a target's instances.

    Args:
        target_id: Actor the rows belong to.
        instances: Resolved instances for that actor.

    Returns:
        Lane per instance id and the lane count (at least 1, so an empty
        row still reserves its space).
    """
    lane_ends: list[float] = []
    lanes: dict[str, int] = {}

    for instance in sorted(instances, key=lambda i: (i.start, i.id)):
        lane = next(
            (idx for idx, end in enumerate(lane_ends) if end <= instance.start),
            None,
        )
        if lane is None:
            lane = len(lane_ends)
            lane_ends.append(instance.end)
        else:
            lane_ends[lane] = instance.end
        lanes[instance.id] = lane

    return LaneAssignment(
        target_id=target_id,
        lanes=lanes,
        lane_count=max(1, len(lane_ends)),
    )


def peak_concurrency(instances: Iterable[EffectInstance]) -> int:
    """Maximum number of instances active at any single instant."""
    # Ends sort before starts at equal times: [a, b) and [b, c) never coexist.
    points = sorted(
        (t, delta)
        for i in instances
        if not i.is_empty
        for t, delta in ((i.start, 1), (i.end, -1))
    )
    current = peak = 0
    for _, delta in points:
        current += delta
        peak = max(peak, current)
    return peak


__all__ = [
    "allocate_lanes",
    "peak_concurrency",
]
