"""Unit tests for display lane allocation."""

from __future__ import annotations

import random

import pytest

from castline.core.timeline.engine.lane_allocator import allocate_lanes, peak_concurrency
from castline.core.timeline.models import EffectInstance
from castline.core.timeline.vocabulary import EffectKind, SkillKind, Stat


def _inst(instance_id: str, start: float, end: float) -> EffectInstance:
    return EffectInstance(
        id=instance_id,
        event_id=instance_id,
        effect_id="fx",
        skill_id="ex",
        skill_kind=SkillKind.INSTANT,
        source_actor_id="alice",
        target_id="alice",
        kind=EffectKind.BUFF,
        stat=Stat.ATK,
        magnitude=0.1,
        stack_group=instance_id,
        start=start,
        end=end,
    )


class TestAllocateLanes:
    """Greedy first-fit packing."""

    def test_empty_row_reserves_one_lane(self) -> None:
        assignment = allocate_lanes("alice", [])
        assert assignment.lane_count == 1
        assert assignment.lanes == {}

    def test_disjoint_instances_share_lane(self) -> None:
        assignment = allocate_lanes("alice", [_inst("a", 0, 2), _inst("b", 3, 5)])
        assert assignment.lane_count == 1
        assert assignment.lanes == {"a": 0, "b": 0}

    def test_touching_instances_share_lane(self) -> None:
        """Closed-open intervals: [0, 2) and [2, 4) do not overlap."""
        assignment = allocate_lanes("alice", [_inst("a", 0, 2), _inst("b", 2, 4)])
        assert assignment.lane_count == 1

    def test_overlapping_instances_split(self) -> None:
        assignment = allocate_lanes("alice", [_inst("a", 0, 6), _inst("b", 2, 8)])
        assert assignment.lane_count == 2
        assert assignment.lane_of("a") == 0
        assert assignment.lane_of("b") == 1

    def test_first_fit_reuses_lowest_free_lane(self) -> None:
        instances = [
            _inst("a", 0, 10),
            _inst("b", 1, 3),
            _inst("c", 2, 6),
            _inst("d", 4, 5),
        ]
        assignment = allocate_lanes("alice", instances)
        # b frees lane 1 at t=3; d starts at 4 and takes it.
        assert assignment.lanes == {"a": 0, "b": 1, "c": 2, "d": 1}
        assert assignment.lane_count == 3

    def test_input_order_irrelevant(self) -> None:
        instances = [_inst("a", 0, 4), _inst("b", 1, 2), _inst("c", 3, 6)]
        expected = allocate_lanes("alice", instances)
        assert allocate_lanes("alice", reversed(instances)) == expected

    def test_lane_of_unknown_instance(self) -> None:
        assert allocate_lanes("alice", [_inst("a", 0, 1)]).lane_of("missing") is None


class TestPeakConcurrency:
    """Lane count matches the peak number of simultaneous instances."""

    def test_touching_intervals_not_concurrent(self) -> None:
        assert peak_concurrency([_inst("a", 0, 2), _inst("b", 2, 4)]) == 1

    def test_nested_intervals(self) -> None:
        assert peak_concurrency([_inst("a", 0, 10), _inst("b", 2, 8), _inst("c", 3, 4)]) == 3

    def test_empty(self) -> None:
        assert peak_concurrency([]) == 0

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_lane_count_is_minimal(self, seed: int) -> None:
        rng = random.Random(seed)
        instances = []
        for n in range(40):
            start = rng.randrange(0, 100) / 4
            instances.append(_inst(f"i{n:02d}", start, start + rng.randrange(1, 40) / 4))

        assignment = allocate_lanes("alice", instances)

        assert assignment.lane_count == max(1, peak_concurrency(instances))
        by_lane: dict[int, list[EffectInstance]] = {}
        for instance in instances:
            by_lane.setdefault(assignment.lanes[instance.id], []).append(instance)
        for lane_instances in by_lane.values():
            lane_instances.sort(key=lambda i: i.start)
            for a, b in zip(lane_instances, lane_instances[1:]):
                assert a.end <= b.start
