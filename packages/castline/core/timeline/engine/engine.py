"""Effect resolution engine: one full recomputation pass.

Pipeline: cast events -> InstanceExpander -> raw instances ->
overwrite resolution -> resolved instances -> lane allocation per
target.  Stat queries run against the resolved instances.

The engine is a pure function of its inputs; every call recomputes
from scratch and never mutates the state it is given.
"""

from __future__ import annotations

import logging

from castline.core.timeline.engine.instance_expander import InstanceExpander
from castline.core.timeline.engine.lane_allocator import allocate_lanes
from castline.core.timeline.engine.overwrite_resolver import resolve_overwrites
from castline.core.timeline.engine.stat_aggregator import compute_stats_at
from castline.core.timeline.models.results import (
    EngineDiagnostic,
    LaneAssignment,
    ResolutionResult,
    StatSnapshot,
)
from castline.core.timeline.models.timeline import TimelineState

logger = logging.getLogger(__name__)


class UnknownTargetError(KeyError):
    """Raised when a stat query names an actor that is not in the state."""


class EffectResolutionEngine:
    """Recomputes resolved instances, lanes and stats for a timeline state."""

    def resolve(self, state: TimelineState) -> ResolutionResult:
        """Run expansion, overwrite resolution and lane allocation.

        Args:
            state: Immutable input snapshot.

        Returns:
            ResolutionResult with instances, lanes per target (students
            then enemy) and diagnostics.
        """
        diagnostics: list[EngineDiagnostic] = []

        raw = InstanceExpander(state.config).expand(state, diagnostics)
        resolved = resolve_overwrites(raw)

        lanes: dict[str, LaneAssignment] = {}
        for target in state.all_targets:
            lanes[target.id] = allocate_lanes(
                target.id, [i for i in resolved if i.target_id == target.id]
            )

        logger.info(
            "Resolved timeline: %d events, %d raw instances, %d resolved, %d diagnostics",
            len(state.events),
            len(raw),
            len(resolved),
            len(diagnostics),
        )

        return ResolutionResult(
            instances=tuple(resolved),
            lanes=lanes,
            diagnostics=tuple(diagnostics),
        )

    def inspect(
        self,
        state: TimelineState,
        target_id: str,
        time: float,
        result: ResolutionResult | None = None,
    ) -> StatSnapshot:
        """Compute one actor's stats at ``time``.

        Args:
            state: Input snapshot (supplies the actor's base stats).
            target_id: Student or enemy id.
            time: Query time in seconds.
            result: A previous ``resolve(state)`` result to reuse.

        Returns:
            StatSnapshot for the actor.

        Raises:
            UnknownTargetError: If ``target_id`` is not in the state.
        """
        target = state.get_actor(target_id)
        if target is None:
            raise UnknownTargetError(target_id)
        if result is None:
            result = self.resolve(state)
        return compute_stats_at(target, time, result.instances)


__all__ = [
    "EffectResolutionEngine",
    "UnknownTargetError",
]
